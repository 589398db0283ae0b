"""Controller/namespace registry.

Discovery runs once, when the app freezes. Configuration mistakes
(a module with controllers but no namespace, two modules claiming one
namespace) fail right there instead of surfacing as per-request 404s.
After discovery the table is read-only and safe to share between
concurrent requests without locks.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from wren.controller import Controller
from wren.errors import ConfigurationError, NamespaceConflictError
from wren.modules import ApiModule
from wren.routing.methods import HandlerTable

logger = logging.getLogger("wren.registry")

_SEPARATORS = re.compile(r"[-_]")


def controller_key(name: str) -> str:
    """Normalise a controller name or path segment for lookup.

    Lookups ignore case and ``-``/``_`` separators, so ``user-groups``,
    ``userGroups`` and ``UserGroups`` all find the ``UserGroups`` class.
    """
    return _SEPARATORS.sub("", name).lower()


@dataclass(frozen=True, slots=True)
class NamespaceEntry:
    """The controllers registered under one namespace."""

    namespace: str
    owner: str
    controllers: Mapping[str, type[Controller]]
    controller_map: Mapping[str, str]
    remap_targets: frozenset[str]

    def resolve(self, requested: str) -> type[Controller] | None:
        """Resolve a ``{controller}`` segment to a class, honouring remaps.

        A name that is the *target* of a remap is refused so the alias is
        the only route to that controller.
        """
        key = controller_key(requested)
        if key in self.controller_map:
            key = self.controller_map[key]
        elif key in self.remap_targets:
            return None
        return self.controllers.get(key)


class NamespaceRegistry:
    """Immutable namespace table with per-controller handler tables."""

    __slots__ = ("_entries", "_handlers")

    def __init__(
        self,
        entries: Mapping[str, NamespaceEntry],
        handlers: Mapping[type[Controller], HandlerTable],
    ) -> None:
        self._entries: Mapping[str, NamespaceEntry] = MappingProxyType(dict(entries))
        self._handlers: Mapping[type[Controller], HandlerTable] = MappingProxyType(dict(handlers))

    @classmethod
    def discover(cls, modules: Iterable[ApiModule]) -> NamespaceRegistry:
        """Build the registry from every module that contributes controllers.

        Raises:
            ConfigurationError: A module declares controllers but no
                namespace, lists a non-controller class, or registers two
                controllers under one name.
            NamespaceConflictError: Two modules declare the same namespace.
        """
        entries: dict[str, NamespaceEntry] = {}
        handlers: dict[type[Controller], HandlerTable] = {}

        for module in modules:
            if not module.namespace:
                if module.declares_controllers:
                    msg = f'Module "{module.slug}" declares API controllers but no API namespace.'
                    raise ConfigurationError(msg)
                continue

            if module.namespace in entries:
                raise NamespaceConflictError(
                    module.namespace, entries[module.namespace].owner, module.slug
                )

            controllers: dict[str, type[Controller]] = {}
            for controller in module.collect_controllers():
                if not (isinstance(controller, type) and issubclass(controller, Controller)):
                    msg = (
                        f'Module "{module.slug}" lists {controller!r}, '
                        f"which is not a Controller subclass."
                    )
                    raise ConfigurationError(msg)
                key = controller_key(controller.controller_name())
                if key in controllers and controllers[key] is not controller:
                    msg = (
                        f'Module "{module.slug}" registers two controllers named '
                        f'"{controller.controller_name()}": '
                        f"{controllers[key].__qualname__} and {controller.__qualname__}."
                    )
                    raise ConfigurationError(msg)
                controllers[key] = controller
                handlers[controller] = HandlerTable.for_class(controller)

            remap = {controller_key(k): controller_key(v) for k, v in module.controller_map.items()}
            entries[module.namespace] = NamespaceEntry(
                namespace=module.namespace,
                owner=module.slug,
                controllers=MappingProxyType(controllers),
                controller_map=MappingProxyType(remap),
                remap_targets=frozenset(remap.values()),
            )
            logger.debug(
                'Registered namespace "%s" from %s: %d controller(s)',
                module.namespace,
                module.slug,
                len(controllers),
            )

        return cls(entries, handlers)

    def __contains__(self, namespace: object) -> bool:
        return namespace in self._entries

    def __iter__(self) -> Iterator[NamespaceEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, namespace: str) -> NamespaceEntry | None:
        return self._entries.get(namespace)

    def resolve(self, namespace: str, requested: str) -> type[Controller] | None:
        """Return the controller class for ``{namespace}/{requested}``, or None."""
        entry = self._entries.get(namespace)
        if entry is None:
            return None
        return entry.resolve(requested)

    def handlers_for(self, controller: type[Controller]) -> HandlerTable:
        """The handler table built for *controller* at discovery."""
        table = self._handlers.get(controller)
        if table is None:
            table = HandlerTable.for_class(controller)
        return table
