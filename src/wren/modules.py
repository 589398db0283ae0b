"""API modules — the pluggable units that contribute controllers.

A module owns one namespace (the ``{module}`` path segment) and the
controllers under it. Controllers can be listed explicitly, collected by
scanning a package, or both::

    shop = ApiModule(
        slug="acme/shop",
        namespace="shop",
        package="acme_shop.api.controller",
        controller_map={"Basket": "Cart"},
    )

Installed distributions can advertise modules through the ``wren.modules``
entry-point group; each entry point resolves to an ``ApiModule`` or a
zero-argument callable returning one.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from collections.abc import Mapping
from dataclasses import dataclass, field
from importlib.metadata import entry_points
from types import ModuleType

from wren.controller import Controller
from wren.errors import ConfigurationError
from wren.output.formats import OutputFormat

logger = logging.getLogger("wren.registry")

ENTRY_POINT_GROUP = "wren.modules"


@dataclass(frozen=True, slots=True)
class ApiModule:
    """One application module's API metadata.

    Attributes:
        slug: Identifies the module in error messages (e.g. ``"acme/shop"``).
        namespace: The ``{module}`` path segment its controllers live under.
        controllers: Controller classes registered explicitly.
        package: Dotted package scanned for ``Controller`` subclasses.
        controller_map: Route alias to controller class name. Remapped
            controllers are only reachable through their alias.
        formats: Extra output formats; application formats override them.
    """

    slug: str
    namespace: str | None = None
    controllers: tuple[type[Controller], ...] = ()
    package: str | None = None
    controller_map: Mapping[str, str] = field(default_factory=dict)
    formats: tuple[OutputFormat, ...] = ()

    @property
    def declares_controllers(self) -> bool:
        return bool(self.controllers) or self.package is not None

    def collect_controllers(self) -> tuple[type[Controller], ...]:
        """Explicit controllers followed by those found in ``package``."""
        found = list(self.controllers)
        if self.package is not None:
            found.extend(c for c in scan_controllers(self.package) if c not in found)
        return tuple(found)


def scan_controllers(package: str) -> tuple[type[Controller], ...]:
    """Import *package* and every submodule, returning concrete controllers.

    A class counts when it subclasses ``Controller``, is defined in the
    module being scanned (not merely imported there), and does not set
    ``__abstract__ = True`` in its own body.
    """
    try:
        root = importlib.import_module(package)
    except ModuleNotFoundError as exc:
        msg = f'API controller package "{package}" could not be imported: {exc}'
        raise ConfigurationError(msg) from exc

    modules: list[ModuleType] = [root]
    if hasattr(root, "__path__"):
        for info in pkgutil.walk_packages(root.__path__, prefix=f"{root.__name__}."):
            modules.append(importlib.import_module(info.name))

    found: list[type[Controller]] = []
    for module in modules:
        for _, obj in inspect.getmembers(module, inspect.isclass):
            if (
                obj.__module__ == module.__name__
                and issubclass(obj, Controller)
                and not obj.__dict__.get("__abstract__", False)
            ):
                found.append(obj)

    logger.debug("Scanned %s: %d controller(s)", package, len(found))
    return tuple(found)


def installed_modules(group: str = ENTRY_POINT_GROUP) -> list[ApiModule]:
    """Load the API modules advertised by installed distributions.

    Entry points are loaded in name order so discovery is deterministic.
    """
    modules: list[ApiModule] = []
    for ep in sorted(entry_points(group=group), key=lambda e: e.name):
        obj = ep.load()
        if callable(obj) and not isinstance(obj, ApiModule):
            obj = obj()
        if not isinstance(obj, ApiModule):
            msg = (
                f"Entry point {ep.name!r} in group {group!r} resolved to "
                f"{type(obj).__name__}, not an ApiModule."
            )
            raise ConfigurationError(msg)
        modules.append(obj)
    return modules
