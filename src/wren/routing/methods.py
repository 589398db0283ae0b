"""Method resolution — which controller handler serves a request.

Candidates are tried strictly in this order, first existing handler wins:

1. ``{verb}_remap``    catch-all for this verb, receives the method segment
2. ``{verb}_{method}`` exact match, no positional arguments
3. ``any_remap``       verb-agnostic catch-all, receives the method segment
4. ``any_{method}``    verb-agnostic exact match, no positional arguments

Remap handlers are the hook for anything past the third path segment:
they are called as ``handler(method, *extra_segments)``.

Handler names are collected once per controller class (``HandlerTable``)
instead of probing attributes by string on every request.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from wren._internal.invoke import invoke
from wren.controller import Controller
from wren.errors import ApiError, NotFound
from wren.result import Err, Ok, Result
from wren.routing.route import RouteDescriptor

VERBS = ("get", "post", "put", "patch", "delete", "head", "options", "any")

_HANDLER_NAME = re.compile(rf"^(?:{'|'.join(VERBS)})_[a-z0-9_]+$")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SEGMENT = re.compile(r"[0-9A-Za-z_-]+")

# Names the base class defines for its own use
_RESERVED = frozenset(name for name in dir(Controller) if not name.startswith("__"))


def method_identifier(segment: str) -> str | None:
    """Convert a method path segment to the suffix of a handler name.

    Examples::

        "list"        -> "list"
        "someMethod"  -> "some_method"
        "some-method" -> "some_method"
        "42"          -> "42"
        "list$$"      -> None
        "café"        -> None
        "---"         -> None

    Only ASCII letters, digits, ``_`` and ``-`` are accepted; anything else
    names no handler, leaving the remap handlers as the only candidates.
    """
    if not _SEGMENT.fullmatch(segment):
        return None
    snake = _CAMEL_BOUNDARY.sub("_", segment).replace("-", "_").lower()
    return snake if snake.strip("_") else None


@dataclass(frozen=True, slots=True)
class HandlerMatch:
    """The handler chosen for a request."""

    name: str
    is_remap: bool


@dataclass(frozen=True, slots=True)
class HandlerTable:
    """Every convention-named handler a controller class defines."""

    controller: type[Controller]
    names: frozenset[str]

    @classmethod
    def for_class(cls, controller: type[Controller]) -> HandlerTable:
        names = frozenset(
            name
            for name in dir(controller)
            if name not in _RESERVED
            and _HANDLER_NAME.match(name)
            and callable(getattr(controller, name, None))
        )
        return cls(controller=controller, names=names)

    def candidates(self, http_method: str, method: str) -> tuple[tuple[str, bool], ...]:
        """Handler names to try for *http_method* and the *method* segment, in order."""
        verb = http_method.lower()
        ident = method_identifier(method)
        ordered: list[tuple[str, bool]] = [(f"{verb}_remap", True)]
        if ident is not None:
            ordered.append((f"{verb}_{ident}", False))
        ordered.append(("any_remap", True))
        if ident is not None:
            ordered.append((f"any_{ident}", False))
        return tuple(ordered)

    def find(self, http_method: str, method: str) -> HandlerMatch | None:
        """Return the first candidate the controller defines, or None."""
        for name, is_remap in self.candidates(http_method, method):
            if name in self.names:
                return HandlerMatch(name=name, is_remap=is_remap)
        return None


def route_not_found(route: RouteDescriptor) -> NotFound:
    """404 for a controller that exists but has no matching handler."""
    return NotFound(f'"{route.http_method}: {route.route_string}" is not a valid API route.')


async def call_handler(
    instance: Controller,
    table: HandlerTable,
    route: RouteDescriptor,
) -> Result[Any]:
    """Find and invoke the handler for *route* on *instance*.

    An ``ApiError`` raised by the handler is returned as ``Err``; any other
    exception propagates to the dispatcher.
    """
    match = table.find(route.http_method, route.method)
    if match is None:
        return Err(route_not_found(route))

    args = (route.method, *route.params) if match.is_remap else ()
    try:
        value = await invoke(getattr(instance, match.name), *args)
    except ApiError as exc:
        return Err(exc)
    return Ok(value)
