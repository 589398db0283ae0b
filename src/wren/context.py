"""Request-scoped context via ContextVar.

Provides:
- ``request_var``: the current ``Request``.
- ``route_var``: the parsed ``RouteDescriptor`` for the current request.
- ``access_token_var``: the verified ``AccessToken`` (or ``None``).
- ``caller_var``: the caller's user id once identity is established.

All are set by the ASGI handler and the dispatcher, and reset after each
request. Nothing here survives from one request to the next.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local otherwise.
    No locks needed.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wren.auth.tokens import AccessToken
    from wren.http.request import Request
    from wren.routing.route import RouteDescriptor

request_var: ContextVar[Request] = ContextVar("wren_request")
"""The current request. Set by the ASGI handler before dispatch."""

route_var: ContextVar[RouteDescriptor] = ContextVar("wren_route")
"""The parsed route. Set by the dispatcher once the URI is parsed."""

access_token_var: ContextVar[AccessToken | None] = ContextVar("wren_access_token", default=None)
"""The verified access token, ``None`` for anonymous callers."""

caller_var: ContextVar[str | None] = ContextVar("wren_caller", default=None)
"""The authenticated caller's user id, ``None`` for anonymous callers."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()


def get_route() -> RouteDescriptor:
    """Return the current route descriptor.

    Raises ``LookupError`` before the dispatcher has parsed the URI.
    """
    return route_var.get()


def get_access_token() -> AccessToken | None:
    """Return the verified access token for this request, if any."""
    return access_token_var.get()


def get_caller_id() -> str | None:
    """Return the authenticated caller's user id, if any."""
    return caller_var.get()
