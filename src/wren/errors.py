"""Wren exception hierarchy.

Shared across the registry, dispatcher, handler, and controllers so every
module raises and catches the same types.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app or module configuration is invalid.

    Typically raised during ``ApiApp._freeze()`` at startup, never per request.
    """


class NamespaceConflictError(ConfigurationError):
    """Two modules declared the same API namespace."""

    def __init__(self, namespace: str, first: str, second: str) -> None:
        self.namespace = namespace
        self.modules = (first, second)
        super().__init__(
            f'Conflicting API namespace "{namespace}" in use by "{second}" and "{first}"'
        )


class InvalidResponseError(WrenError):
    """A handler returned something other than an ``ApiResponse``.

    This is a bug in application code, not a routing failure, so it is
    never turned into a recoverable API error.
    """


@dataclass(frozen=True, slots=True, eq=False)
class ApiError(WrenError):
    """A recoverable error that maps directly to an error envelope.

    Raised by handler code or produced by the dispatch pipeline. The
    dispatcher renders these as ``{status, error, details}``.
    """

    status: int = 500
    message: str = ""
    details: Mapping[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.message:
            return f"{self.status}: {self.message}"
        return str(self.status)


class BadRequest(ApiError):  # noqa: N818
    """400 — malformed request (invalid format, validation failure)."""

    def __init__(self, message: str = "Bad Request", details: Mapping[str, Any] | None = None) -> None:
        super().__init__(status=400, message=message, details=details or {})


class Unauthorized(ApiError):  # noqa: N818
    """401 — missing, invalid, or insufficiently scoped credentials."""

    def __init__(self, message: str = "Unauthorized", details: Mapping[str, Any] | None = None) -> None:
        super().__init__(status=401, message=message, details=details or {})


class NotFound(ApiError):  # noqa: N818
    """404 — no namespace, controller, or handler matched the request."""

    def __init__(self, message: str = "Not Found", details: Mapping[str, Any] | None = None) -> None:
        super().__init__(status=404, message=message, details=details or {})
