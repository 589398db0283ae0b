"""Response envelopes.

Handlers return an ``ApiResponse``; the dispatcher turns it (or an error)
into the uniform envelope that output formats render::

    {"status": 200, "data": [...], "meta": {...}}
    {"status": 404, "error": "...", "details": {...}}
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from wren.errors import ApiError

UNKNOWN_ERROR = "An unknown error occurred"


@dataclass(frozen=True, slots=True)
class ApiResponse:
    """What an API handler returns.

    Either carry ``data`` (plus optional ``meta``) for the output format to
    render, or a pre-rendered ``body`` that is sent verbatim::

        return ApiResponse(data=widgets, meta={"total": 42})
        return ApiResponse(code=201, data=created)
        return ApiResponse(body=csv_text, content_type="text/csv")
    """

    data: Any = None
    meta: Mapping[str, Any] = field(default_factory=dict)
    code: int = 200
    body: str | bytes | None = None
    content_type: str | None = None

    def with_data(self, data: Any) -> ApiResponse:
        """Return a new ApiResponse with a different payload."""
        return replace(self, data=data)

    def with_meta(self, meta: Mapping[str, Any]) -> ApiResponse:
        """Return a new ApiResponse with different meta."""
        return replace(self, meta=meta)

    def with_code(self, code: int) -> ApiResponse:
        """Return a new ApiResponse with a different status code."""
        return replace(self, code=code)

    def with_body(self, body: str | bytes, content_type: str | None = None) -> ApiResponse:
        """Return a new ApiResponse that bypasses the output format."""
        return replace(self, body=body, content_type=content_type)


def success_envelope(response: ApiResponse) -> dict[str, Any]:
    """Envelope for a handler's ``ApiResponse``."""
    return {
        "status": response.code or 200,
        "data": response.data,
        "meta": dict(response.meta),
    }


def error_envelope(error: ApiError) -> dict[str, Any]:
    """Envelope for a recoverable API error."""
    return {
        "status": error.status or 500,
        "error": error.message or UNKNOWN_ERROR,
        "details": dict(error.details or {}),
    }


def internal_error_envelope(exc: BaseException) -> dict[str, Any]:
    """Envelope for an unexpected exception (non-production only)."""
    return {
        "status": 500,
        "error": str(exc) or UNKNOWN_ERROR,
        "details": {},
        "exception": exception_block(exc),
    }


def exception_block(exc: BaseException) -> dict[str, Any]:
    """``{type, file, line}`` for debugging; empty entries are dropped.

    Errors produced by the pipeline itself were never raised, so they only
    carry their type.
    """
    block: dict[str, Any] = {"type": type(exc).__name__}
    if exc.__traceback__ is not None:
        frame = traceback.extract_tb(exc.__traceback__)[-1]
        block["file"] = frame.filename
        block["line"] = frame.lineno
    return {key: value for key, value in block.items() if value}
