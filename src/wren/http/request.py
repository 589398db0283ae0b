"""Immutable HTTP request.

Frozen metadata with async body access. Controllers read the same
object the dispatcher authenticated.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

from wren._internal.asgi import Receive
from wren.http.forms import parse_multipart
from wren.http.headers import Headers
from wren.http.params import Params


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, query) is frozen at creation.
    Body is read asynchronously via ``.body()``, ``.json()``, ``.form()``
    and cached, so the dispatcher and the controller can both read it.
    """

    method: str
    path: str
    headers: Headers
    query: Params
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: mutable cache for body and parsed form data
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def url(self) -> str:
        """Path plus query string, as the client sent it."""
        qs = self._cache.get("_query_string", b"")
        if qs:
            return f"{self.path}?{qs.decode('latin-1')}"
        return self.path

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body (consumed once, then cached)."""
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def form(self) -> Params:
        """Parse the body as form fields (URL-encoded or multipart) or a JSON object.

        Bodies of any other type, or that fail to decode, yield empty params;
        callers needing strict JSON should use ``.json()``. Multipart bodies
        require ``pip install wren[forms]``.
        """
        if "_form" in self._cache:
            return self._cache["_form"]

        raw = await self.body()
        ct = (self.content_type or "application/x-www-form-urlencoded").lower()
        if not raw:
            result = Params()
        elif "json" in ct:
            try:
                result = Params.from_json_object(json_module.loads(raw))
            except ValueError:
                result = Params()
        elif "x-www-form-urlencoded" in ct:
            result = Params.from_query_string(raw)
        elif ct.startswith("multipart/form-data"):
            try:
                result = parse_multipart(raw, self.content_type or "")
            except ValueError:
                result = Params()
        else:
            result = Params()

        self._cache["_form"] = result
        return result

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: dict[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        client = scope.get("client")
        query_string = scope.get("query_string", b"")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=Params.from_query_string(query_string),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
            _receive=receive,
            _cache={"_query_string": query_string},
        )
