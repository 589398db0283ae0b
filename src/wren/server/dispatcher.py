"""API request dispatcher — the hub every API request passes through.

``ApiRouter.dispatch`` turns one ``Request`` into one ``Response``::

    OPTIONS -> 204 preflight, nothing else runs
    parse route -> on_startup hook -> verify access token
      -> validate format -> resolve controller -> auth/scope gate
      -> instantiate -> on_ready hook -> resolve and call handler
      -> envelope -> render -> cache + CORS headers

Each pipeline step returns ``Ok`` or ``Err``; the first ``Err`` ends the
pipeline and becomes an error envelope. Exceptions are reserved for the
unexpected: outside production they are rendered as a 500 envelope with
debugging detail, in production they propagate to the ASGI handler.

Thread safety:
    Everything the router holds is immutable after construction. Per-
    request state lives in context variables.
"""

from __future__ import annotations

import logging
from typing import Any

from wren._internal.invoke import invoke
from wren.auth.gate import check_access
from wren.auth.tokens import AccessToken, IdentityService, TokenStore
from wren.auth.verifier import verify_access_token
from wren.config import ApiConfig
from wren.context import get_caller_id, route_var
from wren.envelope import (
    ApiResponse,
    error_envelope,
    exception_block,
    internal_error_envelope,
    success_envelope,
)
from wren.errors import ApiError, BadRequest, InvalidResponseError, NotFound
from wren.hooks import RouterHook
from wren.http.request import Request
from wren.http.response import Response
from wren.output.formats import OutputFormat
from wren.output.registry import FormatRegistry
from wren.result import Err, Ok, Result
from wren.routing.methods import call_handler
from wren.routing.registry import NamespaceRegistry
from wren.routing.route import RouteDescriptor, parse_route
from wren.server.cors import preflight_response, with_api_headers
from wren.server.logs import ApiLog

logger = logging.getLogger("wren.server")


class ApiRouter:
    """Dispatches API requests to controller handlers.

    Built once by ``ApiApp`` at freeze time from the frozen registries.
    Controllers receive the router as their constructor argument and may
    call back into it (``write_log``).
    """

    __slots__ = ("config", "formats", "hook", "identity", "log", "registry", "token_store")

    def __init__(
        self,
        config: ApiConfig,
        formats: FormatRegistry,
        registry: NamespaceRegistry,
        token_store: TokenStore,
        identity: IdentityService,
        hook: RouterHook | None = None,
        log: ApiLog | None = None,
    ) -> None:
        self.config = config
        self.formats = formats
        self.registry = registry
        self.token_store = token_store
        self.identity = identity
        self.hook = hook if hook is not None else RouterHook()
        self.log = log if log is not None else ApiLog(config.log_dir, config.log_name_pattern)
        self.hook.on_construct(self)

    async def dispatch(self, request: Request) -> Response:
        """Handle one API request. Never returns ``None``.

        Raises:
            Exception: Any unexpected failure, in production only.
        """
        if request.method == "OPTIONS":
            return preflight_response(self.config)

        route = parse_route(request.method, request.path, prefix=self.config.api_prefix)
        route_token = route_var.set(route)
        try:
            return await self._dispatch_route(request, route)
        finally:
            route_var.reset(route_token)

    def write_log(self, line: Any) -> None:
        """Append *line* to the request log, tagged with the current route."""
        self.log.write(route_var.get(None), line)

    # -- Pipeline --

    async def _dispatch_route(self, request: Request, route: RouteDescriptor) -> Response:
        # Errors render in the requested format when it exists, else the default
        output = self.formats.select(route.requested_format)

        try:
            result = await self._run(request, route)
        except Exception as exc:
            if self.config.is_production:
                raise
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            envelope = internal_error_envelope(exc)
            await self.log.awrite(route, envelope)
            return self._render(envelope, output)

        match result:
            case Ok(value=response):
                return self._render_response(response, output)
            case Err(error=error):
                return await self._render_error(error, route, output)

    async def _run(self, request: Request, route: RouteDescriptor) -> Result[ApiResponse]:
        await invoke(self.hook.on_startup, route)

        verified = await verify_access_token(request, self.config, self.token_store, self.identity)
        if isinstance(verified, Err):
            return verified
        token: AccessToken | None = verified.value

        if route.requested_format is not None and route.requested_format not in self.formats:
            return Err(BadRequest(f'"{route.requested_format}" is not a valid format.'))

        controller_cls = self.registry.resolve(route.module, route.controller)
        if controller_cls is None:
            return Err(NotFound(f'"{route.route_string}" is not a valid API route.'))

        allowed = await check_access(controller_cls, route, token, self.token_store)
        if isinstance(allowed, Err):
            return allowed

        controller = controller_cls(self)
        await invoke(self.hook.on_ready, route, controller)

        called = await call_handler(controller, self.registry.handlers_for(controller_cls), route)
        if isinstance(called, Err):
            return called
        if not isinstance(called.value, ApiResponse):
            msg = (
                f"{controller_cls.__qualname__} handler for {route.http_method} "
                f"{route.route_string} returned {type(called.value).__name__}, "
                f"expected ApiResponse"
            )
            raise InvalidResponseError(msg)
        return called

    # -- Output --

    async def _render_error(
        self, error: ApiError, route: RouteDescriptor, output: OutputFormat
    ) -> Response:
        envelope = error_envelope(error)
        if await self._shows_exception_detail():
            envelope["exception"] = exception_block(error)
        logger.debug("%s %s -> %s", route.http_method, route.route_string, error)
        await self.log.awrite(route, envelope)
        return self._render(envelope, output)

    async def _shows_exception_detail(self) -> bool:
        """Apply the configured ``exception_detail`` policy to this caller."""
        policy = self.config.exception_detail
        if policy == "never":
            return False
        if policy != "superuser" and not self.config.is_production:
            return True
        if policy == "environment":
            return False
        caller = get_caller_id()
        return caller is not None and bool(await invoke(self.identity.is_superuser, caller))

    def _render_response(self, response: ApiResponse, output: OutputFormat) -> Response:
        if response.body is not None:
            raw = Response(
                body=response.body,
                status=response.code or 200,
                content_type=response.content_type or output.content_type,
            )
            return with_api_headers(raw, self.config)
        return self._render(success_envelope(response), output)

    def _render(self, envelope: dict[str, Any], output: OutputFormat) -> Response:
        body = output.render(envelope, pretty=not self.config.is_production)
        raw = Response(body=body, status=envelope["status"], content_type=output.content_type)
        return with_api_headers(raw, self.config)
