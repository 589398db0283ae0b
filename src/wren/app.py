"""Wren application class.

Mutable during setup (controllers, modules, formats, hooks).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import inspect
import threading
from collections.abc import Callable, Iterable
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren.auth.tokens import ContextIdentity, IdentityService, MemoryTokenStore, TokenStore
from wren.config import ApiConfig
from wren.controller import Controller
from wren.hooks import RouterHook
from wren.modules import ApiModule, installed_modules
from wren.output.formats import OutputFormat
from wren.output.registry import FormatRegistry
from wren.routing.registry import NamespaceRegistry
from wren.server.dispatcher import ApiRouter
from wren.server.handler import handle_request

APP_NAMESPACE = "app"


class ApiApp:
    """The wren application: an ASGI callable serving ``/api/...``.

    Usage::

        app = ApiApp(token_store=tokens)

        @app.controller
        class Widgets(Controller):
            def get_list(self) -> ApiResponse:
                return ApiResponse(data=[...])

        app.add_module(ApiModule(slug="acme/shop", namespace="shop", package="shop.api"))

    Controllers registered with ``@app.controller`` live under the
    ``app`` namespace (``/api/app/widgets/list``).

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check to ensure exactly
        one thread builds the registries, even when several ASGI workers
        call ``__call__()`` concurrently on first request.
    """

    __slots__ = (
        "_app_formats",
        "_controller_map",
        "_controllers",
        "_discover_installed",
        "_error_handler",
        "_freeze_lock",
        "_frozen",
        "_modules",
        # Compiled state (populated by _freeze)
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
        "hook",
        "identity",
        "token_store",
    )

    def __init__(
        self,
        config: ApiConfig | None = None,
        *,
        token_store: TokenStore | None = None,
        identity: IdentityService | None = None,
        hook: RouterHook | None = None,
        modules: Iterable[ApiModule] = (),
        discover_installed: bool = False,
    ) -> None:
        self.config: ApiConfig = config or ApiConfig()
        self.token_store: TokenStore = token_store if token_store is not None else MemoryTokenStore()
        self.identity: IdentityService = identity if identity is not None else ContextIdentity()
        self.hook: RouterHook = hook if hook is not None else RouterHook()
        self._modules: list[ApiModule] = list(modules)
        self._discover_installed = discover_installed
        self._controllers: list[type[Controller]] = []
        self._controller_map: dict[str, str] = {}
        self._app_formats: list[OutputFormat] = []
        self._error_handler: Callable[..., Any] | None = None
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()
        self._router: ApiRouter | None = None

    # -- Registration --

    def controller[C: type[Controller]](self, cls: C) -> C:
        """Register a controller under the ``app`` namespace via decorator."""
        self._check_not_frozen()
        self._controllers.append(cls)
        return cls

    def map_controller(self, alias: str, target: str) -> None:
        """Serve the ``app`` controller *target* under the name *alias* only."""
        self._check_not_frozen()
        self._controller_map[alias] = target

    def add_module(self, module: ApiModule) -> None:
        """Add a module that owns its own namespace."""
        self._check_not_frozen()
        self._modules.append(module)

    def add_format(self, output: OutputFormat) -> None:
        """Register an output format. Overrides built-in and module formats."""
        self._check_not_frozen()
        self._app_formats.append(output)

    def error_handler(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register the handler for failures that escape the dispatcher.

        Only production deployments reach it; elsewhere the dispatcher
        renders unexpected errors itself. The handler may accept zero,
        one (request), or two (request, exc) arguments and return a
        ``Response`` or a JSON-serialisable value.
        """
        self._check_not_frozen()
        self._error_handler = func
        return func

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator.

        Hooks run in registration order during ASGI lifespan shutdown.
        """
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Runtime --

    @property
    def router(self) -> ApiRouter:
        """The dispatcher. Freezes the app on first access."""
        self._ensure_frozen()
        assert self._router is not None
        return self._router

    def run(self, host: str | None = None, port: int | None = None, *, reload: bool | None = None) -> None:
        """Serve the app with pounce.

        Reloads on code changes outside production unless told otherwise.
        """
        self._ensure_frozen()
        from wren.server.dev import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            reload=not self.config.is_production if reload is None else reload,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(scope, receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            router=self.router,
            config=self.config,
            error_handler=self._error_handler,
        )

    async def _handle_lifespan(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
    ) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup so configuration errors (namespace
        conflicts, bad modules) fail the deploy instead of the first
        request.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    for hook in self._startup_hooks:
                        result = hook()
                        if inspect.isawaitable(result):
                            await result
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    await send(
                        {
                            "type": "lifespan.startup.failed",
                            "message": str(exc),
                        }
                    )
                    return

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    result = hook()
                    if inspect.isawaitable(result):
                        await result
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Build the registries and the dispatcher.

        MUST only be called while holding _freeze_lock.
        """
        modules: list[ApiModule] = []
        if self._controllers or self._controller_map:
            modules.append(
                ApiModule(
                    slug=APP_NAMESPACE,
                    namespace=APP_NAMESPACE,
                    controllers=tuple(self._controllers),
                    controller_map=dict(self._controller_map),
                )
            )
        modules.extend(self._modules)
        if self._discover_installed:
            modules.extend(installed_modules())

        formats = FormatRegistry.build(
            module_formats=[output for module in modules for output in module.formats],
            app_formats=self._app_formats,
            default=self.config.default_format,
        )
        registry = NamespaceRegistry.discover(modules)

        self._router = ApiRouter(
            self.config,
            formats,
            registry,
            self.token_store,
            self.identity,
            self.hook,
        )
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register controllers, modules, and formats before calling app.run()."
            )
            raise RuntimeError(msg)
