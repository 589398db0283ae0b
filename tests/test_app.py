"""Tests for wren.app — ApiApp registration, freezing, and ASGI lifespan."""

from typing import Any

import pytest

import wren.app
from fixture_formats import KeyValueOutput
from wren.app import ApiApp
from wren.config import ApiConfig
from wren.controller import Controller
from wren.envelope import ApiResponse
from wren.errors import NamespaceConflictError
from wren.modules import ApiModule
from wren.testing import TestClient, response_json


class Widgets(Controller):
    def get_index(self) -> ApiResponse:
        return ApiResponse(data="widgets")


class Gadgets(Controller):
    def get_index(self) -> ApiResponse:
        return ApiResponse(data="gadgets")


async def _lifespan(app: ApiApp, *messages: str) -> list[dict[str, Any]]:
    """Drive the ASGI lifespan protocol and return what the app sent."""
    queue = [{"type": f"lifespan.{name}"} for name in messages]
    sent: list[dict[str, Any]] = []

    async def receive() -> dict[str, Any]:
        return queue.pop(0)

    async def send(message: dict[str, Any]) -> None:
        sent.append(message)

    await app({"type": "lifespan"}, receive, send)
    return sent


class TestAppRegistration:
    def test_controller_decorator(self) -> None:
        app = ApiApp()

        @app.controller
        class Things(Controller):
            pass

        assert app._controllers == [Things]

    def test_add_module(self) -> None:
        app = ApiApp()
        module = ApiModule(slug="acme/shop", namespace="shop", controllers=(Widgets,))
        app.add_module(module)
        assert app.router.registry.resolve("shop", "widgets") is Widgets

    def test_modules_argument(self) -> None:
        module = ApiModule(slug="acme/shop", namespace="shop", controllers=(Widgets,))
        app = ApiApp(modules=[module])
        assert "shop" in app.router.registry

    def test_app_namespace_only_when_used(self) -> None:
        assert "app" not in ApiApp().router.registry

    def test_map_controller(self) -> None:
        app = ApiApp()
        app.controller(Widgets)
        app.map_controller("things", "Widgets")
        assert app.router.registry.resolve("app", "things") is Widgets
        assert app.router.registry.resolve("app", "widgets") is None

    def test_defaults(self) -> None:
        app = ApiApp()
        assert isinstance(app.config, ApiConfig)
        assert app.token_store is not None
        assert app.identity is not None


class TestFreeze:
    def test_router_is_built_once(self) -> None:
        app = ApiApp()
        assert app.router is app.router

    def test_cannot_register_after_freeze(self) -> None:
        app = ApiApp()
        app._ensure_frozen()
        with pytest.raises(RuntimeError, match="Cannot modify"):
            app.controller(Widgets)
        with pytest.raises(RuntimeError):
            app.add_module(ApiModule(slug="late"))
        with pytest.raises(RuntimeError):
            app.on_startup(lambda: None)

    def test_namespace_conflict_fails_at_freeze(self) -> None:
        app = ApiApp()
        app.controller(Widgets)
        app.add_module(ApiModule(slug="acme/app", namespace="app", controllers=(Gadgets,)))
        with pytest.raises(NamespaceConflictError):
            app._ensure_frozen()

    def test_discover_installed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        module = ApiModule(slug="acme/gadgets", namespace="gadgets", controllers=(Gadgets,))
        monkeypatch.setattr(wren.app, "installed_modules", lambda: [module])
        app = ApiApp(discover_installed=True)
        assert app.router.registry.resolve("gadgets", "gadgets") is Gadgets

    def test_installed_modules_ignored_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def fail() -> list[ApiModule]:
            raise AssertionError("should not be called")

        monkeypatch.setattr(wren.app, "installed_modules", fail)
        assert len(ApiApp().router.registry) == 0


class TestLifespan:
    async def test_startup_and_shutdown(self) -> None:
        app = ApiApp()
        calls: list[str] = []

        @app.on_startup
        async def start() -> None:
            calls.append("start")

        @app.on_shutdown
        def stop() -> None:
            calls.append("stop")

        sent = await _lifespan(app, "startup", "shutdown")
        assert sent == [
            {"type": "lifespan.startup.complete"},
            {"type": "lifespan.shutdown.complete"},
        ]
        assert calls == ["start", "stop"]
        assert app._frozen

    async def test_configuration_error_fails_startup(self) -> None:
        app = ApiApp()
        app.add_module(ApiModule(slug="one", namespace="shop", controllers=(Widgets,)))
        app.add_module(ApiModule(slug="two", namespace="shop", controllers=(Gadgets,)))
        sent = await _lifespan(app, "startup")
        assert sent[0]["type"] == "lifespan.startup.failed"
        assert 'Conflicting API namespace "shop"' in sent[0]["message"]


class TestCustomFormats:
    async def test_application_format(self) -> None:
        app = ApiApp(ApiConfig(environment="production"))
        app.controller(Widgets)
        app.add_format(KeyValueOutput())
        async with TestClient(app) as client:
            response = await client.get("/api/app/widgets.kv")
        assert response.content_type == "text/plain"
        assert response.text == "status=200\ndata=widgets\nmeta={}"

    async def test_module_format_overridden_by_application(self) -> None:
        app = ApiApp(ApiConfig(environment="production"))
        app.add_module(
            ApiModule(
                slug="acme/shop",
                namespace="shop",
                controllers=(Widgets,),
                formats=(KeyValueOutput(content_type="text/x-module"),),
            )
        )
        app.add_format(KeyValueOutput(content_type="text/x-app"))
        async with TestClient(app) as client:
            response = await client.get("/api/shop/widgets.kv")
        assert response.content_type == "text/x-app"

    async def test_module_format(self) -> None:
        app = ApiApp(
            ApiConfig(environment="production"),
            modules=[
                ApiModule(
                    slug="acme/shop",
                    namespace="shop",
                    controllers=(Widgets,),
                    formats=(KeyValueOutput(),),
                )
            ],
        )
        async with TestClient(app) as client:
            response = await client.get("/api/shop/widgets.KV")
        assert response.status == 200
        assert response.text.startswith("status=200")

    async def test_custom_default_format(self) -> None:
        app = ApiApp(ApiConfig(default_format="TEXT"))
        app.controller(Widgets)
        async with TestClient(app) as client:
            response = await client.get("/api/app/widgets")
        assert response.content_type == "text/html"
        assert response_json(response)["data"] == "widgets"


class TestRun:
    def test_run_uses_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import wren.server.dev

        calls: list[tuple[Any, ...]] = []

        def fake_run_server(app: Any, host: str, port: int, **kwargs: Any) -> None:
            calls.append((app, host, port, kwargs))

        monkeypatch.setattr(wren.server.dev, "run_server", fake_run_server)
        app = ApiApp(ApiConfig(host="0.0.0.0", port=9000, environment="production"))
        app.run()
        assert calls == [(app, "0.0.0.0", 9000, {"reload": False})]
        assert app._frozen
