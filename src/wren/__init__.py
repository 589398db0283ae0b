"""Wren — JSON API routing for ASGI.

Routes ``/api/{module}/{controller}/{method}[.format]`` to controller
handlers, with access-token auth, per-controller scope checks, and a
uniform ``{status, data, meta}`` / ``{status, error, details}`` envelope.

Basic usage::

    from wren import ApiApp, ApiResponse, Controller

    app = ApiApp()

    @app.controller
    class Widgets(Controller):
        def get_list(self) -> ApiResponse:
            return ApiResponse(data=["sprocket", "gear"])

    app.run()

``GET /api/app/widgets/list`` now answers
``{"status": 200, "data": ["sprocket", "gear"], "meta": {}}``.
"""

__version__ = "0.1.0-dev"
__all__ = [
    "AccessToken",
    "ApiApp",
    "ApiConfig",
    "ApiError",
    "ApiModule",
    "ApiResponse",
    "AuthFailure",
    "BadRequest",
    "ConfigurationError",
    "Controller",
    "MemoryTokenStore",
    "NotFound",
    "Request",
    "Response",
    "RouterHook",
    "Unauthorized",
    "WrenError",
    "get_access_token",
    "get_caller_id",
    "get_request",
    "get_route",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "ApiApp":
        from wren.app import ApiApp

        return ApiApp

    if name == "ApiConfig":
        from wren.config import ApiConfig

        return ApiConfig

    if name in ("Controller", "AuthFailure"):
        from wren import controller as _controller

        return getattr(_controller, name)

    if name == "ApiResponse":
        from wren.envelope import ApiResponse

        return ApiResponse

    if name == "ApiModule":
        from wren.modules import ApiModule

        return ApiModule

    if name == "RouterHook":
        from wren.hooks import RouterHook

        return RouterHook

    if name in ("AccessToken", "MemoryTokenStore"):
        from wren.auth import tokens as _tokens

        return getattr(_tokens, name)

    if name in ("Request", "Response"):
        from wren import http as _http

        return getattr(_http, name)

    if name in ("get_request", "get_route", "get_access_token", "get_caller_id"):
        from wren import context as _ctx

        return getattr(_ctx, name)

    if name in (
        "ApiError",
        "BadRequest",
        "ConfigurationError",
        "NotFound",
        "Unauthorized",
        "WrenError",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
