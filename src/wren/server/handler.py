"""ASGI handler — translates ASGI scope/messages to wren types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, hands API paths to the dispatcher, and sends
the Response back through ASGI send(). Anything the dispatcher lets
escape (production only) is caught here and answered without leaking
internals.
"""

import inspect
import json
import logging
from collections.abc import Callable
from contextvars import Token
from typing import Any

from wren._internal.asgi import Receive, Scope, Send
from wren.config import ApiConfig
from wren.context import access_token_var, caller_var, request_var
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.route import is_api_path
from wren.server.dispatcher import ApiRouter
from wren.server.sender import send_response

logger = logging.getLogger("wren.server")

INTERNAL_ERROR_BODY = json.dumps({"status": 500, "error": "Internal Server Error"})


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: ApiRouter,
    config: ApiConfig,
    error_handler: Callable[..., Any] | None = None,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    # Identity never carries over from a previous request in this context
    tokens: tuple[Token[Any], ...] = (
        request_var.set(request),
        access_token_var.set(None),
        caller_var.set(None),
    )
    try:
        if is_api_path(request.path, config.api_prefix):
            response = await router.dispatch(request)
        else:
            response = Response(body="Not Found", status=404, content_type="text/plain; charset=utf-8")
    except Exception as exc:
        logger.exception("Unhandled error in %s %s", request.method, request.path)
        response = await handle_internal_error(exc, request, error_handler)
    finally:
        caller_var.reset(tokens[2])
        access_token_var.reset(tokens[1])
        request_var.reset(tokens[0])

    await send_response(response, send)


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handler: Callable[..., Any] | None,
) -> Response:
    """Answer an unexpected failure with the app's handler or a generic 500."""
    if error_handler is not None:
        try:
            return await call_error_handler(error_handler, request, exc)
        except Exception:
            logger.exception("Error handler failed for %s %s", request.method, request.path)
    return Response(body=INTERNAL_ERROR_BODY, status=500)


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
) -> Response:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (request), or two (request, exc) args.
    Supports both sync and async error handlers. A non-Response return
    value is sent as a JSON 500.
    """
    sig = inspect.signature(handler)
    params = list(sig.parameters.values())

    if len(params) >= 2:
        result = handler(request, exc)
    elif len(params) == 1:
        result = handler(request)
    else:
        result = handler()

    if inspect.isawaitable(result):
        result = await result

    if isinstance(result, Response):
        return result
    return Response(body=json.dumps(result, default=str), status=500)
