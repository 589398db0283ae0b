"""Access token verification.

Finds the caller's credential, resolves it through the token store and
establishes caller identity for the rest of the request. A request
without a credential proceeds anonymously; a request with a bad one
is refused.
"""

import logging

from wren._internal.invoke import invoke
from wren.auth.tokens import AccessToken, IdentityService, TokenStore
from wren.config import ApiConfig
from wren.context import access_token_var, caller_var
from wren.errors import Unauthorized
from wren.http.request import Request
from wren.result import Err, Ok, Result

logger = logging.getLogger("wren.auth")

INVALID_TOKEN = "Invalid access token"


async def extract_token(request: Request, config: ApiConfig) -> str | None:
    """Return the raw credential sent with *request*, if any.

    Sources, first non-empty wins:

    1. The ``X-Access-Token`` header (``config.access_token_header``)
    2. ``Authorization: Bearer <token>`` (unless ``accept_bearer_header`` is off)
    3. The ``accessToken`` field of a POST body (form-encoded or JSON)
    4. The ``accessToken`` query parameter
    """
    token = request.headers.get(config.access_token_header)

    if not token and config.accept_bearer_header:
        scheme, _, credentials = (request.headers.get("authorization") or "").partition(" ")
        if scheme.lower() == "bearer":
            token = credentials.strip()

    if not token and request.method == "POST":
        form = await request.form()
        token = form.get(config.access_token_param)

    if not token:
        token = request.query.get(config.access_token_param)

    return token or None


async def verify_access_token(
    request: Request,
    config: ApiConfig,
    store: TokenStore,
    identity: IdentityService,
) -> Result[AccessToken | None]:
    """Resolve the request's credential and establish caller identity.

    Returns ``Ok(None)`` for anonymous requests, ``Ok(token)`` once the
    caller is known, ``Err(Unauthorized)`` for unknown or expired tokens.
    """
    value = await extract_token(request, config)
    if value is None:
        return Ok(None)

    token = await invoke(store.get_by_valid_token, value)
    if token is None:
        logger.debug("Rejected access token for %s %s", request.method, request.path)
        return Err(Unauthorized(INVALID_TOKEN))

    access_token_var.set(token)
    caller_var.set(token.user_id)
    await invoke(identity.set_caller_identity, token.user_id)
    return Ok(token)
