"""Auth/scope gate — asks the controller class whether the caller may proceed."""

from collections.abc import Mapping

from wren._internal.invoke import invoke
from wren.auth.tokens import AccessToken, TokenStore
from wren.controller import AuthFailure, Controller
from wren.errors import ApiError, Unauthorized
from wren.result import Err, Ok, Result
from wren.routing.route import RouteDescriptor

LOGIN_REQUIRED = "You must be logged in to access this resource"


async def check_access(
    controller: type[Controller],
    route: RouteDescriptor,
    token: AccessToken | None,
    store: TokenStore,
) -> Result[None]:
    """Run the controller's ``is_authenticated`` predicate and scope requirement.

    - ``True`` passes
    - ``False`` is a 401 "must be logged in"
    - ``AuthFailure`` or an ``{"error", "status"}`` mapping overrides both
    - a non-empty ``REQUIRE_SCOPE`` must be carried by the access token
    """
    decision = await invoke(controller.is_authenticated, route.http_method, route.method)

    if decision is not True:
        match decision:
            case AuthFailure(error=error, status=status):
                return Err(ApiError(status=status or 401, message=error or "Unauthorized"))
            case Mapping():
                return Err(
                    ApiError(
                        status=int(decision.get("status") or 401),
                        message=str(decision.get("error") or "Unauthorized"),
                    )
                )
            case _:
                return Err(Unauthorized(LOGIN_REQUIRED))

    scope = controller.REQUIRE_SCOPE
    if scope and (token is None or not await invoke(store.has_scope, token, scope)):
        return Err(Unauthorized(f'Access token with "{scope}" scope is required.'))

    return Ok(None)
