"""Base class for API controllers.

A controller groups the handlers for one ``{controller}`` path segment.
Handlers are plain methods named by convention::

    class Widgets(Controller):
        def get_list(self) -> ApiResponse: ...          # GET  .../widgets/list
        def put_remap(self, method: str) -> ApiResponse: ...  # PUT .../widgets/<anything>
        def any_index(self) -> ApiResponse: ...         # any verb .../widgets

Resolution order and argument passing live in ``wren.routing.methods``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

from wren.context import get_access_token, get_caller_id, get_request, get_route

if TYPE_CHECKING:
    from wren.auth.tokens import AccessToken
    from wren.http.request import Request
    from wren.routing.route import RouteDescriptor
    from wren.server.dispatcher import ApiRouter


@dataclass(frozen=True, slots=True)
class AuthFailure:
    """Structured refusal returned from ``Controller.is_authenticated``.

    Overrides the default 401 message and status.
    """

    error: str = "Unauthorized"
    status: int = 401


type AuthDecision = bool | AuthFailure | Mapping[str, Any]


class Controller:
    """Base class of every API controller.

    Class attributes:
        REQUIRE_AUTH: Callers must be logged in for any handler.
        REQUIRE_SCOPE: The caller's access token must carry this scope.
        NAME: Route name when it differs from the class name.

    Set ``__abstract__ = True`` on intermediate base classes so package
    scanning skips them.
    """

    __abstract__: ClassVar[bool] = True

    REQUIRE_AUTH: ClassVar[bool] = False
    REQUIRE_SCOPE: ClassVar[str] = ""
    NAME: ClassVar[str | None] = None

    def __init__(self, router: ApiRouter) -> None:
        self.router = router

    @classmethod
    def controller_name(cls) -> str:
        """The name this controller is registered under."""
        return cls.NAME or cls.__name__

    @classmethod
    def is_authenticated(cls, http_method: str = "", method: str = "") -> AuthDecision:
        """Whether the current caller may use this controller.

        Return ``True`` to allow, ``False`` for the default "must be logged
        in" 401, or an ``AuthFailure`` (or ``{"error", "status"}`` mapping)
        to customise the response. Override for per-verb or per-method rules.
        """
        return not cls.REQUIRE_AUTH or get_caller_id() is not None

    # -- Request context --

    @property
    def request(self) -> Request:
        return get_request()

    @property
    def route(self) -> RouteDescriptor:
        return get_route()

    @property
    def access_token(self) -> AccessToken | None:
        return get_access_token()

    @property
    def caller_id(self) -> str | None:
        return get_caller_id()

    def write_log(self, line: Any) -> None:
        """Write a line to the API request log, tagged with the current route."""
        self.router.write_log(line)
