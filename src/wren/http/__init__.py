"""HTTP primitives — immutable request, chainable response, headers, params."""

from wren.http.headers import Headers
from wren.http.params import Params
from wren.http.request import Request
from wren.http.response import Response

__all__ = ["Headers", "Params", "Request", "Response"]
