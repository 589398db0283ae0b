"""Route descriptor — the parsed ``{module}/{controller}/{method}`` of one request.

The URI is analysed by hand rather than matched against a route table:
the optional ``.format`` suffix is stripped first, then the API prefix,
then the remainder is split into positional segments.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

# One trailing ".<letters>": "widgets.json" and "widgets." match, "v1.2/x" does not
_FORMAT_SUFFIX = re.compile(r"\.([A-Za-z]*)$")


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """A parsed API route. Immutable once built.

    ``params`` holds any segments beyond the third; they are routed to
    remap handlers after the method name.
    """

    http_method: str
    module: str
    controller: str
    method: str = "index"
    requested_format: str | None = None
    params: tuple[str, ...] = ()

    @property
    def route_string(self) -> str:
        """``module/controller/method`` lower-cased, as used in error messages."""
        return f"{self.module}/{self.controller}/{self.method}".lower()

    @property
    def log_tag(self) -> str:
        """``[module->method]`` tag prefixed to request log lines."""
        return f"[{self.module}->{self.method}]"


def split_format(path: str) -> tuple[str, str | None]:
    """Strip one trailing ``.ext`` suffix, returning ``(path, FORMAT)``.

    The format is upper-cased; an empty suffix (``"widgets."``) yields ``None``.

    Examples::

        "api/app/widgets/list.json" -> ("api/app/widgets/list", "JSON")
        "api/app/widgets/list"      -> ("api/app/widgets/list", None)
    """
    match = _FORMAT_SUFFIX.search(path)
    if match is None:
        return path, None
    return path[: match.start()], match.group(1).upper() or None


@lru_cache(maxsize=8)
def prefix_pattern(prefix: str) -> re.Pattern[str]:
    """Compile the matcher for the API prefix (leading slash optional)."""
    return re.compile(rf"^/?{re.escape(prefix.strip('/'))}(?:/|$)")


def is_api_path(path: str, prefix: str = "api") -> bool:
    """True when *path* lives under the API prefix."""
    return prefix_pattern(prefix).match(path) is not None


def parse_route(http_method: str, path: str, *, prefix: str = "api") -> RouteDescriptor:
    """Parse a request path into a ``RouteDescriptor``.

    Segments keep their case. The controller segment defaults to the module
    segment and the method segment defaults to ``"index"``::

        parse_route("GET", "/api/app/widgets/list.json")
        # RouteDescriptor("GET", "app", "widgets", "list", "JSON")

        parse_route("GET", "/api/shop")
        # RouteDescriptor("GET", "shop", "shop", "index", None)
    """
    bare, requested_format = split_format(path)
    bare = prefix_pattern(prefix).sub("", bare, count=1).strip("/")
    segments = bare.split("/") if bare else []

    module = segments[0] if segments else ""
    controller = segments[1] if len(segments) > 1 and segments[1] else module
    method = segments[2] if len(segments) > 2 and segments[2] else "index"

    return RouteDescriptor(
        http_method=http_method.upper() or "GET",
        module=module,
        controller=controller,
        method=method,
        requested_format=requested_format,
        params=tuple(segments[3:]),
    )
