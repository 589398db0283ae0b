"""CORS and cache-busting headers.

The API answers any origin by default, so the same CORS headers go out
on every response, not only on preflight. API responses are never
cacheable.
"""

from wren.config import ApiConfig
from wren.http.response import Response

NO_CACHE_HEADERS: tuple[tuple[str, str], ...] = (
    ("Cache-Control", "no-store, no-cache, must-revalidate"),
    ("Expires", "Mon, 26 Jul 1997 05:00:00 GMT"),
    ("Pragma", "no-cache"),
)


def cors_headers(config: ApiConfig) -> tuple[tuple[str, str], ...]:
    """The ``Access-Control-*`` headers for *config*."""
    headers = [
        ("Access-Control-Allow-Origin", config.cors_allow_origin),
        ("Access-Control-Allow-Headers", ", ".join(config.cors_allow_headers)),
        ("Access-Control-Allow-Methods", ", ".join(config.cors_allow_methods)),
    ]
    if config.cors_allow_credentials:
        headers.append(("Access-Control-Allow-Credentials", "true"))
    if config.cors_max_age:
        headers.append(("Access-Control-Max-Age", str(config.cors_max_age)))
    return tuple(headers)


def preflight_response(config: ApiConfig) -> Response:
    """204 with CORS headers and no body, for ``OPTIONS`` requests."""
    return Response(body="", status=204, headers=cors_headers(config))


def with_api_headers(response: Response, config: ApiConfig) -> Response:
    """Add the cache-busting and CORS headers every API response carries."""
    return response.with_headers(dict((*NO_CACHE_HEADERS, *cors_headers(config))))
