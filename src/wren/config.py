"""API configuration.

ApiConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from wren.errors import ConfigurationError

type DetailPolicy = Literal["superuser", "environment", "superuser_or_environment", "never"]

DETAIL_POLICIES: tuple[DetailPolicy, ...] = (
    "superuser",
    "environment",
    "superuser_or_environment",
    "never",
)


def _environment_from_env() -> str:
    return os.environ.get("WREN_ENV", "development").lower()


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """API configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ApiConfig(environment="production", log_dir="/var/log/api")

    The daily request log file is off by default (``log_dir=None``); log
    lines are still mirrored to the ``wren.api`` logger at info, so set
    ``log_dir`` to also get ``api-YYYY-MM-DD.log`` files on disk.

    ``exception_detail`` decides who sees the ``exception`` block on error
    envelopes. Errors raised by application code report ``{type, file,
    line}``; routing errors the pipeline builds itself (unknown route,
    bad format, failed auth) were never raised and report only ``type``.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Environment: "production" switches off pretty JSON and debug envelopes
    environment: str = field(default_factory=_environment_from_env)

    # Routing
    api_prefix: str = "api"
    default_format: str = "JSON"

    # Access tokens
    access_token_header: str = "X-Access-Token"
    access_token_param: str = "accessToken"
    accept_bearer_header: bool = True

    # CORS (sent on every response, preflight included)
    cors_allow_origin: str = "*"
    cors_allow_headers: tuple[str, ...] = ("X-Access-Token", "content", "origin", "content-type")
    cors_allow_methods: tuple[str, ...] = ("GET", "PUT", "POST", "DELETE", "OPTIONS")
    cors_allow_credentials: bool = True
    cors_max_age: int = 86400

    # Request log: None disables the daily file, lines still go to logging
    log_dir: str | Path | None = None
    log_name_pattern: str = "api-%Y-%m-%d.log"

    # Who sees {type, file, line} on error envelopes
    exception_detail: DetailPolicy = "superuser_or_environment"

    def __post_init__(self) -> None:
        if self.exception_detail not in DETAIL_POLICIES:
            msg = (
                f"exception_detail must be one of {', '.join(DETAIL_POLICIES)}, "
                f"got {self.exception_detail!r}"
            )
            raise ConfigurationError(msg)

    @property
    def is_production(self) -> bool:
        """True when running with ``environment="production"``."""
        return self.environment.lower() == "production"
