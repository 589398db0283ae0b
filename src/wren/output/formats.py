"""Built-in output formats.

Any object with ``slug``, ``content_type``, ``aliases`` and ``render()``
is a format. The framework checks the shape, not the lineage.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol


class OutputFormat(Protocol):
    """Protocol for output formats.

    ``render`` receives the full envelope and returns the response body.
    ``pretty`` is True outside production.
    """

    @property
    def slug(self) -> str: ...

    @property
    def content_type(self) -> str: ...

    @property
    def aliases(self) -> tuple[str, ...]: ...

    def render(self, envelope: Mapping[str, Any], *, pretty: bool = False) -> str: ...


@dataclass(frozen=True, slots=True)
class TextOutput:
    """JSON body served as ``text/html``.

    For browsers and tools that cannot set an ``Accept`` header and would
    otherwise download the response instead of showing it.
    """

    slug: str = "TEXT"
    content_type: str = "text/html"
    aliases: tuple[str, ...] = ("TXT",)

    def render(self, envelope: Mapping[str, Any], *, pretty: bool = False) -> str:
        if pretty:
            return json.dumps(envelope, indent=4, default=str)
        return json.dumps(envelope, separators=(",", ":"), default=str)


@dataclass(frozen=True, slots=True)
class JsonOutput(TextOutput):
    """The default format."""

    slug: str = "JSON"
    content_type: str = "application/json"
    aliases: tuple[str, ...] = ()
