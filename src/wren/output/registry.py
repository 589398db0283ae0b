"""Format registry — upper-case slug to ``OutputFormat``.

Built once at freeze from three layers, later layers winning: the
built-in formats, formats supplied by API modules, formats supplied by
the application itself. Read-only afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from wren.errors import ConfigurationError
from wren.output.formats import JsonOutput, OutputFormat, TextOutput

BUILTIN_FORMATS: tuple[OutputFormat, ...] = (JsonOutput(), TextOutput())


class FormatRegistry:
    """Immutable lookup of output formats by slug or alias (case-insensitive)."""

    __slots__ = ("_default", "_formats")

    def __init__(self, formats: Mapping[str, OutputFormat], default: str = "JSON") -> None:
        key = default.upper()
        if key not in formats:
            msg = f'Default output format "{key}" is not registered.'
            raise ConfigurationError(msg)
        self._formats: Mapping[str, OutputFormat] = MappingProxyType(dict(formats))
        self._default = formats[key]

    @classmethod
    def build(
        cls,
        *,
        module_formats: Iterable[OutputFormat] = (),
        app_formats: Iterable[OutputFormat] = (),
        default: str = "JSON",
    ) -> FormatRegistry:
        """Layer built-in, module, then application formats."""
        table: dict[str, OutputFormat] = {}
        for layer in (BUILTIN_FORMATS, module_formats, app_formats):
            for fmt in layer:
                for name in (fmt.slug, *fmt.aliases):
                    table[name.upper()] = fmt
        return cls(table, default=default)

    def __contains__(self, slug: object) -> bool:
        return isinstance(slug, str) and slug.upper() in self._formats

    def __len__(self) -> int:
        return len(self._formats)

    def get(self, slug: str | None) -> OutputFormat | None:
        """Return the format for *slug*, or None if unregistered."""
        if not slug:
            return None
        return self._formats.get(slug.upper())

    def select(self, slug: str | None) -> OutputFormat:
        """Return the format for *slug*, falling back to the default."""
        return self.get(slug) or self._default

    @property
    def default(self) -> OutputFormat:
        return self._default

    @property
    def slugs(self) -> tuple[str, ...]:
        """Every registered slug and alias, sorted."""
        return tuple(sorted(self._formats))
