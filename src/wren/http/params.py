"""Immutable multi-value parameters for query strings and form bodies.

URL-encoded forms and query strings share one parser (stdlib
``urllib.parse``); JSON bodies are flattened to their top-level keys.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import parse_qs


class Params(Mapping[str, str]):
    """Immutable parameter mapping.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, list[str]] | None = None) -> None:
        object.__setattr__(self, "_data", {k: list(v) for k, v in (data or {}).items()})

    @classmethod
    def from_query_string(cls, raw: bytes | str) -> Params:
        """Parse ``a=1&b=2`` (bytes from ASGI, or text)."""
        text = raw.decode("latin-1") if isinstance(raw, bytes) else raw
        return cls(parse_qs(text, keep_blank_values=True))

    @classmethod
    def from_json_object(cls, payload: Any) -> Params:
        """Expose the scalar top-level keys of a decoded JSON object.

        Anything other than an object yields empty params.
        """
        if not isinstance(payload, dict):
            return cls()
        data: dict[str, list[str]] = {}
        for key, value in payload.items():
            if isinstance(value, str | int | float | bool):
                data[str(key)] = [str(value)]
        return cls(data)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Params are immutable"
        raise AttributeError(msg)

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Params({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    def get_int(self, key: str, default: int | None = None) -> int | None:
        """Return value as int, or *default* if missing or not numeric."""
        value = self.get(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default
