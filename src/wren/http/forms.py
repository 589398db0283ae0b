"""Multipart form parsing.

``multipart/form-data`` bodies are parsed with ``python-multipart``, an
optional dependency (``pip install wren[forms]``). URL-encoded bodies go
through ``Params.from_query_string`` and need nothing extra.

Only plain fields are kept; file parts are skipped since nothing in the
API layer reads uploads from ``Request.form()``.
"""

from typing import Any

from wren.errors import ConfigurationError
from wren.http.params import Params


def parse_multipart(body: bytes, content_type: str) -> Params:
    """Parse a multipart body into params.

    Raises:
        ConfigurationError: ``python-multipart`` is not installed.
        ValueError: The boundary is missing or the body is malformed.
    """
    try:
        from python_multipart.multipart import MultipartParser, parse_options_header
    except ImportError:
        msg = (
            "Multipart form parsing requires the 'python-multipart' package. "
            "Install it with: pip install wren[forms]"
        )
        raise ConfigurationError(msg) from None

    _, options = parse_options_header(content_type.encode("latin-1"))
    boundary = options.get(b"boundary")
    if not boundary:
        msg = "Multipart form data missing boundary parameter"
        raise ValueError(msg)

    data: dict[str, list[str]] = {}

    current_name: str | None = None
    is_file = False
    current_data = bytearray()
    header_field = bytearray()
    header_value = bytearray()

    def on_part_begin() -> None:
        nonlocal current_name, is_file, current_data
        current_name = None
        is_file = False
        current_data = bytearray()

    def on_header_field(chunk: bytes, start: int, end: int) -> None:
        header_field.extend(chunk[start:end])

    def on_header_value(chunk: bytes, start: int, end: int) -> None:
        header_value.extend(chunk[start:end])

    def on_header_end() -> None:
        nonlocal current_name, is_file
        if bytes(header_field).lower() == b"content-disposition":
            _, params = parse_options_header(bytes(header_value))
            name = params.get(b"name")
            if name is not None:
                current_name = name.decode("utf-8")
            is_file = b"filename" in params
        header_field.clear()
        header_value.clear()

    def on_part_data(chunk: bytes, start: int, end: int) -> None:
        current_data.extend(chunk[start:end])

    def on_part_end() -> None:
        if current_name is None or is_file:
            return
        value = current_data.decode("utf-8", errors="replace")
        data.setdefault(current_name, []).append(value)

    callbacks: dict[str, Any] = {
        "on_part_begin": on_part_begin,
        "on_header_field": on_header_field,
        "on_header_value": on_header_value,
        "on_header_end": on_header_end,
        "on_part_data": on_part_data,
        "on_part_end": on_part_end,
    }

    parser = MultipartParser(boundary, callbacks)
    parser.write(body)
    parser.finalize()

    return Params(data)
