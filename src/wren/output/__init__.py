"""Output formats — render envelopes to text with a content type.

Selected per request from the URI suffix (``.json``, ``.txt``); JSON is
the default.
"""

from wren.output.formats import JsonOutput, OutputFormat, TextOutput
from wren.output.registry import FormatRegistry

__all__ = ["FormatRegistry", "JsonOutput", "OutputFormat", "TextOutput"]
