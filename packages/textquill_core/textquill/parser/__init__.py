"""
Parser module for text input.

Decodes input documents into the text buffer the layout engine segments,
and parses the inline markup subset used in markup mode.
"""

from ..engine.markup import parse_markup
from .text_reader import decode_text, normalize_encoding, read_bytes, read_text, text_source_name

__all__ = [
    "decode_text",
    "normalize_encoding",
    "parse_markup",
    "read_bytes",
    "read_text",
    "text_source_name",
]
