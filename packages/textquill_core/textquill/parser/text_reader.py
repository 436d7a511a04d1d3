"""
Reading input text.

The layout core works on a decoded buffer. Bytes that are not valid UTF-8 are
kept as lone surrogates (``surrogateescape``) so the paragraph segmenter can
treat them as invalid code points instead of failing the whole document.
"""

from __future__ import annotations

import codecs
import io
import locale
import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional, TextIO, Union

from ..exceptions import EncodingError

logger = logging.getLogger(__name__)

ENCODING_ALIASES = {
    "windows-932": "cp932",
}

Source = Union[str, Path, BinaryIO, TextIO, None]


def normalize_encoding(encoding: str) -> str:
    """Map encoding names Python does not know to their codec names."""
    name = encoding.strip()
    name = ENCODING_ALIASES.get(name.lower(), name)
    try:
        return codecs.lookup(name).name
    except LookupError:
        raise EncodingError("Unknown input encoding", encoding) from None


def read_bytes(source: Source) -> bytes:
    """Read all bytes from a path, ``"-"``/None (stdin) or an open stream."""
    if source is None or source == "-":
        return sys.stdin.buffer.read()
    if isinstance(source, (str, Path)):
        try:
            return Path(source).read_bytes()
        except OSError as exc:
            raise EncodingError("Unable to read input", f"{source}: {exc}") from exc
    data = source.read()
    if isinstance(data, str):
        return data.encode("utf-8", "surrogateescape")
    return data


def decode_text(data: bytes, encoding: Optional[str] = None) -> str:
    """
    Decode an input buffer.

    Args:
        data: Raw input bytes
        encoding: Declared input encoding; None means UTF-8

    Returns:
        Text ending with a newline

    Raises:
        EncodingError: if the declared encoding cannot convert the input
    """
    if encoding is not None and normalize_encoding(encoding) != "utf-8":
        codec = normalize_encoding(encoding)
        try:
            data = data.decode(codec).encode("utf-8", "surrogatepass")
        except UnicodeError as exc:
            raise EncodingError(f"Error while converting input from {encoding}", str(exc)) from exc
        logger.debug(f"Converted {len(data)} bytes from {codec}")

    decoder = codecs.getincrementaldecoder("utf-8")("surrogateescape")
    text = decoder.decode(data, final=False)
    pending, _ = decoder.getstate()
    if pending:
        logger.warning(f"Dropping {len(pending)} byte(s) of a truncated trailing character")

    if not text.endswith("\n"):
        text += "\n"
    return text


def read_text(
    stream_or_path: Source = None,
    encoding: Optional[str] = None,
    encoding_from_locale: bool = False,
) -> str:
    """
    Read and decode a whole input document.

    ``encoding_from_locale`` takes the input encoding from the current locale
    and is ignored when ``encoding`` is given.
    """
    if encoding is None and encoding_from_locale:
        encoding = locale.getpreferredencoding(False)
        logger.info(f"Using input encoding {encoding} from the locale")
    data = read_bytes(stream_or_path)
    logger.info(f"Read {len(data)} bytes of input")
    return decode_text(data, encoding)


def text_source_name(source: Source) -> str:
    """Name shown in page headers for an input source."""
    if source is None or source == "-":
        return "stdin"
    if isinstance(source, (str, Path)):
        return Path(source).name
    name = getattr(source, "name", None)
    if isinstance(name, str) and not isinstance(source, io.BytesIO):
        return Path(name).name
    return "stdin"
