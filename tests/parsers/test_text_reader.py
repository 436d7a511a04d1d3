"""Tests for input reading and decoding."""

import io
from unittest.mock import patch

import pytest

from textquill.exceptions import EncodingError
from textquill.parser.text_reader import (
    decode_text,
    normalize_encoding,
    read_text,
    text_source_name,
)


class TestDecodeText:
    """Test suite for decode_text."""

    def test_utf8(self):
        assert decode_text("zażółć\n".encode("utf-8")) == "zażółć\n"

    def test_appends_missing_newline(self):
        assert decode_text(b"abc") == "abc\n"

    def test_empty_input(self):
        assert decode_text(b"") == "\n"

    def test_invalid_bytes_become_surrogates(self):
        text = decode_text(b"ab\xffcd\n")

        assert text == "ab\udcffcd\n"

    def test_truncated_trailing_sequence_is_dropped(self):
        data = "ok é".encode("utf-8")[:-1]

        assert decode_text(data) == "ok \n"

    def test_truncated_trailing_sequence_is_reported(self, caplog):
        decode_text("é".encode("utf-8")[:1])

        warnings = [r for r in caplog.records if r.levelname == "WARNING"]
        assert len(warnings) == 1
        assert "truncated trailing character" in warnings[0].getMessage()

    def test_declared_encoding(self):
        assert decode_text("żółw\n".encode("iso-8859-2"), encoding="iso-8859-2") == "żółw\n"

    def test_windows_932_alias(self):
        data = "日本\n".encode("cp932")

        assert decode_text(data, encoding="windows-932") == "日本\n"

    def test_conversion_failure(self):
        with pytest.raises(EncodingError):
            decode_text(b"\x81\n", encoding="cp932")

    def test_unknown_encoding(self):
        with pytest.raises(EncodingError):
            normalize_encoding("no-such-codec")


class TestReadText:
    """Test suite for read_text."""

    def test_from_path(self, temp_dir):
        path = temp_dir / "in.txt"
        path.write_bytes(b"line one\nline two")

        assert read_text(path) == "line one\nline two\n"

    def test_from_binary_stream(self):
        assert read_text(io.BytesIO(b"abc\n")) == "abc\n"

    def test_from_text_stream(self):
        assert read_text(io.StringIO("abc")) == "abc\n"

    def test_missing_path(self, temp_dir):
        with pytest.raises(EncodingError):
            read_text(temp_dir / "missing.txt")

    def test_encoding_from_locale(self):
        with patch("textquill.parser.text_reader.locale.getpreferredencoding", return_value="ISO-8859-1"):
            text = read_text(io.BytesIO("café\n".encode("latin-1")), encoding_from_locale=True)

        assert text == "café\n"

    def test_explicit_encoding_wins_over_locale(self):
        with patch("textquill.parser.text_reader.locale.getpreferredencoding", return_value="ISO-8859-1"):
            text = read_text(io.BytesIO("café\n".encode("utf-8")), encoding="utf-8", encoding_from_locale=True)

        assert text == "café\n"


class TestSourceName:
    """Test suite for text_source_name."""

    def test_path(self):
        assert text_source_name("/tmp/notes/report.txt") == "report.txt"

    def test_stdin(self):
        assert text_source_name(None) == "stdin"
        assert text_source_name("-") == "stdin"

    def test_anonymous_stream(self):
        assert text_source_name(io.BytesIO(b"")) == "stdin"
