"""Tests for the command-line interface."""

import io
from unittest.mock import patch

import pytest

from textquill.cli import create_parser, main, options_from_args
from textquill.utils.enums import Direction


class TestParser:
    """Test suite for argument parsing."""

    def test_defaults(self):
        args = create_parser().parse_args([])

        assert args.input == "-"
        assert args.output is None
        assert args.log_level == "WARNING"
        overrides = options_from_args(args)
        assert overrides["landscape"] is None
        assert overrides["wordwrap"] is None
        assert overrides["direction"] is None

    def test_layout_flags(self):
        args = create_parser().parse_args([
            "--landscape", "--columns", "3", "--rtl", "--no-wrap", "--no-separator",
            "--header", "--lpi", "6", "--cpi", "12", "--gutter", "10",
            "--top-margin", "20", "--format", "postscript", "--paper", "letter",
            "--stretch-chars", "--justify", "--markup", "in.txt",
        ])

        overrides = options_from_args(args)
        assert overrides["landscape"] is True
        assert overrides["columns"] == 3
        assert overrides["direction"] == Direction.RTL
        assert overrides["wordwrap"] is False
        assert overrides["separation_line"] is False
        assert overrides["draw_header"] is True
        assert overrides["lpi"] == 6.0
        assert overrides["cpi"] == 12.0
        assert overrides["gutter_width"] == 10.0
        assert overrides["top_margin"] == 20.0
        assert overrides["output_format"] == "postscript"
        assert overrides["paper"] == "letter"
        assert overrides["stretch_chars"] and overrides["justify"] and overrides["markup"]
        assert args.input == "in.txt"

    def test_log_level_is_case_insensitive(self):
        assert create_parser().parse_args(["--log-level", "debug"]).log_level == "DEBUG"

    def test_unknown_format_rejected(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["--format", "docx"])


@pytest.mark.integration
class TestMain:
    """Test suite for main."""

    def test_writes_output_file(self, temp_dir):
        source = temp_dir / "in.txt"
        source.write_text("hello\n")
        target = temp_dir / "out.pdf"

        code = main([str(source), "-o", str(target), "--format", "pdf"])

        assert code == 0
        assert target.read_bytes().startswith(b"%PDF-")

    def test_writes_stdout_by_default(self, temp_dir):
        source = temp_dir / "in.txt"
        source.write_text("hello\n")
        stdout = io.TextIOWrapper(io.BytesIO())

        with patch("sys.stdout", stdout):
            code = main([str(source)])

        assert code == 0
        assert stdout.buffer.getvalue().startswith(b"%!PS-Adobe-3.0")

    def test_config_file(self, temp_dir):
        source = temp_dir / "in.txt"
        source.write_text("a\fb\n")
        config = temp_dir / "layout.toml"
        config.write_text("[layout]\ncolumns = 2\n")
        target = temp_dir / "out.ps"

        assert main([str(source), "--config", str(config), "-o", str(target)]) == 0
        assert target.read_text(encoding="latin-1").count("showpage") == 1

    def test_config_error_exits_with_one(self, temp_dir, capsys):
        source = temp_dir / "in.txt"
        source.write_text("a\n")

        code = main([str(source), "--lpi", "-3", "-o", str(temp_dir / "out.ps")])

        assert code == 1
        assert "textquill: given LPI value was invalid" in capsys.readouterr().err
        assert not (temp_dir / "out.ps").exists()

    def test_missing_input(self, temp_dir, capsys):
        code = main([str(temp_dir / "nope.txt"), "-o", str(temp_dir / "out.ps")])

        assert code == 1
        assert "Unable to read input" in capsys.readouterr().err

    def test_bad_encoding(self, temp_dir, capsys):
        source = temp_dir / "in.txt"
        source.write_bytes(b"\x81\n")

        code = main([str(source), "--encoding", "cp932", "-o", str(temp_dir / "out.ps")])

        assert code == 1
        assert "converting input" in capsys.readouterr().err
