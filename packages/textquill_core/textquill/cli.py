"""
Command-line interface for textquill.

Usage:
    textquill notes.txt -o notes.ps
    textquill --columns 2 --landscape --header notes.txt -o notes.ps
    textquill --format pdf --lpi 6 --cpi 12 -o report.pdf report.txt
    cat notes.txt | textquill --format svg > notes.svg
"""

import argparse
import getpass
import logging
import sys
from typing import Any, Dict, List, Optional

from .api import render_file
from .config import DEFAULT_FONT, DEFAULT_HEADER_FONT, load_options
from .exceptions import TextquillError
from .utils.enums import Direction
from .utils.logger import LOG_LEVELS, configure_logging
from .version import __version__

logger = logging.getLogger(__name__)

FORMAT_CHOICES = ["ps", "postscript", "pdf", "svg"]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="textquill",
        description="textquill - paginate plain text into PostScript, PDF or SVG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  textquill notes.txt -o notes.ps
  textquill --columns 2 --landscape --header notes.txt -o notes.ps
  textquill --format pdf --lpi 6 --cpi 12 -o report.pdf report.txt
        """,
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Input text file (default: standard input)"
    )
    parser.add_argument(
        "-o", "--output",
        help="Output file (default: standard output)"
    )
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=FORMAT_CHOICES,
        help="Output format (default: ps)"
    )
    parser.add_argument("--config", help="TOML file with a [layout] table")

    page = parser.add_argument_group("page layout")
    page.add_argument("--paper", help="Paper size: a4, letter, legal, a3 or WIDTHxHEIGHT in points")
    page.add_argument("--landscape", action="store_true", default=None, help="Landscape orientation")
    page.add_argument("--columns", type=int, help="Number of columns (default: 1)")
    page.add_argument("--top-margin", type=float, help="Top margin in points (default: 36)")
    page.add_argument("--bottom-margin", type=float, help="Bottom margin in points (default: 36)")
    page.add_argument("--left-margin", type=float, help="Left margin in points (default: 36)")
    page.add_argument("--right-margin", type=float, help="Right margin in points (default: 36)")
    page.add_argument("--gutter", dest="gutter_width", type=float,
                      help="Distance between columns in points (default: 40)")
    page.add_argument("--header", dest="draw_header", action="store_true", default=None,
                      help="Draw a page header")
    page.add_argument("--footer", dest="draw_footer", action="store_true", default=None,
                      help="Draw a page footer")
    page.add_argument("--no-separator", dest="separation_line", action="store_false", default=None,
                      help="Do not draw column and header separator lines")

    text = parser.add_argument_group("text")
    text.add_argument("--font", help=f"Body font description (default: {DEFAULT_FONT})")
    text.add_argument("--header-font", help=f"Header font description (default: {DEFAULT_HEADER_FONT})")
    text.add_argument("--markup", action="store_true", default=None, help="Interpret inline markup")
    text.add_argument("--rtl", dest="direction", action="store_const", const=Direction.RTL,
                      help="Right-to-left text and column order")
    text.add_argument("--justify", action="store_true", default=None, help="Justify wrapped lines")
    text.add_argument("--no-wrap", dest="wordwrap", action="store_false", default=None,
                      help="Do not wrap long lines")
    text.add_argument("--lpi", type=float, help="Lines per inch")
    text.add_argument("--cpi", type=float, help="Characters per inch")
    text.add_argument("--stretch-chars", action="store_true", default=None,
                      help="Stretch glyphs vertically to fill the LPI line height")
    text.add_argument("--encoding", help="Input encoding (default: UTF-8)")
    text.add_argument("--lang-encoding", action="store_true",
                      help="Take the input encoding from the locale")

    doc = parser.add_argument_group("document")
    doc.add_argument("--title", help="Document title (default: input file name)")
    doc.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        type=str.upper,
        help="Log level (default: WARNING)"
    )
    parser.add_argument("--version", action="version", version=f"textquill {__version__}")
    return parser


def options_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Layout overrides given on the command line; unset options are None."""
    keys = [
        "output_format", "paper", "landscape", "columns", "top_margin", "bottom_margin",
        "left_margin", "right_margin", "gutter_width", "draw_header", "draw_footer",
        "separation_line", "font", "header_font", "markup", "direction", "justify",
        "wordwrap", "lpi", "cpi", "stretch_chars", "encoding", "title",
    ]
    overrides = {key: getattr(args, key) for key in keys}
    overrides["owner"] = _current_user()
    return overrides


def _current_user() -> Optional[str]:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return None


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        options = load_options(args.config, **options_from_args(args))
        output = args.output if args.output and args.output != "-" else sys.stdout.buffer
        result = render_file(
            args.input,
            options,
            output,
            encoding_from_locale=args.lang_encoding,
        )
    except TextquillError as exc:
        logger.debug("Pagination failed", exc_info=True)
        print(f"textquill: {exc}", file=sys.stderr)
        return 1

    logger.info(f"Done: {result.page_count} page(s)")
    return 0
