"""
textquill - plain text to paginated PostScript, PDF and SVG.

This package lays a text document out on pages the way a line printer
would, with the typography of a real font:

Features:
- Paper presets, landscape, margins and multiple columns
- Right-to-left column order
- Lines-per-inch and characters-per-inch densities, with optional glyph stretching
- Form feeds as hard column breaks
- Page headers and footers (date, file name, page number)
- A small inline markup subset (bold, italic, sizes, font spans)
- PostScript, PDF (ReportLab) and SVG output

Quick Start:
    from textquill import LayoutOptions, render_file

    render_file("notes.txt", LayoutOptions(columns=2, landscape=True), "notes.ps")

    # Layout only
    from textquill import paginate
    result = paginate(open("notes.txt").read())
    print(result.page_count)
"""

from .version import __version__, __version_info__

from .exceptions import (
    TextquillError,
    ConfigError,
    EncodingError,
    ShapingFailure,
    FontError,
    RenderingError,
)
from .config import LayoutOptions, load_options
from .api import paginate, prepare, render_file, render_text
from .engine.page_engine import GeometryCalculator, PageConfig
from .engine.pagination_manager import PaginationResult
from .parser.text_reader import read_text

__all__ = [
    "__version__",
    "__version_info__",
    "TextquillError",
    "ConfigError",
    "EncodingError",
    "ShapingFailure",
    "FontError",
    "RenderingError",
    "LayoutOptions",
    "load_options",
    "paginate",
    "prepare",
    "render_file",
    "render_text",
    "GeometryCalculator",
    "PageConfig",
    "PaginationResult",
    "read_text",
]
