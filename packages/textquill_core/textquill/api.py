"""

Simple high-level API for textquill.

Usage example:
>>> from textquill import LayoutOptions, paginate, render_file
>>>
>>> # Layout only: where does each line land?
>>> result = paginate("hello\\fworld\\n", LayoutOptions(columns=2))
>>> result.page_count
1
>>>
>>> # Whole pipeline to a file
>>> render_file("notes.txt", LayoutOptions(output_format="pdf"), "notes.pdf")

"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Union

from .config import LayoutOptions
from .engine.font_resolver import FontSpec
from .engine.header_footer import HeaderFooterComposer
from .engine.page_engine import GeometryCalculator, PageConfig
from .engine.pagination_manager import LineFlowEngine, PaginationResult
from .engine.paragraph_segmenter import ParagraphSegmenter
from .engine.text_metrics import TextShaper
from .exceptions import RenderingError
from .parser.text_reader import read_text, text_source_name
from .renderers import RenderSurface, create_surface, surface_class
from .utils.units import per_inch_to_points

logger = logging.getLogger(__name__)

__all__ = [
    "Pipeline",
    "prepare",
    "paginate",
    "render_text",
    "render_file",
]


@dataclass(slots=True)
class Pipeline:
    """Everything needed to lay out one document."""
    config: PageConfig
    shaper: TextShaper
    header: Optional[HeaderFooterComposer] = None

    def segmenter(self) -> ParagraphSegmenter:
        return ParagraphSegmenter(self.config, self.shaper)

    def run(self, text: str, surface: Optional[RenderSurface] = None) -> PaginationResult:
        paragraphs = self.segmenter().segment(text)
        return LineFlowEngine(self.config, surface, self.header).paginate(paragraphs)


def body_font(options: LayoutOptions, shaper: TextShaper) -> FontSpec:
    """
    Body font, scaled so one average character advance equals one CPI cell.
    """
    font = shaper.font
    if options.cpi <= 0:
        return font
    char_width = shaper.approximate_char_width(font)
    if char_width <= 0:
        return font
    factor = per_inch_to_points(options.cpi) / char_width
    logger.info(f"Scaling body font by {factor:.4f} for {options.cpi:g} characters per inch")
    return font.scaled(factor)


def prepare(
    options: LayoutOptions,
    shaper: Optional[TextShaper] = None,
    header_shaper: Optional[TextShaper] = None,
    rotates_landscape: bool = False,
    clock: Optional[Callable[[], datetime]] = None,
) -> Pipeline:
    """
    Build the page geometry, the shapers and the header composer.

    A caller-supplied ``shaper`` is used as is; otherwise the body font is
    resolved from the options and scaled to the CPI density.
    """
    options = options.validate()
    config = GeometryCalculator(options).compute(rotates_landscape)

    if shaper is None:
        shaper = TextShaper(options.font)
        font = body_font(options, shaper)
        if font != shaper.font:
            shaper = TextShaper(font)

    header = None
    if options.draw_header or options.draw_footer:
        header = HeaderFooterComposer(
            header_shaper or TextShaper(options.header_font),
            options.filename,
            clock=clock,
        )
        band = header.measure_band(header=options.draw_header, footer=options.draw_footer)
        config = config.with_header_band(band)
    return Pipeline(config=config, shaper=shaper, header=header)


def paginate(
    text: str,
    options: Optional[LayoutOptions] = None,
    shaper: Optional[TextShaper] = None,
    header_shaper: Optional[TextShaper] = None,
) -> PaginationResult:
    """
    Lay out text without rendering it.

    Returns:
        PaginationResult with one placement per visual line
    """
    options = options or LayoutOptions()
    pipeline = prepare(options, shaper=shaper, header_shaper=header_shaper)
    return pipeline.run(text)


def render_text(
    text: str,
    options: LayoutOptions,
    stream: BinaryIO,
    shaper: Optional[TextShaper] = None,
    header_shaper: Optional[TextShaper] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> PaginationResult:
    """Lay out text and write it to ``stream`` in the configured output format."""
    surface_type = surface_class(options.output_format)
    pipeline = prepare(
        options,
        shaper=shaper,
        header_shaper=header_shaper,
        rotates_landscape=surface_type.rotates_landscape,
        clock=clock,
    )
    surface = create_surface(
        options.output_format,
        stream,
        pipeline.config,
        title=options.title or options.filename,
        owner=options.owner,
    )
    result = pipeline.run(text, surface)
    surface.finish()
    return result


def render_file(
    path: Union[str, Path, BinaryIO, None],
    options: LayoutOptions,
    output: Union[str, Path, BinaryIO],
    encoding_from_locale: bool = False,
) -> PaginationResult:
    """
    Read, lay out and render one input document.

    A path ``output`` is written through a temporary file in the same
    directory and moved into place only once rendering succeeded.
    """
    text = read_text(path, encoding=options.encoding, encoding_from_locale=encoding_from_locale)
    if options.filename == LayoutOptions.filename:
        options = options.with_overrides(filename=text_source_name(path))

    if not isinstance(output, (str, Path)):
        return render_text(text, options, output)

    target = Path(output)
    handle = tempfile.NamedTemporaryFile(
        dir=target.parent, prefix=f".{target.name}.", delete=False
    )
    try:
        with handle:
            result = render_text(text, options, handle)
        os.replace(handle.name, target)
    except OSError as exc:
        _discard(handle.name)
        raise RenderingError("Unable to write output", f"{target}: {exc}") from exc
    except BaseException:
        _discard(handle.name)
        raise
    logger.info(f"Wrote {result.page_count} page(s) to {target}")
    return result


def _discard(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
