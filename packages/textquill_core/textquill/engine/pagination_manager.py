"""

Line flow: packing the measured line stream into columns and pages.

Handles:
- column and page breaks on overflow and after form-feed terminated paragraphs
- LPI-driven vertical advance
- the uniform vertical stretch that makes the tallest line fill one LPI row
- left-to-right and mirrored right-to-left column placement
- header/footer and column separator drawing through the rendering surface

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Sequence

from ..utils.units import per_inch_to_points
from .header_footer import HeaderFooterComposer, RULE_WIDTH
from .page_engine import PageConfig
from .paragraph_segmenter import MeasuredLine, Paragraph, iter_measured_lines

if TYPE_CHECKING:
    from ..renderers.base_renderer import RenderSurface

logger = logging.getLogger(__name__)

BREAK_COLUMN = "column"
BREAK_PAGE = "page"


@dataclass(slots=True)
class LayoutCursor:
    """Mutable position of the next line."""
    page_index: int = 1
    column_index: int = 0
    column_offset: float = 0.0
    previous_formfeed: bool = False


@dataclass(slots=True, frozen=True)
class Placement:
    """Where one line landed."""
    page_index: int
    column_index: int
    column_offset: float
    x: float
    y: float
    advance: float
    line: MeasuredLine
    break_before: Optional[str] = None
    forced: bool = False


@dataclass(slots=True)
class PaginationResult:
    placements: List[Placement] = field(default_factory=list)
    page_count: int = 1
    stretch_scale: float = 1.0

    def by_page(self) -> Dict[int, List[Placement]]:
        pages: Dict[int, List[Placement]] = {index: [] for index in range(1, self.page_count + 1)}
        for placement in self.placements:
            pages[placement.page_index].append(placement)
        return pages

    def assignments(self) -> List[tuple]:
        """(page, column, offset) per line, in stream order."""
        return [(p.page_index, p.column_index, p.column_offset) for p in self.placements]


def compute_stretch_scale(config: PageConfig, heights: Iterable[float]) -> float:
    """
    Vertical scale that makes the tallest natural line exactly one LPI row.

    Returns 1.0 unless character stretching is on and an LPI is set.
    """
    if not config.stretch_chars or config.lpi <= 0:
        return 1.0
    max_height = max(heights, default=0.0)
    if max_height <= 0:
        return 1.0
    return per_inch_to_points(config.lpi) / max_height


class LineFlowEngine:
    """

    Walks the line stream and decides page, column and offset of each line.

    The engine is a pure function of the line stream and the page config:
    the surface and header composer only receive drawing intents.

    """

    def __init__(
        self,
        config: PageConfig,
        surface: Optional["RenderSurface"] = None,
        header: Optional[HeaderFooterComposer] = None,
    ):
        self.config = config
        self.surface = surface
        self.header = header

    def effective_line_height(self, line: MeasuredLine) -> float:
        if self.config.lpi > 0:
            return per_inch_to_points(self.config.lpi)
        return line.height

    def paginate(self, paragraphs: List[Paragraph]) -> PaginationResult:
        """Lay out shaped paragraphs, releasing each one once its lines are placed."""
        scale = compute_stretch_scale(
            self.config,
            (line.logical.height for paragraph in paragraphs for line in paragraph.lines),
        )
        return self._flow(iter_measured_lines(paragraphs), scale)

    def flow_lines(self, lines: Sequence[MeasuredLine]) -> PaginationResult:
        """Lay out an already materialized line stream."""
        scale = compute_stretch_scale(self.config, (line.height for line in lines))
        return self._flow(iter(lines), scale)

    def _flow(self, lines: Iterable[MeasuredLine], scale: float) -> PaginationResult:
        config = self.config
        cursor = LayoutCursor()
        result = PaginationResult(stretch_scale=scale)
        if scale != 1.0:
            logger.info(f"Stretching glyphs vertically by {scale:.4f}")

        self._start_page(cursor.page_index, scale)
        for line in lines:
            break_kind = None
            overflow = cursor.column_offset + line.height >= config.column_height
            forced = cursor.previous_formfeed
            if overflow or forced:
                break_kind = self._advance_column(cursor, scale)
                logger.debug(
                    f"{break_kind} break before line of paragraph {line.paragraph_index} "
                    f"({'form feed' if forced else 'overflow'})"
                )

            advance = self.effective_line_height(line)
            x = config.column_left(cursor.column_index)
            if config.is_rtl:
                x += config.column_width - line.width
            y = config.text_top + cursor.column_offset + advance

            if self.surface is not None:
                self.surface.move_to(x, y)
                self.surface.show_line(line.line)

            result.placements.append(Placement(
                page_index=cursor.page_index,
                column_index=cursor.column_index,
                column_offset=cursor.column_offset,
                x=x,
                y=y,
                advance=advance,
                line=line,
                break_before=break_kind,
                forced=break_kind is not None and forced,
            ))
            cursor.column_offset += advance
            cursor.previous_formfeed = line.formfeed

        self._end_page()
        result.page_count = cursor.page_index
        logger.info(f"Placed {len(result.placements)} line(s) on {result.page_count} page(s)")
        return result

    def _advance_column(self, cursor: LayoutCursor, scale: float) -> str:
        cursor.column_index += 1
        cursor.column_offset = 0.0
        if cursor.column_index == self.config.columns:
            cursor.column_index = 0
            self._end_page()
            cursor.page_index += 1
            self._start_page(cursor.page_index, scale)
            return BREAK_PAGE
        self._column_break(cursor.column_index)
        return BREAK_COLUMN

    def _start_page(self, page_index: int, scale: float) -> None:
        if self.surface is None:
            return
        self.surface.begin_page(page_index)
        if self.header is not None:
            if self.config.draw_header:
                self.header.draw(self.surface, self.config, page_index)
            if self.config.draw_footer:
                self.header.draw(self.surface, self.config, page_index, is_footer=True)
        self.surface.set_transform(1.0, scale)

    def _end_page(self) -> None:
        if self.surface is not None:
            self.surface.end_page()

    def _column_break(self, column_index: int) -> None:
        if self.surface is None or not self.config.separation_line:
            return
        x = self.config.separator_x(column_index)
        top, bottom = self.config.separator_span()
        self.surface.move_to(x, top)
        self.surface.draw_line_segment(x, bottom)
        self.surface.stroke(RULE_WIDTH)
