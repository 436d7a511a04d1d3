"""

Paragraph segmentation.

Splits the decoded input buffer into paragraphs on newline and form-feed
boundaries and hands each one to the shaper:
- markup mode: the whole buffer is one paragraph
- plain mode with a CPI budget: over-long paragraphs are cut at the last
  character cell that fits and the remainder is scanned again
- plain mode otherwise: word/char wrapping at the column width, or no
  wrapping at all when word wrap is off

"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from ..exceptions import EncodingError
from ..utils.enums import AlignmentType, WrapMode
from ..utils.units import POINTS_PER_INCH
from .geometry import LineBox
from .markup import parse_markup
from .page_engine import PageConfig
from .text_metrics import ShapedLine, ShapedParagraph, TextShaper

logger = logging.getLogger(__name__)

PARAGRAPH_BREAKS = ("\n", "\f")


@dataclass(slots=True)
class Paragraph:
    """A run of source text between two boundaries, with its shaped lines."""
    text: str
    start: int
    end: int
    formfeed: bool = False
    shaped: Optional[ShapedParagraph] = None

    @property
    def lines(self) -> List[ShapedLine]:
        return self.shaped.lines if self.shaped is not None else []

    @property
    def released(self) -> bool:
        return self.shaped is None

    def release(self) -> None:
        """Drop the shaped lines once the flow engine has placed them all."""
        self.shaped = None


@dataclass(slots=True, frozen=True)
class MeasuredLine:
    """One visual line in the global line stream."""
    line: ShapedLine
    logical: LineBox
    ink: LineBox
    formfeed: bool = False
    paragraph_index: int = 0

    @property
    def height(self) -> float:
        return self.logical.height

    @property
    def width(self) -> float:
        return self.logical.width


def is_invalid_codepoint(char: str) -> bool:
    """Lone surrogates mark bytes that were not valid in the input encoding."""
    return 0xD800 <= ord(char) <= 0xDFFF


def cell_width(char: str) -> int:
    """
    Width of a character in terminal cells: 2 for wide East Asian
    characters, 0 for combining marks and controls, 1 otherwise.

    Raises:
        EncodingError: for code points that cannot be converted to a cell width
    """
    if is_invalid_codepoint(char):
        raise EncodingError("Unable to convert character to a cell width", f"U+{ord(char):04X}")
    if unicodedata.combining(char):
        return 0
    category = unicodedata.category(char)
    if category in ("Mn", "Me", "Cf", "Cc"):
        return 0
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return 2
    return 1


class ParagraphSegmenter:
    """Turns a text buffer into shaped paragraphs."""

    def __init__(self, config: PageConfig, shaper: TextShaper):
        self.config = config
        self.shaper = shaper
        self.alignment = AlignmentType.RIGHT if config.is_rtl else AlignmentType.LEFT

    @property
    def cpi_budget(self) -> int:
        """Character cells that fit in one column at the configured CPI."""
        return int(self.config.column_width / POINTS_PER_INCH * self.config.cpi)

    def segment(self, text: str) -> List[Paragraph]:
        if self.config.markup:
            return [self._markup_paragraph(text)]
        paragraphs = list(self._scan(text))
        logger.info(f"Segmented {len(text)} characters into {len(paragraphs)} paragraph(s)")
        return paragraphs

    def _markup_paragraph(self, text: str) -> Paragraph:
        cleaned = "".join("\ufffd" if is_invalid_codepoint(char) else char for char in text)
        # XML does not allow form feeds
        cleaned = cleaned.replace("\f", " ")
        runs = parse_markup(cleaned, self.shaper.font)
        wrap_width = self.config.column_width if self.config.wordwrap else None
        shaped = self.shaper.measure(
            runs,
            wrap_width=wrap_width,
            wrap_mode=WrapMode.WORD_CHAR,
            direction=self.config.direction,
            alignment=self.alignment,
            justify=self.config.justify,
        )
        logger.info(f"Markup paragraph shaped into {shaped.line_count} line(s)")
        return Paragraph(text=cleaned, start=0, end=len(text), shaped=shaped)

    def _scan(self, text: str) -> Iterator[Paragraph]:
        start = 0
        index = 0
        length = len(text)
        while index < length:
            char = text[index]
            if is_invalid_codepoint(char):
                logger.warning(f"Invalid character in input at offset {index}")
                if self.config.recover_invalid_input:
                    index += 1
                    continue
                paragraph, resume = self._emit(text, start, index, formfeed=False)
                yield paragraph
                start = index = resume if resume is not None else index + 1
                continue
            if char in PARAGRAPH_BREAKS:
                paragraph, resume = self._emit(text, start, index, formfeed=char == "\f")
                yield paragraph
                start = index = resume if resume is not None else index + 1
                continue
            index += 1
        if start < length:
            paragraph, resume = self._emit(text, start, length, formfeed=False)
            yield paragraph
            while resume is not None and resume < length:
                paragraph, resume = self._emit(text, resume, length, formfeed=False)
                yield paragraph

    def _emit(self, text: str, start: int, end: int, formfeed: bool) -> Tuple[Paragraph, Optional[int]]:
        """
        Shape ``text[start:end]`` as one paragraph.

        Returns the paragraph and, when a CPI cut happened, the offset where
        scanning must resume.
        """
        span = text[start:end]
        if self.config.cpi > 0 and self.config.wordwrap:
            budget = self.cpi_budget
            cells = sum(self._cells(char) for char in span)
            if cells > budget:
                cut = self._fit_cells(span, budget)
                fragment = _clean(span[:cut])
                shaped = self.shaper.measure(
                    fragment,
                    wrap_width=None,
                    direction=self.config.direction,
                    alignment=self.alignment,
                    justify=self.config.justify,
                )
                logger.debug(f"CPI cut at {start + cut}: {cells} cells > budget {budget}")
                return Paragraph(fragment, start, start + cut, formfeed=False, shaped=shaped), start + cut

        wrap_width = self.config.column_width if self.config.wordwrap else None
        shaped = self.shaper.measure(
            _clean(span),
            wrap_width=wrap_width,
            wrap_mode=WrapMode.WORD_CHAR,
            direction=self.config.direction,
            alignment=self.alignment,
            justify=self.config.justify,
        )
        return Paragraph(_clean(span), start, end, formfeed=formfeed, shaped=shaped), None

    def _cells(self, char: str) -> int:
        if is_invalid_codepoint(char) and self.config.recover_invalid_input:
            return 0
        return cell_width(char)

    def _fit_cells(self, span: str, budget: int) -> int:
        """Number of leading characters whose cell widths sum to at most ``budget`` (at least one)."""
        total = 0
        for index, char in enumerate(span):
            total += self._cells(char)
            if total > budget:
                return max(index, 1)
        return len(span)


def _clean(span: str) -> str:
    return "".join(char for char in span if not is_invalid_codepoint(char))


def iter_measured_lines(paragraphs: List[Paragraph]) -> Iterator[MeasuredLine]:
    """
    Yield the global line stream in paragraph order.

    Each paragraph is released once the consumer asks for the line after its
    last one, so shaped lines live exactly as long as they are needed.
    """
    for paragraph_index, paragraph in enumerate(paragraphs):
        lines = paragraph.lines
        for line_index, line in enumerate(lines):
            yield MeasuredLine(
                line=line,
                logical=line.logical,
                ink=line.ink,
                formfeed=paragraph.formfeed and line_index == len(lines) - 1,
                paragraph_index=paragraph_index,
            )
        paragraph.release()
