"""

TextShaper - measuring and line-breaking text with ReportLab font metrics.

This is the shaping collaborator of the layout core. Given a paragraph's
text (or styled runs in markup mode) it produces the visual lines the text
breaks into and, for each line, its logical and ink boxes:
- logical height is the natural line height (font size * 1.2)
- ink box covers the glyph extents without trailing whitespace
- justified lines carry the extra word spacing the surface must apply

"""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

from reportlab.pdfbase import pdfmetrics

from ..exceptions import ShapingFailure
from ..utils.enums import AlignmentType, Direction, WrapMode
from .font_resolver import FontSpec, resolve_font_name
from .geometry import LineBox

logger = logging.getLogger(__name__)

LINE_SPACING = 1.2
TAB_WIDTH = 8


@dataclass(slots=True, frozen=True)
class TextRun:
    """A piece of text drawn in one font."""
    text: str
    font: FontSpec


@dataclass(slots=True)
class ShapedRun:
    """A run positioned inside a shaped line."""
    text: str
    font_name: str
    font_size: float
    x: float
    width: float


@dataclass(slots=True)
class ShapedLine:
    """One visual line: positioned runs plus logical and ink extents."""
    runs: List[ShapedRun]
    logical: LineBox
    ink: LineBox
    word_spacing: float = 0.0

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def width(self) -> float:
        return self.logical.width

    @property
    def height(self) -> float:
        return self.logical.height


@dataclass(slots=True)
class ShapedParagraph:
    """Result of shaping one paragraph."""
    lines: List[ShapedLine] = field(default_factory=list)
    wrap_width: Optional[float] = None
    wrap_mode: WrapMode = WrapMode.NONE
    direction: Direction = Direction.LTR
    alignment: AlignmentType = AlignmentType.LEFT
    justify: bool = False

    @property
    def line_count(self) -> int:
        return len(self.lines)


Content = Union[str, Sequence[TextRun]]


class TextShaper:
    """

    Shaping engine backed by ReportLab ``pdfmetrics``.

    Widths come from the registered font's advance widths. There is no
    glyph shaping, kerning or bidirectional reordering.

    """

    def __init__(self, font: Union[FontSpec, str, None] = None):
        if font is None or isinstance(font, str):
            font = FontSpec.parse(font)
        self.font = font
        self._names: Dict[FontSpec, str] = {}
        self._extents: Dict[Tuple[str, float], Tuple[float, float]] = {}
        self.font_name(self.font)

    def font_name(self, spec: FontSpec) -> str:
        name = self._names.get(spec)
        if name is None:
            name = resolve_font_name(spec)
            self._names[spec] = name
        return name

    def text_width(self, text: str, spec: FontSpec) -> float:
        if not text:
            return 0.0
        name = self.font_name(spec)
        try:
            return pdfmetrics.stringWidth(text, name, spec.size)
        except (KeyError, ValueError, UnicodeError) as exc:
            raise ShapingFailure("Unable to measure text", f"{text[:20]!r} in {name}: {exc}") from exc

    def font_extents(self, spec: FontSpec) -> Tuple[float, float]:
        """Ascent and (negative) descent of a font in points."""
        name = self.font_name(spec)
        key = (name, spec.size)
        extents = self._extents.get(key)
        if extents is None:
            ascent, descent = pdfmetrics.getAscentDescent(name, spec.size)
            extents = (float(ascent), float(descent))
            self._extents[key] = extents
        return extents

    def line_height(self, spec: Optional[FontSpec] = None) -> float:
        spec = spec or self.font
        return spec.size * LINE_SPACING

    def approximate_char_width(self, spec: Optional[FontSpec] = None) -> float:
        """Larger of the average letter advance and the average digit advance."""
        spec = spec or self.font
        letters = string.ascii_letters
        char_width = self.text_width(letters, spec) / len(letters)
        digit_width = self.text_width(string.digits, spec) / len(string.digits)
        return max(char_width, digit_width)

    def measure(
        self,
        content: Content,
        wrap_width: Optional[float] = None,
        wrap_mode: WrapMode = WrapMode.WORD_CHAR,
        direction: Direction = Direction.LTR,
        alignment: AlignmentType = AlignmentType.LEFT,
        justify: bool = False,
    ) -> ShapedParagraph:
        """

        Break content into visual lines and measure each.

        Args:
        content: Plain text (drawn in the shaper's font) or styled runs
        wrap_width: Maximum line width in points, None for unconstrained
        wrap_mode: How over-long lines are broken
        direction: Base direction (recorded, no reordering)
        alignment: Paragraph alignment (recorded; placement is done by the caller)
        justify: Stretch word spacing of wrapped lines to the wrap width

        Returns:
        ShapedParagraph

        """
        # Imported here, line_breaker depends on the types defined above
        from .line_breaker import LineBreaker

        runs = [TextRun(content, self.font)] if isinstance(content, str) else list(content)
        if wrap_width is not None and wrap_width <= 0:
            raise ShapingFailure("Wrap width must be positive", str(wrap_width))
        if wrap_width is None:
            wrap_mode = WrapMode.NONE

        breaker = LineBreaker(self)
        paragraph = ShapedParagraph(
            wrap_width=wrap_width,
            wrap_mode=wrap_mode,
            direction=direction,
            alignment=alignment,
            justify=justify,
        )
        for hard_line, fallback_font in _split_hard_lines(runs, self.font):
            if wrap_mode == WrapMode.NONE or not hard_line:
                broken = [hard_line]
            else:
                broken = breaker.break_runs(hard_line, wrap_width, wrap_mode)
            for index, pieces in enumerate(broken):
                line = self.build_line(pieces, fallback_font)
                is_last = index == len(broken) - 1
                if justify and wrap_width is not None and not is_last:
                    line = self._justify(line, wrap_width)
                paragraph.lines.append(line)
        return paragraph

    def build_line(self, pieces: Sequence[TextRun], fallback_font: FontSpec) -> ShapedLine:
        """Position runs left to right and compute the line boxes."""
        runs: List[ShapedRun] = []
        specs: List[FontSpec] = []
        x = 0.0
        ink_right = 0.0
        for piece in pieces:
            if not piece.text:
                continue
            width = self.text_width(piece.text, piece.font)
            name = self.font_name(piece.font)
            if runs and runs[-1].font_name == name and runs[-1].font_size == piece.font.size:
                runs[-1].text += piece.text
                runs[-1].width += width
            else:
                runs.append(ShapedRun(piece.text, name, piece.font.size, x, width))
            specs.append(piece.font)
            stripped = piece.text.rstrip()
            if stripped:
                ink_right = x + self.text_width(stripped, piece.font)
            x += width
        if not specs:
            specs = [fallback_font]

        height = 0.0
        baseline = 0.0
        max_ascent = 0.0
        min_descent = 0.0
        for spec in specs:
            ascent, descent = self.font_extents(spec)
            line_height = self.line_height(spec)
            leading = (line_height - (ascent - descent)) / 2
            height = max(height, line_height)
            baseline = max(baseline, leading + ascent)
            max_ascent = max(max_ascent, ascent)
            min_descent = min(min_descent, descent)

        logical = LineBox(x=0.0, y=0.0, width=x, height=height, ascent=baseline)
        ink = LineBox(
            x=0.0,
            y=baseline - max_ascent,
            width=ink_right,
            height=max_ascent - min_descent if ink_right > 0 else 0.0,
        )
        return ShapedLine(runs=runs, logical=logical, ink=ink)

    def _justify(self, line: ShapedLine, wrap_width: float) -> ShapedLine:
        spaces = line.text.count(" ")
        slack = wrap_width - line.logical.width
        if spaces == 0 or slack <= 0:
            return line
        spacing = slack / spaces
        x = 0.0
        for run in line.runs:
            run.x = x
            run.width += run.text.count(" ") * spacing
            x += run.width
        logical = line.logical
        line.logical = LineBox(logical.x, logical.y, wrap_width, logical.height, logical.ascent)
        line.word_spacing = spacing
        return line


def _split_hard_lines(runs: Sequence[TextRun], base_font: FontSpec) -> List[Tuple[List[TextRun], FontSpec]]:
    """
    Split runs on embedded newlines, dropping carriage returns and expanding
    tabs to 8-cell stops. Each hard line is returned with the font used to
    size it when it is empty.
    """
    lines: List[Tuple[List[TextRun], FontSpec]] = []
    current: List[TextRun] = []
    current_font = base_font
    column = 0
    for run in runs:
        current_font = run.font
        segments = run.text.replace("\r", "").split("\n")
        for index, segment in enumerate(segments):
            if index > 0:
                lines.append((current, current_font))
                current = []
                column = 0
            if "\t" in segment:
                expanded = []
                for char in segment:
                    if char == "\t":
                        pad = TAB_WIDTH - column % TAB_WIDTH
                        expanded.append(" " * pad)
                        column += pad
                    else:
                        expanded.append(char)
                        column += 1
                segment = "".join(expanded)
            else:
                column += len(segment)
            if segment:
                current.append(TextRun(segment, run.font))
    lines.append((current, current_font))
    return lines
