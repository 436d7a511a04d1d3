"""
PDF surface built on the ReportLab canvas.

Every page is drawn in a flipped coordinate system so callers keep the
top-left origin of the layout engine.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from ..engine.font_resolver import is_standard_font
from ..engine.text_metrics import ShapedLine, ShapedRun
from ..exceptions import RenderingError
from ..version import __version__
from .base_renderer import PointT, RenderSurface

logger = logging.getLogger(__name__)


class PDFSurface(RenderSurface):
    """Writes pages to a ReportLab canvas bound to the output stream."""

    format_name = "PDF"
    rotates_landscape = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        size = self.config.surface_size
        self.canvas = canvas.Canvas(self.stream, pagesize=(size.width, size.height))
        self.canvas.setCreator(f"textquill {__version__}")
        if self.title:
            self.canvas.setTitle(self.title)
        if self.owner:
            self.canvas.setAuthor(self.owner)

    def _begin_page(self, page_number: int) -> None:
        c = self.canvas
        c.setPageSize((self.config.surface_size.width, self.config.surface_size.height))
        c.saveState()
        c.translate(0, self.config.surface_size.height)
        c.scale(1, -1)
        if self.config.rotate_surface:
            c.translate(self.config.page_height, 0)
            c.rotate(90)

    def _show_line(self, x: float, y: float, line: ShapedLine) -> None:
        c = self.canvas
        scale_x, scale_y = self.scale
        for run in line.runs:
            c.saveState()
            c.translate(x + run.x * scale_x, y)
            c.scale(scale_x, -scale_y)
            if line.word_spacing and not is_standard_font(run.font_name):
                self._draw_spaced_words(run, line.word_spacing)
            else:
                text = c.beginText(0, 0)
                text.setFont(run.font_name, run.font_size)
                if line.word_spacing:
                    text.setWordSpace(line.word_spacing)
                text.textOut(run.text)
                c.drawText(text)
            c.restoreState()

    def _draw_spaced_words(self, run: ShapedRun, spacing: float) -> None:
        # Embedded TrueType subsets do not map the space to code 32, so the
        # PDF word spacing operator would be ignored; place each word instead.
        c = self.canvas
        c.setFont(run.font_name, run.font_size)
        x = 0.0
        space_width = pdfmetrics.stringWidth(" ", run.font_name, run.font_size)
        for index, word in enumerate(run.text.split(" ")):
            if index:
                x += space_width + spacing
            if word:
                c.drawString(x, 0, word)
                x += pdfmetrics.stringWidth(word, run.font_name, run.font_size)

    def _stroke(self, segments: List[Tuple[PointT, PointT]], width: float) -> None:
        c = self.canvas
        path = c.beginPath()
        for start, end in segments:
            path.moveTo(*start)
            path.lineTo(*end)
        c.setLineWidth(width)
        c.drawPath(path, stroke=1, fill=0)

    def _end_page(self) -> None:
        self.canvas.restoreState()
        self.canvas.showPage()

    def _finish(self) -> None:
        try:
            self.canvas.save()
        except OSError as exc:
            raise RenderingError("Unable to write PDF output", str(exc)) from exc
