"""
Page header and footer composition.

A header line has three parts: the timestamp flush left, the source name
centred on the page and the page number flush right. Its reserved band is a
third of the header line's logical height.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional, Tuple

from .page_engine import HeaderBand, PageConfig
from .text_metrics import ShapedLine, TextShaper

if TYPE_CHECKING:
    from ..renderers.base_renderer import RenderSurface

logger = logging.getLogger(__name__)

DATE_FORMAT = "%c"
BAND_DIVISOR = 3.0
RULE_WIDTH = 0.1


class HeaderFooterComposer:
    """Builds, measures and draws the three-part header/footer line."""

    def __init__(
        self,
        shaper: TextShaper,
        source_name: str,
        clock: Optional[Callable[[], datetime]] = None,
        date_format: str = DATE_FORMAT,
    ):
        self.shaper = shaper
        self.source_name = source_name
        self.clock = clock or datetime.now
        self.date_format = date_format

    def texts(self, page_index: int) -> Tuple[str, str, str]:
        """Left, centre and right texts for a page."""
        timestamp = self.clock().strftime(self.date_format)
        return timestamp, self.source_name, f"Page {page_index}"

    def shape(self, page_index: int) -> Tuple[ShapedLine, ShapedLine, ShapedLine]:
        left, center, right = (self._single_line(text) for text in self.texts(page_index))
        return left, center, right

    def _single_line(self, text: str) -> ShapedLine:
        return self.shaper.measure(text, wrap_width=None).lines[0]

    def band_height(self) -> float:
        """Reserved height: one third of the header line's logical height."""
        left = self._single_line(self.texts(1)[0])
        return left.logical.height / BAND_DIVISOR

    def measure_band(self, header: bool = True, footer: bool = False) -> HeaderBand:
        height = self.band_height() if (header or footer) else 0.0
        band = HeaderBand(
            header_height=height if header else 0.0,
            footer_height=height if footer else 0.0,
        )
        logger.debug(f"Measured header band {band}")
        return band

    def positions(self, config: PageConfig, lines: Tuple[ShapedLine, ShapedLine, ShapedLine],
                  is_footer: bool = False) -> Tuple[float, float, float, float]:
        """X of the left, centre and right runs and the shared baseline Y."""
        left, center, right = lines
        if is_footer:
            y = config.page_height - config.margins.bottom
        else:
            y = config.margins.top + config.header_height
        left_x = config.margins.left
        center_x = (config.page_width - center.logical.width) / 2
        right_x = config.page_width - config.margins.right - right.logical.width
        return left_x, center_x, right_x, y

    def rule_y(self, config: PageConfig, is_footer: bool = False) -> float:
        if is_footer:
            return config.page_height - config.margins.bottom - config.footer_height - config.header_separator / 2
        return config.margins.top + config.header_height + config.header_separator / 2

    def draw(self, surface: "RenderSurface", config: PageConfig, page_index: int,
             is_footer: bool = False) -> float:
        """
        Draw the header (or footer) of one page.

        Returns:
            Logical height of the header line
        """
        lines = self.shape(page_index)
        left_x, center_x, right_x, y = self.positions(config, lines, is_footer)
        for x, line in zip((left_x, center_x, right_x), lines):
            surface.move_to(x, y)
            surface.show_line(line)

        # separation_line only governs column separators
        rule_y = self.rule_y(config, is_footer)
        surface.move_to(config.margins.left, rule_y)
        surface.draw_line_segment(config.page_width - config.margins.right, rule_y)
        surface.stroke(RULE_WIDTH)
        return lines[-1].logical.height
