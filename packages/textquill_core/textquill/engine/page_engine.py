"""Page geometry: page size, orientation, columns, gutters and header band.

This engine handles:
- paper preset selection and explicit overrides
- landscape swap of the logical page, and of the surface when the
  output backend does not rotate pages itself
- column width/height derivation and validation
- folding the measured header/footer band into the usable column height
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from ..config import LayoutOptions
from ..exceptions import ConfigError
from ..utils.enums import Direction
from .geometry import Margins, Size

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class HeaderBand:
    """Vertical space reserved by the header and footer lines."""
    header_height: float = 0.0
    footer_height: float = 0.0


@dataclass(slots=True, frozen=True)
class PageConfig:
    """Immutable page geometry shared by every layout component."""
    page_size: Size
    surface_size: Size
    margins: Margins
    columns: int
    column_width: float
    column_height: float
    gutter_width: float
    header_separator: float = 0.0
    header_height: float = 0.0
    footer_height: float = 0.0
    lpi: float = 0.0
    cpi: float = 0.0
    direction: Direction = Direction.LTR
    wordwrap: bool = True
    justify: bool = False
    markup: bool = False
    stretch_chars: bool = False
    separation_line: bool = True
    landscape: bool = False
    rotate_surface: bool = False
    draw_header: bool = False
    draw_footer: bool = False
    duplex: bool = True
    tumble: bool = True
    recover_invalid_input: bool = False

    @property
    def page_width(self) -> float:
        return self.page_size.width

    @property
    def page_height(self) -> float:
        return self.page_size.height

    @property
    def is_rtl(self) -> bool:
        return self.direction == Direction.RTL

    @property
    def text_top(self) -> float:
        """Y of the top edge of every column; line baselines are measured from here."""
        return self.margins.top + self.header_separator

    def column_left(self, column_index: int) -> float:
        """Left edge of a column. Right-to-left documents count columns from the right."""
        physical = column_index
        if self.is_rtl:
            physical = self.columns - 1 - column_index
        return self.margins.left + physical * (self.column_width + self.gutter_width)

    def separator_x(self, column_index: int) -> float:
        """X of the rule drawn at the leading edge of ``column_index``."""
        if self.is_rtl:
            column_index = self.columns - column_index
        if column_index == 1:
            total_gutter = self.gutter_width / 2
        else:
            total_gutter = (column_index - 0.5) * self.gutter_width
        return self.margins.left + self.column_width * column_index + total_gutter

    def separator_span(self) -> tuple[float, float]:
        """Top and bottom Y of a column separator rule."""
        top = self.margins.top + self.header_height + self.header_separator / 2
        bottom = self.page_height - self.margins.bottom - self.footer_height
        return top, bottom

    def with_header_band(self, band: HeaderBand) -> "PageConfig":
        """Return a config whose column height excludes the header/footer band."""
        column_height = (
            self.page_height
            - self.margins.top
            - self.header_separator
            - self.margins.bottom
            - band.header_height
            - band.footer_height
        )
        if column_height <= 0:
            raise ConfigError(
                "Header band leaves no room for text",
                f"column height {column_height:.2f}pt",
            )
        logger.info(
            f"Header band: header={band.header_height:.2f}pt footer={band.footer_height:.2f}pt, "
            f"column height {self.column_height:.2f}pt -> {column_height:.2f}pt"
        )
        return replace(
            self,
            header_height=band.header_height,
            footer_height=band.footer_height,
            column_height=column_height,
        )


class GeometryCalculator:
    """Derives a ``PageConfig`` from ``LayoutOptions``."""

    def __init__(self, options: LayoutOptions):
        self.options = options.validate()

    def surface_size(self, rotates_landscape: bool) -> Size:
        """
        Media size handed to the rendering surface.

        Backends that rotate landscape pages themselves keep the portrait
        media; all others receive the swapped dimensions.
        """
        portrait = Size.from_tuple(self.options.paper_dimensions())
        if self.options.landscape and not rotates_landscape:
            return portrait.swapped()
        return portrait

    def compute(self, rotates_landscape: bool = False) -> PageConfig:
        """
        Compute the page geometry.

        Args:
            rotates_landscape: True when the output backend keeps portrait
                media and rotates landscape content itself

        Returns:
            PageConfig

        Raises:
            ConfigError: if margins and gutters leave no room for a column
        """
        opts = self.options
        page_size = Size.from_tuple(opts.paper_dimensions())
        if opts.landscape:
            page_size = page_size.swapped()

        duplex = True if opts.duplex is None else opts.duplex
        tumble = True if opts.tumble is None else opts.tumble

        header_separator = opts.header_separator if opts.draw_header else 0.0
        total_gutter = 0.0 if opts.columns == 1 else opts.gutter_width * (opts.columns - 1)
        column_width = (
            page_size.width - opts.left_margin - opts.right_margin - total_gutter
        ) / opts.columns
        column_height = page_size.height - opts.top_margin - header_separator - opts.bottom_margin

        if column_width <= 0:
            raise ConfigError(
                "Margins and gutters exceed the page width",
                f"column width {column_width:.2f}pt",
            )
        if column_height <= 0:
            raise ConfigError(
                "Margins exceed the page height",
                f"column height {column_height:.2f}pt",
            )

        config = PageConfig(
            page_size=page_size,
            surface_size=self.surface_size(rotates_landscape),
            margins=Margins(
                top=opts.top_margin,
                bottom=opts.bottom_margin,
                left=opts.left_margin,
                right=opts.right_margin,
            ),
            columns=opts.columns,
            column_width=column_width,
            column_height=column_height,
            gutter_width=opts.gutter_width,
            header_separator=header_separator,
            lpi=opts.lpi,
            cpi=opts.cpi,
            direction=opts.direction,
            wordwrap=opts.wordwrap,
            justify=opts.justify,
            markup=opts.markup,
            stretch_chars=opts.stretch_chars,
            separation_line=opts.separation_line,
            landscape=opts.landscape,
            rotate_surface=opts.landscape and rotates_landscape,
            draw_header=opts.draw_header,
            draw_footer=opts.draw_footer,
            duplex=duplex,
            tumble=tumble,
            recover_invalid_input=opts.recover_invalid_input,
        )
        logger.info(
            f"Page {page_size.width:.2f}x{page_size.height:.2f}pt "
            f"({'landscape' if opts.landscape else 'portrait'}), "
            f"{opts.columns} column(s) of {column_width:.2f}x{column_height:.2f}pt"
        )
        return config


def compute_page_config(options: LayoutOptions, rotates_landscape: bool = False,
                        band: Optional[HeaderBand] = None) -> PageConfig:
    """Convenience wrapper: geometry plus an optional header band."""
    config = GeometryCalculator(options).compute(rotates_landscape)
    if band is not None:
        config = config.with_header_band(band)
    return config
