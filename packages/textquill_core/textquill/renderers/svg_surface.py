"""
SVG surface.

SVG has no notion of pages, so each page becomes a ``<g>`` group stacked
below the previous one. The document is serialized on ``finish``.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import List, Optional, Tuple

from ..engine.text_metrics import ShapedLine
from ..exceptions import RenderingError
from .base_renderer import PointT, RenderSurface

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"

_GENERIC_FAMILIES = {
    "Courier": "Courier, monospace",
    "Helvetica": "Helvetica, sans-serif",
    "Times": "Times, serif",
}


def _num(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


def font_attributes(font_name: str, font_size: float) -> dict:
    """CSS font attributes for a ReportLab font name."""
    family, _, style = font_name.partition("-")
    attributes = {
        "font-family": _GENERIC_FAMILIES.get(family, family),
        "font-size": _num(font_size),
    }
    if "Bold" in style:
        attributes["font-weight"] = "bold"
    if "Italic" in style or "Oblique" in style:
        attributes["font-style"] = "italic"
    return attributes


class SVGSurface(RenderSurface):
    """Builds an SVG tree in memory and writes it on finish."""

    format_name = "SVG"
    rotates_landscape = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        ET.register_namespace("", SVG_NS)
        self.root = ET.Element(f"{{{SVG_NS}}}svg", {"version": "1.1"})
        if self.title:
            ET.SubElement(self.root, f"{{{SVG_NS}}}title").text = self.title
        self._page: Optional[ET.Element] = None

    def _begin_page(self, page_number: int) -> None:
        size = self.config.surface_size
        offset = self.pages_written * size.height
        self._page = ET.SubElement(self.root, f"{{{SVG_NS}}}g", {
            "id": f"page-{page_number}",
            "transform": f"translate(0 {_num(offset)})",
        })
        ET.SubElement(self._page, f"{{{SVG_NS}}}rect", {
            "x": "0", "y": "0",
            "width": _num(size.width), "height": _num(size.height),
            "fill": "white",
        })
        if self.config.rotate_surface:
            self._page = ET.SubElement(self._page, f"{{{SVG_NS}}}g", {
                "transform": f"translate({_num(self.config.page_height)} 0) rotate(90)",
            })

    def _show_line(self, x: float, y: float, line: ShapedLine) -> None:
        scale_x, scale_y = self.scale
        for run in line.runs:
            attributes = {
                "transform": (
                    f"translate({_num(x + run.x * scale_x)} {_num(y)}) "
                    f"scale({_num(scale_x)} {_num(scale_y)})"
                ),
                "x": "0",
                "y": "0",
                "{http://www.w3.org/XML/1998/namespace}space": "preserve",
            }
            attributes.update(font_attributes(run.font_name, run.font_size))
            if line.word_spacing:
                attributes["word-spacing"] = _num(line.word_spacing)
            ET.SubElement(self._page, f"{{{SVG_NS}}}text", attributes).text = run.text

    def _stroke(self, segments: List[Tuple[PointT, PointT]], width: float) -> None:
        data = " ".join(
            f"M {_num(start[0])} {_num(start[1])} L {_num(end[0])} {_num(end[1])}"
            for start, end in segments
        )
        ET.SubElement(self._page, f"{{{SVG_NS}}}path", {
            "d": data,
            "stroke": "black",
            "stroke-width": _num(width),
            "fill": "none",
        })

    def _end_page(self) -> None:
        self._page = None

    def _finish(self) -> None:
        size = self.config.surface_size
        height = size.height * max(self.pages_written, 1)
        self.root.set("width", f"{_num(size.width)}pt")
        self.root.set("height", f"{_num(height)}pt")
        self.root.set("viewBox", f"0 0 {_num(size.width)} {_num(height)}")
        try:
            ET.ElementTree(self.root).write(self.stream, encoding="utf-8", xml_declaration=True)
        except (OSError, ValueError) as exc:
            raise RenderingError("Unable to write SVG output", str(exc)) from exc
