"""

PostScript surface - DSC-conforming PostScript written by hand.

Media always stays portrait; landscape pages are rotated on the page with a
``%%PageOrientation: Landscape`` comment so print spoolers do not rotate them
a second time. Only the standard PostScript fonts are referenced: any other
font is replaced by the standard font of the same style.

"""

from __future__ import annotations

import logging
from typing import List, Set, Tuple

from ..engine.font_resolver import standard_fallback, standard_font_names
from ..engine.text_metrics import ShapedLine
from ..exceptions import RenderingError
from ..version import __version__
from .base_renderer import PointT, RenderSurface

logger = logging.getLogger(__name__)

_PROLOG = """%%BeginProlog
/TQreencode {
  findfont dup length dict begin
    { 1 index /FID ne { def } { pop pop } ifelse } forall
    /Encoding ISOLatin1Encoding def
    currentdict
  end
  definefont pop
} bind def
%%EndProlog
"""


def ps_string(text: str) -> str:
    """Encode text as a Latin-1 PostScript string literal."""
    out = ["("]
    for char in text:
        code = ord(char)
        if code > 0xFF:
            code = ord("?")
        if char in "()\\":
            out.append("\\" + char)
        elif 32 <= code < 127:
            out.append(chr(code))
        else:
            out.append(f"\\{code:03o}")
    out.append(")")
    return "".join(out)


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return text if text not in ("", "-0") else "0"


class PostScriptSurface(RenderSurface):
    """Multi-page PostScript Level 2 output."""

    format_name = "PostScript"
    rotates_landscape = True

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._header_written = False
        self._substituted: Set[str] = set()

    def _write(self, text: str) -> None:
        try:
            self.stream.write(text.encode("latin-1"))
        except (OSError, ValueError) as exc:
            raise RenderingError("Unable to write PostScript output", str(exc)) from exc

    def _write_header(self) -> None:
        width, height = self.config.surface_size.width, self.config.surface_size.height
        lines = [
            "%!PS-Adobe-3.0",
            f"%%Creator: textquill {__version__}",
        ]
        if self.title:
            lines.append(f"%%Title: {_dsc_text(self.title)}")
        if self.owner:
            lines.append(f"%%For: {_dsc_text(self.owner)}")
        lines += [
            f"%%BoundingBox: 0 0 {round(width)} {round(height)}",
            f"%%DocumentMedia: Default {_fmt(width)} {_fmt(height)} 0 () ()",
            "%%LanguageLevel: 2",
            "%%Pages: (atend)",
            "%%EndComments",
        ]
        self._write("\n".join(lines) + "\n" + _PROLOG)
        # Defined once here; page bodies only select them
        setup = "".join(f"/TQ-{name} /{name} TQreencode\n" for name in standard_font_names())
        self._write(f"%%BeginSetup\n{setup}%%EndSetup\n")
        self._header_written = True

    def _begin_page(self, page_number: int) -> None:
        if not self._header_written:
            self._write_header()
        orientation = "Landscape" if self.config.landscape else "Portrait"
        ordinal = self.pages_written + 1
        self._write(
            f"%%Page: {page_number} {ordinal}\n"
            "%%BeginPageSetup\n"
            f"%%PageOrientation: {orientation}\n"
            "%%EndPageSetup\n"
            "gsave\n"
            f"0 {_fmt(self.config.surface_size.height)} translate 1 -1 scale\n"
        )
        if self.config.rotate_surface:
            self._write(f"{_fmt(self.config.page_height)} 0 translate 90 rotate\n")

    def _font_name(self, font_name: str) -> str:
        name, substituted = standard_fallback(font_name)
        if substituted and font_name not in self._substituted:
            logger.warning(f"PostScript output uses {name} in place of {font_name}")
            self._substituted.add(font_name)
        return f"TQ-{name}"

    def _show_line(self, x: float, y: float, line: ShapedLine) -> None:
        scale_x, scale_y = self.scale
        for run in line.runs:
            font = self._font_name(run.font_name)
            if line.word_spacing:
                show = f"{_fmt(line.word_spacing)} 0 32 {ps_string(run.text)} widthshow"
            else:
                show = f"{ps_string(run.text)} show"
            self._write(
                f"gsave {_fmt(x + run.x * scale_x)} {_fmt(y)} translate "
                f"{_fmt(scale_x)} {_fmt(-scale_y)} scale "
                f"/{font} {_fmt(run.font_size)} selectfont 0 0 moveto {show} grestore\n"
            )

    def _stroke(self, segments: List[Tuple[PointT, PointT]], width: float) -> None:
        parts = ["newpath"]
        for start, end in segments:
            parts.append(f"{_fmt(start[0])} {_fmt(start[1])} moveto {_fmt(end[0])} {_fmt(end[1])} lineto")
        parts.append(f"{_fmt(width)} setlinewidth stroke")
        self._write(" ".join(parts) + "\n")

    def _end_page(self) -> None:
        self._write("grestore\nshowpage\n")

    def _finish(self) -> None:
        if not self._header_written:
            self._write_header()
        self._write(f"%%Trailer\n%%Pages: {self.pages_written}\n%%EOF\n")
        self.stream.flush()


def _dsc_text(value: str) -> str:
    return "".join(char if 32 <= ord(char) < 127 else "?" for char in value)
