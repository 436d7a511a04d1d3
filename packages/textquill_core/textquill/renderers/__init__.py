"""
Rendering surfaces - PostScript, PDF and SVG output.
"""

from typing import BinaryIO, Dict, Optional, Type, Union

from ..engine.page_engine import PageConfig
from ..utils.enums import OutputFormat
from .base_renderer import RenderSurface
from .pdf_surface import PDFSurface
from .postscript_surface import PostScriptSurface
from .svg_surface import SVGSurface

SURFACES: Dict[OutputFormat, Type[RenderSurface]] = {
    OutputFormat.POSTSCRIPT: PostScriptSurface,
    OutputFormat.PDF: PDFSurface,
    OutputFormat.SVG: SVGSurface,
}


def surface_class(output_format: Union[OutputFormat, str]) -> Type[RenderSurface]:
    """Surface implementation for an output format."""
    if not isinstance(output_format, OutputFormat):
        output_format = OutputFormat.parse(output_format)
    return SURFACES[output_format]


def create_surface(
    output_format: Union[OutputFormat, str],
    stream: BinaryIO,
    geometry: PageConfig,
    title: Optional[str] = None,
    owner: Optional[str] = None,
) -> RenderSurface:
    """Instantiate the surface for ``output_format`` writing to ``stream``."""
    return surface_class(output_format)(stream, geometry, title=title, owner=owner)


__all__ = [
    "RenderSurface",
    "PostScriptSurface",
    "PDFSurface",
    "SVGSurface",
    "SURFACES",
    "surface_class",
    "create_surface",
]
