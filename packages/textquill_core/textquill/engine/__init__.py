"""
Layout engine: page geometry, shaping, segmentation and line flow.
"""

from .font_resolver import FontSpec, resolve_font_name
from .geometry import LineBox, Margins, Size
from .header_footer import HeaderFooterComposer
from .line_breaker import LineBreaker
from .markup import parse_markup
from .page_engine import GeometryCalculator, HeaderBand, PageConfig, compute_page_config
from .pagination_manager import LineFlowEngine, PaginationResult, Placement, compute_stretch_scale
from .paragraph_segmenter import MeasuredLine, Paragraph, ParagraphSegmenter, iter_measured_lines
from .text_metrics import ShapedLine, ShapedParagraph, ShapedRun, TextRun, TextShaper

__all__ = [
    "FontSpec",
    "resolve_font_name",
    "LineBox",
    "Margins",
    "Size",
    "HeaderFooterComposer",
    "LineBreaker",
    "parse_markup",
    "GeometryCalculator",
    "HeaderBand",
    "PageConfig",
    "compute_page_config",
    "LineFlowEngine",
    "PaginationResult",
    "Placement",
    "compute_stretch_scale",
    "MeasuredLine",
    "Paragraph",
    "ParagraphSegmenter",
    "iter_measured_lines",
    "ShapedLine",
    "ShapedParagraph",
    "ShapedRun",
    "TextRun",
    "TextShaper",
]
