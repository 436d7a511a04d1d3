"""
Utility helpers shared by the engine, the surfaces and the CLI.
"""

from .enums import (
    AlignmentType,
    Direction,
    OutputFormat,
    PaperSize,
    PAPER_DIMENSIONS,
    WrapMode,
)
from .logger import configure_logging, get_logger, set_log_level
from .units import POINTS_PER_INCH, per_inch_to_points

__all__ = [
    "AlignmentType",
    "Direction",
    "OutputFormat",
    "PaperSize",
    "PAPER_DIMENSIONS",
    "WrapMode",
    "configure_logging",
    "get_logger",
    "set_log_level",
    "POINTS_PER_INCH",
    "per_inch_to_points",
]
