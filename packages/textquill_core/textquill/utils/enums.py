"""Common enumerations used across the layout engine and surfaces."""

from __future__ import annotations

from enum import Enum


class Direction(str, Enum):
    """Base text direction of the document."""

    LTR = "ltr"
    RTL = "rtl"


class AlignmentType(str, Enum):
    """Paragraph alignment handed to the shaper."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


class WrapMode(str, Enum):
    """Line wrapping strategies supported by the shaper."""

    NONE = "none"
    WORD = "word"
    CHAR = "char"
    WORD_CHAR = "word_char"


class OutputFormat(str, Enum):
    """Page-description formats a surface can produce."""

    POSTSCRIPT = "ps"
    PDF = "pdf"
    SVG = "svg"

    @classmethod
    def parse(cls, value: "str | OutputFormat") -> "OutputFormat":
        if isinstance(value, cls):
            return value
        token = str(value).strip().lower()
        if token == "postscript":
            token = "ps"
        return cls(token)


class PaperSize(str, Enum):
    """Standard paper presets."""

    A4 = "a4"
    LETTER = "letter"
    LEGAL = "legal"
    A3 = "a3"


# Width and height in PostScript points (1/72 inch)
PAPER_DIMENSIONS = {
    PaperSize.A4: (595.28, 841.89),
    PaperSize.LETTER: (612.0, 792.0),
    PaperSize.LEGAL: (612.0, 1008.0),
    PaperSize.A3: (842.0, 1190.0),
}
