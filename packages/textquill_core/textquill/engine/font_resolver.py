"""Resolve Pango-style font descriptions to fonts registered with ReportLab."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from ..exceptions import FontError

logger = logging.getLogger(__name__)

DEFAULT_FAMILY = "Monospace"
DEFAULT_SIZE = 12.0

FONT_SEARCH_DIRS = [
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
    Path.home() / ".fonts",
    Path.home() / ".local/share/fonts",
    Path("/System/Library/Fonts"),
    Path("/Library/Fonts"),
    Path("C:/Windows/Fonts"),
]

FONT_EXTENSIONS = (".ttf", ".otf", ".ttc")

# Standard PDF/PostScript fonts: regular, bold, italic, bold italic
_STANDARD_FAMILIES = {
    "courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
    "helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "times": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
}

_FAMILY_ALIASES = {
    "monospace": "courier",
    "mono": "courier",
    "fixed": "courier",
    "courier": "courier",
    "courier new": "courier",
    "sans": "helvetica",
    "sans-serif": "helvetica",
    "sans serif": "helvetica",
    "helvetica": "helvetica",
    "arial": "helvetica",
    "serif": "times",
    "times": "times",
    "times-roman": "times",
    "times roman": "times",
    "times new roman": "times",
}

_BOLD_WORDS = {"bold", "heavy", "black", "semibold", "demibold"}
_ITALIC_WORDS = {"italic", "oblique"}
_IGNORED_WORDS = {"regular", "normal", "book", "medium"}


@dataclass(slots=True, frozen=True)
class FontSpec:
    """A parsed font description such as ``"Monospace Bold 12"``."""
    family: str = DEFAULT_FAMILY
    size: float = DEFAULT_SIZE
    bold: bool = False
    italic: bool = False

    @classmethod
    def parse(cls, description: Optional[str]) -> "FontSpec":
        words = (description or "").replace(",", " ").split()
        size = DEFAULT_SIZE
        if words:
            try:
                size = float(words[-1])
                words = words[:-1]
            except ValueError:
                pass
        bold = italic = False
        family_words = []
        for word in words:
            lowered = word.lower()
            if lowered in _BOLD_WORDS:
                bold = True
            elif lowered in _ITALIC_WORDS:
                italic = True
            elif lowered in _IGNORED_WORDS:
                continue
            else:
                family_words.append(word)
        if size <= 0:
            raise FontError("Font size must be positive", description)
        family = " ".join(family_words) or DEFAULT_FAMILY
        return cls(family=family, size=size, bold=bold, italic=italic)

    def scaled(self, factor: float) -> "FontSpec":
        return replace(self, size=self.size * factor)

    def derive(self, **changes) -> "FontSpec":
        return replace(self, **changes)


def _fc_match(pattern: str) -> Optional[Path]:
    try:
        result = subprocess.run(
            ["fc-match", "-f", "%{file}\n", pattern],
            check=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
        )
    except (FileNotFoundError, subprocess.CalledProcessError):
        return None

    output = (result.stdout or "").strip().splitlines()
    if not output:
        return None
    path = Path(output[0]).expanduser()
    return path if path.exists() else None


def _variant_name(family: str, bold: bool, italic: bool) -> str:
    variant = family.replace(" ", "")
    if bold and italic:
        variant += "-BoldItalic"
    elif bold:
        variant += "-Bold"
    elif italic:
        variant += "-Italic"
    return variant


def _matches_family(path: Path, family: str, bold: bool, italic: bool) -> bool:
    stem = path.stem.lower().replace(" ", "").replace("_", "").replace("-", "")
    if family.lower().replace(" ", "") not in stem:
        return False
    return ("bold" in stem) == bold and (("italic" in stem) or ("oblique" in stem)) == italic


@lru_cache(maxsize=128)
def find_font_file(family: str, bold: bool = False, italic: bool = False) -> Optional[Path]:
    """Locate a TrueType/OpenType file for a family, via fontconfig then a directory scan."""
    styles = [name for flag, name in ((bold, "Bold"), (italic, "Italic")) if flag]
    pattern = f"{family}:style={' '.join(styles)}" if styles else family
    path = _fc_match(pattern)
    if path is not None and path.suffix.lower() in FONT_EXTENSIONS:
        # fc-match always answers; only trust it when the family is actually present
        if family.lower().replace(" ", "") in path.stem.lower().replace(" ", "").replace("-", ""):
            return path

    for search_dir in FONT_SEARCH_DIRS:
        if not search_dir.exists():
            continue
        for ext in FONT_EXTENSIONS:
            for candidate in search_dir.rglob(f"*{ext}"):
                if _matches_family(candidate, family, bold, italic):
                    return candidate
    return None


@lru_cache(maxsize=128)
def _register(family: str, bold: bool, italic: bool) -> str:
    key = _FAMILY_ALIASES.get(family.lower())
    if key is not None:
        regular, bold_name, italic_name, bold_italic = _STANDARD_FAMILIES[key]
        if bold and italic:
            return bold_italic
        if bold:
            return bold_name
        if italic:
            return italic_name
        return regular

    name = _variant_name(family, bold, italic)
    if name in pdfmetrics.getRegisteredFontNames():
        return name

    path = find_font_file(family, bold, italic)
    if path is None:
        raise FontError("Unable to resolve font", _variant_name(family, bold, italic))
    try:
        pdfmetrics.registerFont(TTFont(name, str(path)))
    except (TTFError, OSError) as exc:
        raise FontError("Unable to load font file", f"{path}: {exc}") from exc
    logger.info(f"Registered font {name} from {path}")
    return name


def resolve_font_name(spec: FontSpec) -> str:
    """
    Return the ReportLab font name for a font spec, registering TrueType
    files on first use.

    Raises:
        FontError: if the family cannot be found or loaded
    """
    return _register(spec.family, spec.bold, spec.italic)


def standard_font_names() -> Tuple[str, ...]:
    return tuple(name for names in _STANDARD_FAMILIES.values() for name in names)


def is_standard_font(font_name: str) -> bool:
    """True for the fonts every PostScript interpreter carries."""
    return any(font_name in names for names in _STANDARD_FAMILIES.values())


def standard_fallback(font_name: str) -> Tuple[str, bool]:
    """Map any registered font to a standard font of the same style, for PostScript output."""
    if is_standard_font(font_name):
        return font_name, False
    bold = "Bold" in font_name
    italic = "Italic" in font_name or "Oblique" in font_name
    return _register(DEFAULT_FAMILY, bold, italic), True
