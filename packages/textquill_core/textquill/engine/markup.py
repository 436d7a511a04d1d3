"""

Parser for the lightweight Pango-style markup accepted in markup mode.

Supported:
- <b>, <i>, <tt>, <big>, <small>
- <u>, <s>, <sub>, <sup> (accepted, drawn as plain text)
- <span> with font_desc/font, font_family/face, weight, style and size
- the standard XML entities

"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import List

from ..exceptions import ShapingFailure
from .font_resolver import FontSpec
from .text_metrics import TextRun

logger = logging.getLogger(__name__)

SCALE_STEP = 1.2

_NAMED_SIZES = {
    "xx-small": SCALE_STEP ** -3,
    "x-small": SCALE_STEP ** -2,
    "small": SCALE_STEP ** -1,
    "medium": 1.0,
    "large": SCALE_STEP,
    "x-large": SCALE_STEP ** 2,
    "xx-large": SCALE_STEP ** 3,
}

_PLAIN_TAGS = {"u", "s", "sub", "sup"}


def parse_markup(text: str, base_font: FontSpec) -> List[TextRun]:
    """
    Parse marked-up text into styled runs.

    Args:
        text: Markup text
        base_font: Font for text outside any tag

    Returns:
        Runs in document order; adjacent runs never share a font

    Raises:
        ShapingFailure: on malformed markup or unknown tags/attributes values
    """
    try:
        root = ET.fromstring(f"<markup>{text}</markup>")
    except ET.ParseError as exc:
        raise ShapingFailure("Malformed markup", str(exc)) from exc

    runs: List[TextRun] = []
    _walk(root, base_font, base_font, runs)
    logger.debug(f"Parsed markup into {len(runs)} run(s)")
    return runs


def _append(runs: List[TextRun], text: str, font: FontSpec) -> None:
    if not text:
        return
    if runs and runs[-1].font == font:
        runs[-1] = TextRun(runs[-1].text + text, font)
    else:
        runs.append(TextRun(text, font))


def _walk(element: ET.Element, font: FontSpec, base_font: FontSpec, runs: List[TextRun]) -> None:
    if element.tag != "markup":
        font = _apply_tag(element, font, base_font)
    _append(runs, element.text or "", font)
    for child in element:
        _walk(child, font, base_font, runs)
        _append(runs, child.tail or "", font)


def _apply_tag(element: ET.Element, font: FontSpec, base_font: FontSpec) -> FontSpec:
    tag = element.tag
    if tag == "b":
        return font.derive(bold=True)
    if tag == "i":
        return font.derive(italic=True)
    if tag == "tt":
        return font.derive(family="Monospace")
    if tag == "big":
        return font.scaled(SCALE_STEP)
    if tag == "small":
        return font.scaled(1 / SCALE_STEP)
    if tag in _PLAIN_TAGS:
        return font
    if tag == "span":
        return _apply_span(element.attrib, font, base_font)
    raise ShapingFailure("Unknown markup tag", f"<{tag}>")


def _apply_span(attrib: dict, font: FontSpec, base_font: FontSpec) -> FontSpec:
    for name, value in attrib.items():
        if name in ("font_desc", "font"):
            words = value.split()
            parsed = FontSpec.parse(value)
            has_size = bool(words) and _is_number(words[-1])
            font = parsed if has_size else parsed.derive(size=font.size)
        elif name in ("font_family", "face"):
            font = font.derive(family=value)
        elif name in ("weight", "font_weight"):
            font = font.derive(bold=_is_bold_weight(value))
        elif name in ("style", "font_style"):
            font = font.derive(italic=value.lower() in ("italic", "oblique"))
        elif name in ("size", "font_size"):
            font = font.derive(size=_parse_size(value, font, base_font))
        else:
            logger.debug(f"Ignoring span attribute {name}={value!r}")
    return font


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def _is_bold_weight(value: str) -> bool:
    token = value.lower()
    if token in ("bold", "ultrabold", "heavy", "semibold"):
        return True
    if token in ("normal", "light", "ultralight", "book"):
        return False
    if _is_number(token):
        return float(token) >= 600
    raise ShapingFailure("Invalid font weight", value)


def _parse_size(value: str, font: FontSpec, base_font: FontSpec) -> float:
    token = value.strip().lower()
    if token == "larger":
        return font.size * SCALE_STEP
    if token == "smaller":
        return font.size / SCALE_STEP
    if token in _NAMED_SIZES:
        return base_font.size * _NAMED_SIZES[token]
    if token.endswith("pt") and _is_number(token[:-2]):
        return float(token[:-2])
    if _is_number(token):
        # Plain numbers are in 1024ths of a point
        return float(token) / 1024.0
    raise ShapingFailure("Invalid font size", value)
