"""
Configuration record for a pagination run.

``LayoutOptions`` is the raw, user-facing configuration: paper name, margins,
densities and switches, with the defaults of the classic text-to-PostScript
tool. It is turned into an immutable ``PageConfig`` by the geometry
calculator (see ``textquill.engine.page_engine``).
"""

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from .exceptions import ConfigError
from .utils.enums import Direction, OutputFormat, PaperSize, PAPER_DIMENSIONS

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Monospace 12"
DEFAULT_HEADER_FONT = "Monospace Bold 12"
DEFAULT_MARGIN = 36.0
DEFAULT_GUTTER = 40.0
DEFAULT_HEADER_SEPARATOR = 20.0

_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}
_EXPLICIT_SIZE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*[xX]\s*(\d+(?:\.\d+)?)\s*$")


@dataclass(frozen=True)
class LayoutOptions:
    """Everything a caller can configure about one document."""

    paper: str = PaperSize.A4.value
    page_width: Optional[float] = None
    page_height: Optional[float] = None
    columns: int = 1
    top_margin: float = DEFAULT_MARGIN
    bottom_margin: float = DEFAULT_MARGIN
    left_margin: float = DEFAULT_MARGIN
    right_margin: float = DEFAULT_MARGIN
    gutter_width: float = DEFAULT_GUTTER
    header_separator: float = DEFAULT_HEADER_SEPARATOR
    landscape: bool = False
    lpi: float = 0.0
    cpi: float = 0.0
    wordwrap: bool = True
    justify: bool = False
    stretch_chars: bool = False
    markup: bool = False
    direction: Direction = Direction.LTR
    draw_header: bool = False
    draw_footer: bool = False
    separation_line: bool = True
    font: str = DEFAULT_FONT
    header_font: str = DEFAULT_HEADER_FONT
    output_format: OutputFormat = OutputFormat.POSTSCRIPT
    duplex: Optional[bool] = None
    tumble: Optional[bool] = None
    recover_invalid_input: bool = False
    filename: str = "stdin"
    title: Optional[str] = None
    owner: Optional[str] = None
    encoding: Optional[str] = None

    def validate(self) -> "LayoutOptions":
        """Reject values no geometry can be built from. Returns self."""
        if self.columns < 1:
            raise ConfigError("Column count must be at least 1", str(self.columns))
        for name in ("top_margin", "bottom_margin", "left_margin", "right_margin",
                     "gutter_width", "header_separator"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name.replace('_', ' ')} must not be negative", str(getattr(self, name)))
        if self.lpi < 0:
            raise ConfigError("given LPI value was invalid", str(self.lpi))
        if self.cpi < 0:
            raise ConfigError("given CPI value was invalid", str(self.cpi))
        self.paper_dimensions()
        return self

    def paper_dimensions(self) -> Tuple[float, float]:
        """Portrait page size in points, before any landscape swap."""
        explicit = _EXPLICIT_SIZE.match(self.paper or "")
        if explicit:
            width, height = float(explicit.group(1)), float(explicit.group(2))
        else:
            try:
                width, height = PAPER_DIMENSIONS[PaperSize((self.paper or "").strip().lower())]
            except ValueError:
                raise ConfigError("Unknown page size name", str(self.paper)) from None
        if self.page_width is not None:
            width = float(self.page_width)
        if self.page_height is not None:
            height = float(self.page_height)
        if width <= 0 or height <= 0:
            raise ConfigError("Page size must be positive", f"{width}x{height}")
        return width, height

    def with_overrides(self, **overrides: Any) -> "LayoutOptions":
        """Return a copy with the non-None overrides applied and converted."""
        cleaned = {key: value for key, value in overrides.items() if value is not None}
        if not cleaned:
            return self
        return replace(self, **_convert_values(cleaned))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "LayoutOptions":
        """
        Build options from loosely typed values (config files, option lists).

        Keys may use dashes or underscores. Unknown keys are ignored with a
        warning.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for raw_key, raw_value in mapping.items():
            key = str(raw_key).replace("-", "_")
            if key == "rtl":
                key, raw_value = "direction", Direction.RTL if _to_bool(key, raw_value) else Direction.LTR
            if key not in known:
                logger.warning(f"Ignoring unknown layout option '{raw_key}'")
                continue
            values[key] = raw_value
        return cls(**_convert_values(values)).validate()


_BOOL_FIELDS = {
    "landscape", "wordwrap", "justify", "stretch_chars", "markup", "draw_header",
    "draw_footer", "separation_line", "recover_invalid_input",
}
_OPTIONAL_BOOL_FIELDS = {"duplex", "tumble"}
_FLOAT_FIELDS = {
    "top_margin", "bottom_margin", "left_margin", "right_margin", "gutter_width",
    "header_separator", "lpi", "cpi",
}
_OPTIONAL_FLOAT_FIELDS = {"page_width", "page_height"}


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    token = str(value).strip().lower()
    if token in _TRUE_WORDS:
        return True
    if token in _FALSE_WORDS:
        return False
    raise ConfigError(f"Invalid boolean for '{key}'", str(value))


def _to_float(key: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid number for '{key}'", str(value)) from None


def _convert_values(values: Mapping[str, Any]) -> Dict[str, Any]:
    converted: Dict[str, Any] = {}
    for key, value in values.items():
        if key in _BOOL_FIELDS:
            converted[key] = _to_bool(key, value)
        elif key in _OPTIONAL_BOOL_FIELDS:
            converted[key] = None if value is None else _to_bool(key, value)
        elif key in _FLOAT_FIELDS:
            converted[key] = _to_float(key, value)
        elif key in _OPTIONAL_FLOAT_FIELDS:
            converted[key] = None if value is None else _to_float(key, value)
        elif key == "columns":
            try:
                converted[key] = int(value)
            except (TypeError, ValueError):
                raise ConfigError("Invalid column count", str(value)) from None
        elif key == "direction":
            try:
                converted[key] = Direction(str(getattr(value, "value", value)).strip().lower())
            except ValueError:
                raise ConfigError("Unknown text direction", str(value)) from None
        elif key == "output_format":
            try:
                converted[key] = OutputFormat.parse(value)
            except ValueError:
                raise ConfigError("Unknown output format", str(value)) from None
        else:
            converted[key] = value
    return converted


def load_options(path: Optional[str | Path] = None, **overrides: Any) -> LayoutOptions:
    """
    Load options from a TOML file's ``[layout]`` table and apply overrides.

    Args:
        path: TOML file path, or None for defaults only
        **overrides: Values that win over the file (None values are skipped)

    Returns:
        Validated LayoutOptions
    """
    data: Dict[str, Any] = {}
    if path is not None:
        config_path = Path(path)
        try:
            with config_path.open("rb") as handle:
                document = tomllib.load(handle)
        except OSError as exc:
            raise ConfigError("Unable to read configuration file", f"{config_path}: {exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError("Malformed configuration file", f"{config_path}: {exc}") from exc
        layout_table = document.get("layout", {})
        if not isinstance(layout_table, dict):
            raise ConfigError("Configuration key 'layout' must be a table", str(config_path))
        data.update(layout_table)
        logger.info(f"Loaded {len(layout_table)} layout options from {config_path}")
    data.update({key: value for key, value in overrides.items() if value is not None})
    return LayoutOptions.from_mapping(data)
