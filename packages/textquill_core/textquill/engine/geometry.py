"""Geometry primitives for page and line calculations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(slots=True, frozen=True)
class Size:
    width: float
    height: float

    @classmethod
    def from_tuple(cls, value: Iterable[float]) -> "Size":
        width, height = value
        return cls(float(width), float(height))

    def swapped(self) -> "Size":
        return Size(self.height, self.width)


@dataclass(slots=True, frozen=True)
class Margins:
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> "Margins":
        return cls(value, value, value, value)


@dataclass(slots=True, frozen=True)
class LineBox:
    """
    Extents of one shaped line, relative to the line origin.

    ``y`` is the offset of the box top from the line top; ``ascent`` is the
    distance from the box top to the baseline (logical boxes only).
    """

    x: float
    y: float
    width: float
    height: float
    ascent: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height
