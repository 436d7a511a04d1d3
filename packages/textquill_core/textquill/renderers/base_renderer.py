"""
Base class for rendering surfaces.

A surface receives drawing intents in page coordinates (points, origin at the
top-left corner of the logical page, Y growing downwards) and serializes them
to a page-description format. Calls must arrive in document order:
``begin_page``, drawing calls, ``end_page``, repeated, then ``finish``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import BinaryIO, ClassVar, List, Optional, Tuple

from ..engine.page_engine import PageConfig
from ..engine.text_metrics import ShapedLine
from ..exceptions import RenderingError

logger = logging.getLogger(__name__)

PointT = Tuple[float, float]


class RenderSurface(ABC):
    """Append-only drawing surface for one document."""

    format_name: ClassVar[str] = ""
    # True when the backend keeps portrait media and rotates landscape pages itself
    rotates_landscape: ClassVar[bool] = False

    def __init__(
        self,
        stream: BinaryIO,
        config: PageConfig,
        title: Optional[str] = None,
        owner: Optional[str] = None,
    ):
        self.stream = stream
        self.config = config
        self.title = title
        self.owner = owner
        self.page_number: Optional[int] = None
        self.pages_written = 0
        self.scale: PointT = (1.0, 1.0)
        self._current: Optional[PointT] = None
        self._path: List[Tuple[PointT, PointT]] = []
        self._finished = False

    @property
    def in_page(self) -> bool:
        return self.page_number is not None

    def _require_page(self, operation: str) -> None:
        if self._finished:
            raise RenderingError(f"{operation} after finish", self.format_name)
        if not self.in_page:
            raise RenderingError(f"{operation} outside of a page", self.format_name)

    def _require_point(self, operation: str) -> PointT:
        self._require_page(operation)
        if self._current is None:
            raise RenderingError(f"{operation} without a current point", self.format_name)
        return self._current

    def begin_page(self, page_number: int) -> None:
        if self._finished:
            raise RenderingError("begin_page after finish", self.format_name)
        if self.in_page:
            raise RenderingError("begin_page while a page is open", f"page {self.page_number}")
        self.page_number = page_number
        self.scale = (1.0, 1.0)
        self._current = None
        self._path = []
        self._begin_page(page_number)

    def set_transform(self, scale_x: float, scale_y: float) -> None:
        """Scale applied to glyphs of subsequent ``show_line`` calls, about each line origin."""
        self._require_page("set_transform")
        self.scale = (scale_x, scale_y)

    def move_to(self, x: float, y: float) -> None:
        self._require_page("move_to")
        self._current = (x, y)

    def draw_line_segment(self, x: float, y: float) -> None:
        start = self._require_point("draw_line_segment")
        self._path.append((start, (x, y)))
        self._current = (x, y)

    def stroke(self, width: float) -> None:
        self._require_page("stroke")
        if self._path:
            self._stroke(self._path, width)
        self._path = []

    def show_line(self, line: ShapedLine) -> None:
        x, y = self._require_point("show_line")
        if line.runs:
            self._show_line(x, y, line)

    def end_page(self) -> None:
        self._require_page("end_page")
        self._end_page()
        self.pages_written += 1
        self.page_number = None

    def finish(self) -> None:
        if self.in_page:
            raise RenderingError("finish while a page is open", f"page {self.page_number}")
        if self._finished:
            return
        self._finish()
        self._finished = True
        logger.info(f"{self.format_name} surface finished with {self.pages_written} page(s)")

    @abstractmethod
    def _begin_page(self, page_number: int) -> None:
        ...

    @abstractmethod
    def _stroke(self, segments: List[Tuple[PointT, PointT]], width: float) -> None:
        ...

    @abstractmethod
    def _show_line(self, x: float, y: float, line: ShapedLine) -> None:
        ...

    @abstractmethod
    def _end_page(self) -> None:
        ...

    @abstractmethod
    def _finish(self) -> None:
        ...
