"""
Pytest configuration for textquill
"""

import io
import logging
import sys
from pathlib import Path
from typing import List, Optional

import pytest

from textquill.config import LayoutOptions
from textquill.engine.font_resolver import FontSpec
from textquill.engine.geometry import LineBox
from textquill.engine.page_engine import GeometryCalculator, PageConfig
from textquill.engine.paragraph_segmenter import MeasuredLine
from textquill.engine.text_metrics import ShapedLine, ShapedRun, TextShaper
from textquill.renderers.base_renderer import RenderSurface


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid handler leaks between tests."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


class FakeShaper(TextShaper):
    """
    Deterministic shaper: every character is ``char_width`` wide and every
    line ``line_height`` tall at the base font size.
    """

    def __init__(self, char_width: float = 6.0, line_height: float = 12.0,
                 font: Optional[FontSpec] = None):
        self.char_width = char_width
        self.base_line_height = line_height
        super().__init__(font or FontSpec("Monospace", 10.0))

    def _ratio(self, spec: FontSpec) -> float:
        return spec.size / self.font.size

    def text_width(self, text, spec):
        return len(text) * self.char_width * self._ratio(spec)

    def font_extents(self, spec):
        height = self.line_height(spec)
        return height * 0.6, -height * 0.2

    def line_height(self, spec=None):
        return self.base_line_height * self._ratio(spec or self.font)


class RecordingSurface(RenderSurface):
    """Surface that records every drawing call instead of serializing it."""

    format_name = "recording"

    def __init__(self, config: PageConfig):
        super().__init__(io.BytesIO(), config)
        self.calls: List[tuple] = []

    def begin_page(self, page_number):
        self.calls.append(("begin_page", page_number))
        super().begin_page(page_number)

    def set_transform(self, scale_x, scale_y):
        self.calls.append(("set_transform", scale_x, scale_y))
        super().set_transform(scale_x, scale_y)

    def move_to(self, x, y):
        self.calls.append(("move_to", x, y))
        super().move_to(x, y)

    def draw_line_segment(self, x, y):
        self.calls.append(("line_to", x, y))
        super().draw_line_segment(x, y)

    def stroke(self, width):
        self.calls.append(("stroke", width))
        super().stroke(width)

    def show_line(self, line):
        self.calls.append(("show_line", line.text))
        super().show_line(line)

    def end_page(self):
        self.calls.append(("end_page",))
        super().end_page()

    def finish(self):
        self.calls.append(("finish",))
        super().finish()

    def named(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]

    def _begin_page(self, page_number):
        pass

    def _stroke(self, segments, width):
        pass

    def _show_line(self, x, y, line):
        pass

    def _end_page(self):
        pass

    def _finish(self):
        pass


@pytest.fixture
def fake_shaper():
    return FakeShaper()


@pytest.fixture
def shaper_factory():
    return FakeShaper


@pytest.fixture
def page_config():
    """Factory: geometry for a set of layout option overrides."""
    def build(rotates_landscape: bool = False, **overrides) -> PageConfig:
        return GeometryCalculator(LayoutOptions(**overrides)).compute(rotates_landscape)
    return build


@pytest.fixture
def recording_surface():
    """Factory: recording surface bound to a page config."""
    return RecordingSurface


def make_line(height: float = 12.0, width: float = 30.0, text: str = "x",
              formfeed: bool = False, paragraph_index: int = 0) -> MeasuredLine:
    """A measured line with fixed extents, for flow tests."""
    logical = LineBox(0.0, 0.0, width, height, ascent=height * 0.8)
    shaped = ShapedLine(
        runs=[ShapedRun(text, "Courier", 10.0, 0.0, width)],
        logical=logical,
        ink=LineBox(0.0, 0.0, width, height),
    )
    return MeasuredLine(shaped, logical, shaped.ink, formfeed, paragraph_index)


@pytest.fixture
def line_factory():
    return make_line


@pytest.fixture
def temp_dir(tmp_path) -> Path:
    """Temporary directory for tests."""
    return tmp_path


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that run the whole pipeline"
    )
    # Ignore logging errors during tests
    logging.raiseExceptions = False
