"""Tests for the PostScript surface."""

import io
import re

import pytest

from textquill.engine.geometry import LineBox
from textquill.engine.text_metrics import ShapedLine, ShapedRun, TextShaper
from textquill.exceptions import RenderingError
from textquill.renderers import PostScriptSurface, create_surface, surface_class
from textquill.renderers.postscript_surface import ps_string


def shaped(text, font_name="Courier", word_spacing=0.0):
    box = LineBox(0.0, 0.0, 7.2 * len(text), 14.4, 10.0)
    return ShapedLine([ShapedRun(text, font_name, 12.0, 0.0, box.width)], box, box, word_spacing)


def render(config, pages, **kwargs):
    stream = io.BytesIO()
    surface = PostScriptSurface(stream, config, **kwargs)
    for number, lines in enumerate(pages, start=1):
        surface.begin_page(number)
        for y, line in enumerate(lines):
            surface.move_to(36.0, 50.0 + 14.4 * y)
            surface.show_line(line)
        surface.end_page()
    surface.finish()
    return stream.getvalue().decode("latin-1")


class TestPostScriptSurface:
    """Test suite for PostScriptSurface."""

    def test_document_structure(self, page_config):
        output = render(page_config(), [[shaped("one")], [shaped("two")]], title="notes.txt", owner="alice")

        assert output.startswith("%!PS-Adobe-3.0\n")
        assert "%%Title: notes.txt" in output
        assert "%%For: alice" in output
        assert "%%BoundingBox: 0 0 595 842" in output
        assert "%%Page: 1 1" in output
        assert "%%Page: 2 2" in output
        assert output.count("showpage") == 2
        assert output.rstrip().endswith("%%Trailer\n%%Pages: 2\n%%EOF")

    def test_text_drawing(self, page_config):
        output = render(page_config(), [[shaped("hello")]])

        assert "/TQ-Courier /Courier TQreencode" in output
        assert "/TQ-Courier 12 selectfont 0 0 moveto (hello) show" in output
        assert "gsave 36 50 translate 1 -1 scale" in output

    def test_pages_are_self_contained(self, page_config):
        output = render(page_config(), [[shaped("one")], [shaped("two", font_name="Times-Bold")], [shaped("three")]])

        setup = output[output.index("%%BeginSetup"):output.index("%%EndSetup")]
        defined = set(re.findall(r"^/(TQ-\S+) /\S+ TQreencode$", setup, re.MULTILINE))
        pages = output.split("%%Page: ")[1:]
        assert len(pages) == 3
        for page in pages:
            assert "TQreencode" not in page
            assert set(re.findall(r"/(TQ-\S+) [\d.]+ selectfont", page)) <= defined
        assert {"TQ-Courier", "TQ-Times-Bold"} <= defined

    def test_portrait_page_orientation(self, page_config):
        output = render(page_config(), [[shaped("x")]])

        assert "%%PageOrientation: Portrait" in output
        assert "90 rotate" not in output

    def test_landscape_rotates_on_portrait_media(self, page_config):
        config = page_config(rotates_landscape=True, landscape=True)

        output = render(config, [[shaped("x")]])

        assert "%%PageOrientation: Landscape" in output
        assert "%%BoundingBox: 0 0 595 842" in output
        assert "595.28 0 translate 90 rotate" in output

    def test_word_spacing_uses_widthshow(self, page_config):
        output = render(page_config(), [[shaped("a b", word_spacing=2.5)]])

        assert "2.5 0 32 (a b) widthshow" in output

    def test_stretch_transform(self, page_config):
        stream = io.BytesIO()
        surface = PostScriptSurface(stream, page_config())
        surface.begin_page(1)
        surface.set_transform(1.0, 0.5)
        surface.move_to(10.0, 20.0)
        surface.show_line(shaped("x"))
        surface.end_page()
        surface.finish()

        assert "gsave 10 20 translate 1 -0.5 scale" in stream.getvalue().decode("latin-1")

    def test_rules(self, page_config):
        stream = io.BytesIO()
        surface = PostScriptSurface(stream, page_config())
        surface.begin_page(1)
        surface.move_to(100.0, 40.0)
        surface.draw_line_segment(100.0, 800.0)
        surface.stroke(0.1)
        surface.end_page()
        surface.finish()

        assert "newpath 100 40 moveto 100 800 lineto 0.1 setlinewidth stroke" in stream.getvalue().decode("latin-1")

    def test_truetype_fonts_fall_back(self, page_config, caplog):
        output = render(page_config(), [[shaped("x", font_name="DejaVuSans-Bold"), shaped("y", font_name="DejaVuSans-Bold")]])

        assert "/TQ-Courier-Bold 12 selectfont" in output
        assert caplog.text.count("in place of DejaVuSans-Bold") == 1

    def test_empty_document_still_has_header(self, page_config):
        output = render(page_config(), [])

        assert output.startswith("%!PS-Adobe-3.0")
        assert "%%Pages: 0" in output


class TestCallOrder:
    """Drawing outside the page protocol is rejected."""

    def test_show_line_outside_page(self, page_config):
        surface = PostScriptSurface(io.BytesIO(), page_config())

        with pytest.raises(RenderingError):
            surface.show_line(shaped("x"))

    def test_segment_without_current_point(self, page_config):
        surface = PostScriptSurface(io.BytesIO(), page_config())
        surface.begin_page(1)

        with pytest.raises(RenderingError):
            surface.draw_line_segment(1.0, 2.0)

    def test_nested_page(self, page_config):
        surface = PostScriptSurface(io.BytesIO(), page_config())
        surface.begin_page(1)

        with pytest.raises(RenderingError):
            surface.begin_page(2)

    def test_finish_with_open_page(self, page_config):
        surface = PostScriptSurface(io.BytesIO(), page_config())
        surface.begin_page(1)

        with pytest.raises(RenderingError):
            surface.finish()


class TestPsString:
    """Test suite for PostScript string literals."""

    def test_escapes_delimiters(self):
        assert ps_string("a(b)c\\") == "(a\\(b\\)c\\\\)"

    def test_latin1_as_octal(self):
        assert ps_string("é") == "(\\351)"

    def test_unencodable_becomes_question_mark(self):
        assert ps_string("中") == "(?)"


class TestSurfaceFactory:
    """Test suite for create_surface."""

    @pytest.mark.parametrize("name,expected", [
        ("ps", "PostScriptSurface"),
        ("postscript", "PostScriptSurface"),
        ("pdf", "PDFSurface"),
        ("svg", "SVGSurface"),
    ])
    def test_surface_class(self, name, expected):
        assert surface_class(name).__name__ == expected

    def test_only_postscript_rotates(self):
        assert surface_class("ps").rotates_landscape is True
        assert surface_class("pdf").rotates_landscape is False
        assert surface_class("svg").rotates_landscape is False

    def test_create_surface(self, page_config):
        surface = create_surface("ps", io.BytesIO(), page_config(), title="t")

        assert isinstance(surface, PostScriptSurface)
        assert surface.title == "t"
