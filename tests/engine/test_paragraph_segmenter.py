"""Tests for paragraph segmentation."""

import pytest

from textquill.engine.paragraph_segmenter import (
    ParagraphSegmenter,
    cell_width,
    is_invalid_codepoint,
    iter_measured_lines,
)
from textquill.exceptions import EncodingError
from textquill.utils.enums import AlignmentType, Direction


class TestCellWidth:
    """Test suite for character cell widths."""

    def test_ascii_is_one_cell(self):
        assert cell_width("a") == 1

    def test_wide_ideograph_is_two_cells(self):
        assert cell_width("中") == 2

    def test_combining_mark_is_zero_cells(self):
        assert cell_width("́") == 0

    def test_surrogate_cannot_be_measured(self):
        with pytest.raises(EncodingError):
            cell_width("\udcff")

    def test_invalid_codepoint_detection(self):
        assert is_invalid_codepoint("\udc80")
        assert not is_invalid_codepoint("�")


class TestParagraphSegmenter:
    """Test suite for ParagraphSegmenter."""

    def test_splits_on_newline_and_formfeed(self, page_config, fake_shaper):
        segmenter = ParagraphSegmenter(page_config(), fake_shaper)

        paragraphs = segmenter.segment("one\ntwo\fthree\n")

        assert [p.text for p in paragraphs] == ["one", "two", "three"]
        assert [p.formfeed for p in paragraphs] == [False, True, False]
        assert [(p.start, p.end) for p in paragraphs] == [(0, 3), (4, 7), (8, 13)]

    def test_empty_lines_become_empty_paragraphs(self, page_config, fake_shaper):
        paragraphs = ParagraphSegmenter(page_config(), fake_shaper).segment("a\n\nb\n")

        assert [p.text for p in paragraphs] == ["a", "", "b"]
        assert paragraphs[1].shaped.line_count == 1
        assert paragraphs[1].lines[0].height == pytest.approx(12.0)

    def test_text_without_trailing_newline(self, page_config, fake_shaper):
        paragraphs = ParagraphSegmenter(page_config(), fake_shaper).segment("a\nb")

        assert [p.text for p in paragraphs] == ["a", "b"]

    def test_long_paragraph_wraps_at_column_width(self, page_config, fake_shaper):
        config = page_config(paper="200x400")
        paragraphs = ParagraphSegmenter(config, fake_shaper).segment("word " * 30 + "\n")

        assert len(paragraphs) == 1
        assert paragraphs[0].shaped.line_count > 1
        assert paragraphs[0].shaped.wrap_width == pytest.approx(config.column_width)

    def test_no_wrap_keeps_one_line(self, page_config, fake_shaper):
        config = page_config(paper="200x400", wordwrap=False)
        paragraphs = ParagraphSegmenter(config, fake_shaper).segment("word " * 30 + "\n")

        assert paragraphs[0].shaped.line_count == 1
        assert paragraphs[0].shaped.wrap_width is None

    def test_rtl_aligns_right(self, page_config, fake_shaper):
        config = page_config(direction=Direction.RTL)
        paragraphs = ParagraphSegmenter(config, fake_shaper).segment("abc\n")

        assert paragraphs[0].shaped.alignment == AlignmentType.RIGHT
        assert paragraphs[0].shaped.direction == Direction.RTL

    def test_invalid_codepoint_is_a_boundary(self, page_config, fake_shaper):
        paragraphs = ParagraphSegmenter(page_config(), fake_shaper).segment("ab\udcffcd\n")

        assert [p.text for p in paragraphs] == ["ab", "cd"]

    def test_invalid_codepoint_skipped_in_recover_mode(self, page_config, fake_shaper):
        config = page_config(recover_invalid_input=True)
        paragraphs = ParagraphSegmenter(config, fake_shaper).segment("ab\udcffcd\n")

        assert [p.text for p in paragraphs] == ["abcd"]


class TestCpiRewrap:
    """Character-per-inch re-wrapping of long paragraphs."""

    def test_budget_from_column_width(self, page_config, fake_shaper):
        # 360pt column = 5 inches
        config = page_config(paper="432x400", cpi=10)

        assert ParagraphSegmenter(config, fake_shaper).cpi_budget == 50

    def test_long_paragraph_is_cut_into_fragments(self, page_config, fake_shaper):
        config = page_config(paper="432x400", cpi=10)

        paragraphs = ParagraphSegmenter(config, fake_shaper).segment("x" * 120 + "\n")

        assert len(paragraphs) >= 3
        assert all(len(p.text) <= 50 for p in paragraphs)
        assert "".join(p.text for p in paragraphs) == "x" * 120

    def test_fragments_are_not_rewrapped(self, page_config, fake_shaper):
        config = page_config(paper="432x400", cpi=10)

        paragraphs = ParagraphSegmenter(config, fake_shaper).segment("x" * 120 + "\n")

        assert all(p.shaped.line_count == 1 for p in paragraphs)
        assert paragraphs[0].shaped.wrap_width is None

    def test_wide_characters_count_double(self, page_config, fake_shaper):
        config = page_config(paper="432x400", cpi=10)

        paragraphs = ParagraphSegmenter(config, fake_shaper).segment("中" * 30 + "\n")

        assert [len(p.text) for p in paragraphs] == [25, 5]

    def test_short_paragraph_uses_word_wrap(self, page_config, fake_shaper):
        config = page_config(paper="432x400", cpi=10)

        paragraphs = ParagraphSegmenter(config, fake_shaper).segment("short line\n")

        assert len(paragraphs) == 1
        assert paragraphs[0].shaped.wrap_width == pytest.approx(360.0)

    def test_formfeed_kept_on_last_fragment(self, page_config, fake_shaper):
        config = page_config(paper="432x400", cpi=10)

        paragraphs = ParagraphSegmenter(config, fake_shaper).segment("x" * 70 + "\f")

        assert [p.formfeed for p in paragraphs] == [False, True]


class TestMarkupSegmentation:
    """Markup mode treats the whole buffer as one paragraph."""

    def test_whole_buffer_is_one_paragraph(self, page_config, fake_shaper):
        config = page_config(markup=True)

        paragraphs = ParagraphSegmenter(config, fake_shaper).segment("<b>one</b>\ntwo\fthree\n")

        assert len(paragraphs) == 1
        texts = [line.text for line in paragraphs[0].lines]
        assert texts[:2] == ["one", "two three"]

    def test_styled_runs_use_their_fonts(self, page_config, fake_shaper):
        config = page_config(markup=True)

        paragraphs = ParagraphSegmenter(config, fake_shaper).segment("plain <b>bold</b>\n")

        fonts = [run.font_name for run in paragraphs[0].lines[0].runs]
        assert fonts == ["Courier", "Courier-Bold"]


class TestMeasuredLines:
    """Test suite for the global line stream."""

    def test_paragraph_released_after_its_lines(self, page_config, fake_shaper):
        paragraphs = ParagraphSegmenter(page_config(), fake_shaper).segment("a\nb\n")
        stream = iter_measured_lines(paragraphs)

        first = next(stream)
        assert first.paragraph_index == 0
        assert not paragraphs[0].released

        second = next(stream)
        assert second.paragraph_index == 1
        assert paragraphs[0].released
        assert not paragraphs[1].released

        assert list(stream) == []
        assert paragraphs[1].released
