"""Tests for the ReportLab metrics typesetter."""

import pytest
from reportlab.pdfbase import pdfmetrics

from pageflow.exceptions import ShapingError
from pageflow.models import ShapingOptions, StyledTextBlock, TextRun
from pageflow.typesetter import Typesetter
from pageflow.units import from_points, parse_length, to_points

PT = parse_length("1pt")


def block_of(*runs, line_height=1.2):
    return StyledTextBlock(runs=list(runs), line_height=line_height)


class TestTypesetter:
    """Test suite for Typesetter.shape."""

    def setup_method(self):
        self.typesetter = Typesetter()

    def test_single_line_metrics(self):
        unit = self.typesetter.shape(block_of(TextRun("Hello world")), 400 * PT)
        ascent, descent = pdfmetrics.getAscentDescent("Helvetica", 12.0)

        assert len(unit.lines) == 1
        assert unit.height == from_points(ascent)
        assert unit.depth == from_points(-descent)
        assert unit.lines[0].runs[0].text == "Hello world"
        assert unit.width == pytest.approx(from_points(pdfmetrics.stringWidth("Hello world", "Helvetica", 12.0)), abs=1)

    def test_wraps_into_lines(self):
        text = " ".join(["word"] * 40)
        unit = self.typesetter.shape(block_of(TextRun(text)), 100 * PT)

        assert len(unit.lines) > 1
        for line in unit.lines:
            assert line.width <= 100 * PT
        joined = " ".join(run.text.strip() for line in unit.lines for run in line.runs)
        assert joined == text

    def test_baselines_advance_by_leading(self):
        text = " ".join(["word"] * 40)
        unit = self.typesetter.shape(block_of(TextRun(text), line_height=1.5), 100 * PT)

        first, second = unit.lines[0], unit.lines[1]
        assert to_points(second.baseline - first.baseline) == pytest.approx(18.0, abs=1e-4)
        assert unit.height == unit.lines[-1].baseline

    def test_indent_applies_to_first_rows(self):
        text = " ".join(["word"] * 40)
        options = ShapingOptions(indent_left=20 * PT, indent_left_rows=2)

        unit = self.typesetter.shape(block_of(TextRun(text)), 100 * PT, options)

        offsets = [line.x_offset for line in unit.lines]
        assert offsets[:2] == [20 * PT, 20 * PT]
        assert all(offset == 0 for offset in offsets[2:])
        assert unit.lines[0].width <= 80 * PT

    def test_no_indent_rows_means_no_indent(self):
        options = ShapingOptions(indent_left=20 * PT, indent_left_rows=0)

        unit = self.typesetter.shape(block_of(TextRun("short")), 100 * PT, options)

        assert unit.lines[0].x_offset == 0

    def test_forced_line_break(self):
        unit = self.typesetter.shape(block_of(TextRun("one"), TextRun("\n"), TextRun("two")), 400 * PT)

        assert [line.runs[0].text for line in unit.lines] == ["one", "two"]

    def test_word_across_runs_stays_together(self):
        unit = self.typesetter.shape(
            block_of(TextRun("bo", "Helvetica-Bold"), TextRun("ld text")), 400 * PT
        )

        texts = [run.text for run in unit.lines[0].runs]
        assert texts == ["bo", "ld text"]
        assert unit.lines[0].runs[0].font_name == "Helvetica-Bold"

    def test_mixed_sizes_use_largest_ascent(self):
        unit = self.typesetter.shape(
            block_of(TextRun("small ", font_size=8.0), TextRun("big", font_size=24.0)), 400 * PT
        )
        ascent, _ = pdfmetrics.getAscentDescent("Helvetica", 24.0)

        assert unit.height == from_points(ascent)

    def test_empty_block(self):
        unit = self.typesetter.shape(block_of(), 400 * PT)

        assert (unit.height, unit.depth, unit.lines) == (0, 0, [])

    def test_unbreakable_word(self):
        with pytest.raises(ShapingError):
            self.typesetter.shape(block_of(TextRun("Donaudampfschifffahrtsgesellschaft")), 20 * PT)

    def test_indent_wider_than_column(self):
        options = ShapingOptions(indent_left=200 * PT, indent_left_rows=1)

        with pytest.raises(ShapingError):
            self.typesetter.shape(block_of(TextRun("a")), 100 * PT, options)

    def test_unknown_font(self):
        with pytest.raises(ShapingError):
            self.typesetter.shape(block_of(TextRun("text", font_name="NoSuchFont-Regular")), 400 * PT)

    def test_non_positive_width(self):
        with pytest.raises(ShapingError):
            self.typesetter.shape(block_of(TextRun("text")), 0)
