"""
Typesetter - turns a styled text block into a measured, drawable unit.

Uses ReportLab font metrics for:
- word widths (greedy line breaking)
- ascent/descent of every line
- left indent of the first rows of a block
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from reportlab.pdfbase import pdfmetrics

from .exceptions import ShapingError
from .models import LaidOutUnit, ShapedLine, ShapingOptions, StyledTextBlock, TextRun
from .units import Length, format_length, from_points, to_points

logger = logging.getLogger(__name__)

_WHITESPACE_RE = re.compile(r"(\s+)")

# Marker for a forced line break (``<br>``) inside the word stream
_BREAK = None

Word = List[TextRun]


class Typesetter:
    """Greedy line breaker measuring text with ReportLab."""

    def __init__(self, default_font: str = "Helvetica", default_font_size: float = 12.0):
        self.default_font = default_font
        self.default_font_size = default_font_size

    def shape(
        self,
        block: StyledTextBlock,
        width: Length,
        options: Optional[ShapingOptions] = None,
    ) -> LaidOutUnit:
        """Lay out ``block`` into lines no wider than ``width``.

        Args:
            block: Block to shape.
            width: Column width in scaled points.
            options: Left indent applied to the first ``indent_left_rows`` lines.

        Returns:
            Laid-out unit whose ``height`` reaches the last baseline and whose
            ``depth`` is the descent below it.

        Raises:
            ShapingError: If the width is not positive, a font is unknown, or a
                word does not fit on a line.
        """
        if width <= 0:
            raise ShapingError("Column width must be positive", format_length(width))
        options = options or ShapingOptions()

        lines: List[ShapedLine] = []
        metrics: List[Tuple[float, float, float]] = []
        line_runs: List[TextRun] = []
        line_width = 0.0

        def finish_line() -> None:
            nonlocal line_runs, line_width
            offset = self._indent(options, len(lines))
            lines.append(ShapedLine(x_offset=offset, baseline=0, runs=_merge_runs(line_runs), width=from_points(line_width)))
            metrics.append(self._line_metrics(line_runs, block))
            line_runs = []
            line_width = 0.0

        for word in _split_words(block.runs):
            if word is _BREAK:
                finish_line()
                continue

            word_width = sum(self._measure(run.text, run) for run in word)
            available = self._available(width, options, len(lines))
            space = self._measure(" ", word[0]) if line_runs else 0.0
            if line_runs and line_width + space + word_width > available:
                finish_line()
                available = self._available(width, options, len(lines))
                space = 0.0
            if word_width > available:
                raise ShapingError(
                    "Word does not fit on the line",
                    f"{''.join(run.text for run in word)!r} needs {word_width:.2f}pt, "
                    f"{max(available, 0.0):.2f}pt available",
                )

            if space:
                first = word[0]
                word = [_with_text(first, " " + first.text)] + word[1:]
            line_runs.extend(word)
            line_width += space + word_width

        if line_runs:
            finish_line()

        if not lines:
            return LaidOutUnit(height=0, depth=0, width=0, lines=[])

        baseline = 0.0
        for index, (line, (ascent, descent, leading)) in enumerate(zip(lines, metrics)):
            baseline = ascent if index == 0 else baseline + leading
            line.baseline = from_points(baseline)

        unit = LaidOutUnit(
            height=lines[-1].baseline,
            depth=from_points(metrics[-1][1]),
            width=max(line.x_offset + line.width for line in lines),
            lines=lines,
        )
        logger.debug(
            "Shaped <%s> into %d line(s): height=%s depth=%s",
            block.tag,
            len(lines),
            format_length(unit.height),
            format_length(unit.depth),
        )
        return unit

    # ------------------------------------------------------------------
    def _indent(self, options: ShapingOptions, line_index: int) -> Length:
        if options.indent_left and line_index < options.indent_left_rows:
            return options.indent_left
        return 0

    def _available(self, width: Length, options: ShapingOptions, line_index: int) -> float:
        return to_points(width - self._indent(options, line_index))

    def _measure(self, text: str, run: TextRun) -> float:
        try:
            return pdfmetrics.stringWidth(text, run.font_name, run.font_size)
        except Exception as exc:
            raise ShapingError("Unknown font", run.font_name) from exc

    def _line_metrics(self, runs: List[TextRun], block: StyledTextBlock) -> Tuple[float, float, float]:
        """Return (ascent, descent, leading) in points for one line."""
        if not runs:
            runs = block.runs[:1] or [TextRun("", self.default_font, self.default_font_size)]
        ascent = descent = size = 0.0
        for run in runs:
            try:
                run_ascent, run_descent = pdfmetrics.getAscentDescent(run.font_name, run.font_size)
            except Exception as exc:
                raise ShapingError("Unknown font", run.font_name) from exc
            ascent = max(ascent, run_ascent)
            descent = max(descent, -run_descent)
            size = max(size, run.font_size)
        return ascent, descent, size * block.line_height


def _with_text(run: TextRun, text: str) -> TextRun:
    return TextRun(text=text, font_name=run.font_name, font_size=run.font_size, bold=run.bold, italic=run.italic)


def _split_words(runs: List[TextRun]) -> List[Optional[Word]]:
    """Split runs into words; a word may span several runs (``<b>bo</b>ld``)."""
    words: List[Optional[Word]] = []
    current: Word = []
    for run in runs:
        for piece in _WHITESPACE_RE.split(run.text):
            if not piece:
                continue
            if piece.isspace():
                if current:
                    words.append(current)
                    current = []
                words.extend([_BREAK] * piece.count("\n"))
            else:
                current.append(_with_text(run, piece))
    if current:
        words.append(current)
    return words


def _merge_runs(runs: List[TextRun]) -> List[TextRun]:
    merged: List[TextRun] = []
    for run in runs:
        previous = merged[-1] if merged else None
        if previous and previous.font_name == run.font_name and previous.font_size == run.font_size:
            merged[-1] = _with_text(previous, previous.text + run.text)
        else:
            merged.append(run)
    return merged
