"""Data structures shared by the resolver, the placer and their collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .units import Length


###############################################################################
# Page geometry
###############################################################################


@dataclass(frozen=True, slots=True)
class PageDimensions:
    """Page size and margins, resolved together in one step."""

    width: Length
    height: Length
    margin_left: Length
    margin_right: Length
    margin_top: Length
    margin_bottom: Length


@dataclass(slots=True)
class PageStyle:
    """Default page record as declared by an ``@page`` rule.

    Margin literals are kept as text; an empty string means unspecified.
    """

    papersize: str = ""
    margin_top: str = ""
    margin_bottom: str = ""
    margin_left: str = ""
    margin_right: str = ""


###############################################################################
# Styled content
###############################################################################


@dataclass(slots=True)
class BlockSettings:
    """Placement settings of a styled block. ``None`` means unset."""

    indent_left: Optional[Length] = None
    indent_left_rows: Optional[int] = None
    margin_top: Optional[Length] = None
    margin_bottom: Optional[Length] = None

    @property
    def effective_margin_top(self) -> Length:
        return self.margin_top if self.margin_top is not None else 0

    @property
    def effective_margin_bottom(self) -> Length:
        return self.margin_bottom if self.margin_bottom is not None else 0

    @property
    def effective_indent_rows(self) -> int:
        """Number of indented lines; 1 when an indent is set without a row count."""
        if self.indent_left_rows is not None:
            return self.indent_left_rows
        return 1


@dataclass(slots=True)
class TextRun:
    """Contiguous text sharing one font."""

    text: str
    font_name: str = "Helvetica"
    font_size: float = 12.0
    bold: bool = False
    italic: bool = False


@dataclass(slots=True)
class StyledTextBlock:
    """Block-level element ready to be shaped."""

    runs: List[TextRun] = field(default_factory=list)
    settings: BlockSettings = field(default_factory=BlockSettings)
    line_height: float = 1.2
    tag: str = "p"

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


###############################################################################
# Shaped output
###############################################################################


@dataclass(frozen=True, slots=True)
class ShapingOptions:
    """Options handed to the typesetter for one block."""

    indent_left: Length = 0
    indent_left_rows: int = 0


@dataclass(slots=True)
class ShapedLine:
    """One line of a laid-out block.

    ``baseline`` is the distance from the top of the block down to the
    baseline of the line.
    """

    x_offset: Length
    baseline: Length
    runs: List[TextRun] = field(default_factory=list)
    width: Length = 0


@dataclass(slots=True)
class LaidOutUnit:
    """Measured vertical unit produced by the typesetter.

    ``height`` is measured from the top down to the last baseline,
    ``depth`` is the descent below that baseline.
    """

    height: Length
    depth: Length
    width: Length = 0
    lines: List[ShapedLine] = field(default_factory=list)


@dataclass(slots=True)
class DocumentMetadata:
    """Information dictionary written with the finished document."""

    title: str = ""
    author: str = ""
    keywords: str = ""
    creator: str = ""
    subject: str = ""
