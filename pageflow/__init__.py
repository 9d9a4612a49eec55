"""
pageflow - place styled HTML fragments on a fixed-size PDF page.

Features:
- Page size and margins from ``@page`` rules, A4 with 1cm margins otherwise
- Top-to-bottom flow placement with collapsing vertical margins
- ReportLab font metrics for line breaking, ReportLab canvas for output

Quick Start:
    from pageflow import Document, parse_length

    doc = Document.new("out.pdf")
    page = doc.page_size()
    doc.output_at("<h1>Hello</h1><p>World</p>", parse_length("12cm"),
                  page.margin_left, page.height - page.margin_top)
    doc.finish()
"""

from .version import __version__, __version_info__

from .exceptions import (
    PageflowError,
    ParseError,
    StyleError,
    ShapingError,
    OutputError,
    DocumentStateError,
)
from .config import DocumentOptions
from .models import (
    BlockSettings,
    DocumentMetadata,
    LaidOutUnit,
    PageDimensions,
    PageStyle,
    ShapingOptions,
    StyledTextBlock,
    TextRun,
)
from .units import Length, parse_length, to_points, from_points
from .geometry import PageSetup, PageState, resolve_page_dimensions
from .placer import FlowPlacer, collapse_margin
from .document import Document

__all__ = [
    "__version__",
    "__version_info__",
    "PageflowError",
    "ParseError",
    "StyleError",
    "ShapingError",
    "OutputError",
    "DocumentStateError",
    "DocumentOptions",
    "BlockSettings",
    "DocumentMetadata",
    "LaidOutUnit",
    "PageDimensions",
    "PageStyle",
    "ShapingOptions",
    "StyledTextBlock",
    "TextRun",
    "Length",
    "parse_length",
    "to_points",
    "from_points",
    "PageSetup",
    "PageState",
    "resolve_page_dimensions",
    "FlowPlacer",
    "collapse_margin",
    "Document",
]
