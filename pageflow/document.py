"""

Document - main entry point for producing a single-page PDF from HTML chunks.

Typical use::

    doc = Document.new("out.pdf")
    doc.parse_css_string("@page { size: A5; margin: 2cm }")
    page = doc.page_size()
    doc.output_at("<p>Hello</p>", width, page.margin_left, page.height - page.margin_top)
    doc.finish()

"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .canvas import PageSink, PdfPageSink
from .config import DocumentOptions
from .exceptions import DocumentStateError
from .geometry import PageSetup
from .html_reader import HTMLFragmentReader
from .models import DocumentMetadata, PageDimensions, StyledTextBlock
from .placer import FlowPlacer
from .styles import DEFAULT_CSS, Stylesheet
from .typesetter import Typesetter
from .units import Length

logger = logging.getLogger(__name__)


class Document:
    """

    Renders styled HTML fragments onto one page.

    Page geometry is resolved on first need (``page_size()`` or the first
    ``output_at()``) and kept for the lifetime of the document.

    """

    def __init__(
        self,
        output_path: Union[str, Path],
        options: Optional[Union[DocumentOptions, Dict[str, Any]]] = None,
        sink: Optional[PageSink] = None,
        typesetter: Optional[Typesetter] = None,
    ) -> None:
        """

        Args:
        output_path: PDF file written by ``finish()``
        options: ``DocumentOptions`` or a plain dict of option values
        sink: Page sink; defaults to a ReportLab backed ``PdfPageSink``
        typesetter: Typesetter; defaults to the ReportLab metrics typesetter

        """
        if not isinstance(options, DocumentOptions):
            options = DocumentOptions.from_dict(options)
        self.options = options
        self.output_path = Path(output_path)

        self.title = ""
        self.author = ""
        self.keywords = ""
        self.creator = ""
        self.subject = ""

        self.stylesheet = Stylesheet()
        self.stylesheet.add_css_text(DEFAULT_CSS)
        self.sink = sink or PdfPageSink(self.output_path)
        self.typesetter = typesetter or Typesetter(options.default_font, options.default_font_size)
        self.page_setup = PageSetup(options.default_margin, options.default_papersize)
        self.placer = FlowPlacer(self.page_setup, self.sink, self.typesetter, self.stylesheet.default_page)
        self._reader = HTMLFragmentReader(self.stylesheet, options)
        self._pending: List[StyledTextBlock] = []
        self._finished = False

    @classmethod
    def new(cls, output_path: Union[str, Path], options: Optional[DocumentOptions] = None) -> "Document":
        """Create a document bound to ``output_path``."""
        return cls(output_path, options)

    @property
    def pending(self) -> Tuple[StyledTextBlock, ...]:
        """Blocks submitted but not yet placed."""
        return tuple(self._pending)

    @property
    def finished(self) -> bool:
        return self._finished

    def parse_css_string(self, css: str) -> None:
        """Add CSS instructions to the document stylesheet."""
        self._check_open()
        self.stylesheet.add_css_text(css)

    def page_size(self) -> PageDimensions:
        """Return the dimensions of the current page, resolving them if needed."""
        self._check_open()
        return self._ensure_page()

    def output_at(self, html: str, width: Length, x: Length, y: Length) -> Length:
        """

        Write an HTML fragment with its top-left corner at ``(x, y)``.

        Args:
        html: HTML chunk
        width: Column width in scaled points
        x: Left edge in scaled points from the left of the page
        y: Top edge in scaled points from the bottom of the page

        Returns:
        Cursor position below the placed content

        """
        self._check_open()
        self._ensure_page()
        self._pending.extend(self._reader.read(html))
        return self.placer.place(self._pending, width, x, y)

    def finish(self) -> None:
        """Write metadata, ship the page and write the PDF file."""
        self._check_open()
        self._ensure_page()
        self._finished = True
        metadata = DocumentMetadata(
            title=self.title,
            author=self.author,
            keywords=self.keywords,
            creator=self.creator,
            subject=self.subject,
        )
        self.sink.ship()
        self.sink.finish(metadata)

    def _ensure_page(self) -> PageDimensions:
        return self.page_setup.ensure_page(self.sink, self.stylesheet.default_page)

    def _check_open(self) -> None:
        if self._finished:
            raise DocumentStateError("Document is already finished", str(self.output_path))
