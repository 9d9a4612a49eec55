"""Page sink backed by a ReportLab canvas."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from .exceptions import DocumentStateError, OutputError
from .models import DocumentMetadata, LaidOutUnit
from .units import Length, format_length, to_points

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Placement:
    """Laid-out unit drawn at an absolute position (top-left of the unit)."""

    x: Length
    y: Length
    unit: LaidOutUnit


class PageSink(ABC):
    """Owner of the physical page and of the final serialization.

    ``default_page_width`` and ``default_page_height`` are set before
    :meth:`create_page` and define the size of the page it creates.
    """

    def __init__(self) -> None:
        self.default_page_width: Length = 0
        self.default_page_height: Length = 0
        self.placements: List[Placement] = []
        self.pages_shipped = 0
        self.has_page = False

    def create_page(self) -> None:
        self.has_page = True
        self._start_page(self.default_page_width, self.default_page_height)

    def place_at(self, x: Length, y: Length, unit: LaidOutUnit) -> None:
        if not self.has_page:
            raise DocumentStateError("No page to draw on")
        self.placements.append(Placement(x, y, unit))
        self._draw(x, y, unit)

    def ship(self) -> None:
        if not self.has_page:
            raise DocumentStateError("No page to ship")
        self._ship_page()
        self.pages_shipped += 1
        self.has_page = False

    @abstractmethod
    def _start_page(self, width: Length, height: Length) -> None: ...

    @abstractmethod
    def _draw(self, x: Length, y: Length, unit: LaidOutUnit) -> None: ...

    @abstractmethod
    def _ship_page(self) -> None: ...

    @abstractmethod
    def finish(self, metadata: DocumentMetadata) -> None:
        """Write all shipped pages to durable output."""


class PdfPageSink(PageSink):
    """Draws laid-out units onto a ReportLab canvas and writes the PDF file."""

    def __init__(self, output_path: str | Path, canvas: Optional[Canvas] = None):
        super().__init__()
        self.output_path = Path(output_path)
        self._canvas = canvas or Canvas(str(self.output_path))

    @property
    def canvas(self) -> Canvas:
        return self._canvas

    def _start_page(self, width: Length, height: Length) -> None:
        self._canvas.setPageSize((to_points(width), to_points(height)))
        logger.debug("Started page %s x %s", format_length(width), format_length(height))

    def _draw(self, x: Length, y: Length, unit: LaidOutUnit) -> None:
        for line in unit.lines:
            cursor = to_points(x + line.x_offset)
            baseline = to_points(y - line.baseline)
            for run in line.runs:
                self._canvas.setFont(run.font_name, run.font_size)
                self._canvas.drawString(cursor, baseline, run.text)
                cursor += pdfmetrics.stringWidth(run.text, run.font_name, run.font_size)

    def _ship_page(self) -> None:
        self._canvas.showPage()

    def finish(self, metadata: DocumentMetadata) -> None:
        self._canvas.setTitle(metadata.title)
        self._canvas.setAuthor(metadata.author)
        self._canvas.setKeywords(metadata.keywords)
        self._canvas.setCreator(metadata.creator)
        self._canvas.setSubject(metadata.subject)
        try:
            self._canvas.save()
        except OSError as exc:
            logger.error("Failed to write PDF file to %s: %s", self.output_path, exc)
            raise OutputError("Failed to write PDF file", str(exc)) from exc
        logger.info("Wrote %d page(s) to %s", self.pages_shipped, self.output_path)
