"""Test doubles shared by the pageflow test suite."""

from typing import Dict, List, Optional, Tuple

from pageflow.canvas import PageSink
from pageflow.exceptions import ShapingError
from pageflow.models import (
    BlockSettings,
    DocumentMetadata,
    LaidOutUnit,
    ShapingOptions,
    StyledTextBlock,
    TextRun,
)
from pageflow.units import parse_length


class RecordingSink(PageSink):
    """Page sink that only records what it is asked to do."""

    def __init__(self):
        super().__init__()
        self.created_pages: List[Tuple[int, int]] = []
        self.finished_with: Optional[DocumentMetadata] = None

    def _start_page(self, width, height):
        self.created_pages.append((width, height))

    def _draw(self, x, y, unit):
        pass

    def _ship_page(self):
        pass

    def finish(self, metadata):
        self.finished_with = metadata


class FakeTypesetter:
    """Typesetter returning fixed metrics; records every call."""

    def __init__(self, height="10pt", depth="2pt", fail_on: Optional[str] = None):
        self.height = parse_length(height)
        self.depth = parse_length(depth)
        self.fail_on = fail_on
        self.calls: List[Tuple[StyledTextBlock, int, Optional[ShapingOptions]]] = []

    def shape(self, block, width, options=None):
        self.calls.append((block, width, options))
        if self.fail_on is not None and block.text == self.fail_on:
            raise ShapingError("Cannot shape block", block.text)
        return LaidOutUnit(height=self.height, depth=self.depth)


def make_block(text: str = "text", **settings) -> StyledTextBlock:
    """Build a block; setting values given as literals are parsed."""
    values: Dict[str, object] = {}
    for key, value in settings.items():
        values[key] = parse_length(value) if isinstance(value, str) else value
    return StyledTextBlock(runs=[TextRun(text)], settings=BlockSettings(**values))
