"""Flow placement of styled blocks onto the active page."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .canvas import PageSink
from .geometry import PageSetup
from .models import BlockSettings, PageStyle, ShapingOptions, StyledTextBlock
from .typesetter import Typesetter
from .units import Length, format_length

logger = logging.getLogger(__name__)


def collapse_margin(current: BlockSettings, following: Optional[BlockSettings]) -> Length:
    """Vertical gap after a block.

    The larger of the block's bottom margin and the next block's top margin,
    never their sum. The last block keeps its own bottom margin.
    """
    gap = current.effective_margin_bottom
    if following is not None:
        gap = max(gap, following.effective_margin_top)
    return gap


def shaping_options(settings: BlockSettings) -> Optional[ShapingOptions]:
    """Typesetter options for a block; ``None`` when there is no indent."""
    if settings.indent_left is None:
        return None
    return ShapingOptions(indent_left=settings.indent_left, indent_left_rows=settings.effective_indent_rows)


class FlowPlacer:
    """Places blocks top to bottom, shaping each with the typesetter."""

    def __init__(
        self,
        page_setup: PageSetup,
        sink: PageSink,
        typesetter: Typesetter,
        page_style_provider: Callable[[], Optional[PageStyle]],
    ):
        self.page_setup = page_setup
        self.sink = sink
        self.typesetter = typesetter
        self.page_style_provider = page_style_provider

    def place(self, blocks: List[StyledTextBlock], width: Length, x: Length, y: Length) -> Length:
        """Shape and draw ``blocks`` starting with the top-left corner at ``(x, y)``.

        ``blocks`` is the pending queue and is emptied on return, whether
        placement succeeded or not. Blocks drawn before a failure stay on
        the page.

        Returns:
            The cursor position below the last block, trailing margin included.

        Raises:
            ParseError: If the page geometry cannot be resolved.
            ShapingError: If a block cannot be laid out.
        """
        try:
            self.page_setup.ensure_page(self.sink, self.page_style_provider)
            for index, block in enumerate(blocks):
                unit = self.typesetter.shape(block, width, shaping_options(block.settings))
                self.sink.place_at(x, y, unit)
                y -= unit.height + unit.depth

                following = blocks[index + 1].settings if index + 1 < len(blocks) else None
                y -= collapse_margin(block.settings, following)
            logger.debug("Placed %d block(s), cursor at %s", len(blocks), format_length(y))
            return y
        finally:
            blocks.clear()
