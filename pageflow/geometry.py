"""Page geometry resolution.

The page size and the four margins are resolved once per document, from
the default ``@page`` rule of the stylesheet or, when there is none, from
a built-in default page record. Both cases go through
:func:`resolve_page_dimensions`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from .exceptions import DocumentStateError
from .models import PageDimensions, PageStyle
from .papersize import DEFAULT_PAPERSIZE, papersize_literals
from .units import format_length, parse_length

if TYPE_CHECKING:
    from .canvas import PageSink

logger = logging.getLogger(__name__)

DEFAULT_MARGIN = "1cm"


def default_page_style(papersize: str = DEFAULT_PAPERSIZE) -> PageStyle:
    """Page record used when the stylesheet has no default ``@page`` rule."""
    return PageStyle(papersize=papersize)


def resolve_page_dimensions(
    page_style: Optional[PageStyle],
    default_margin: str = DEFAULT_MARGIN,
    default_papersize: str = DEFAULT_PAPERSIZE,
) -> PageDimensions:
    """Resolve page size and margins from a page record.

    Args:
        page_style: Default page record, or ``None`` for the built-in one.
        default_margin: Literal substituted for every empty margin.
        default_papersize: Paper size of the built-in page record.

    Returns:
        Fully populated page dimensions.

    Raises:
        ParseError: If any size or margin literal is malformed. Nothing is
            returned in that case, so callers never see partial geometry.
    """
    if page_style is None:
        page_style = default_page_style(default_papersize)

    width_literal, height_literal = papersize_literals(page_style.papersize)
    margin_top = parse_length(page_style.margin_top or default_margin)
    margin_bottom = parse_length(page_style.margin_bottom or default_margin)
    margin_left = parse_length(page_style.margin_left or default_margin)
    margin_right = parse_length(page_style.margin_right or default_margin)
    width = parse_length(width_literal)
    height = parse_length(height_literal)

    return PageDimensions(
        width=width,
        height=height,
        margin_left=margin_left,
        margin_right=margin_right,
        margin_top=margin_top,
        margin_bottom=margin_bottom,
    )


class PageState(Enum):
    """Lifecycle of the page owned by a document."""

    UNINITIALIZED = "uninitialized"
    PAGE_ACTIVE = "page_active"


class PageSetup:
    """One-shot page initialization for a document.

    Moves from ``UNINITIALIZED`` to ``PAGE_ACTIVE`` on the first successful
    :meth:`ensure_page` and never back.
    """

    def __init__(self, default_margin: str = DEFAULT_MARGIN, default_papersize: str = DEFAULT_PAPERSIZE):
        self.default_margin = default_margin
        self.default_papersize = default_papersize
        self._state = PageState.UNINITIALIZED
        self._dimensions: Optional[PageDimensions] = None

    @property
    def state(self) -> PageState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is PageState.PAGE_ACTIVE

    @property
    def dimensions(self) -> PageDimensions:
        """Resolved geometry of the active page."""
        if self._dimensions is None:
            raise DocumentStateError("Page geometry has not been resolved yet")
        return self._dimensions

    def ensure_page(
        self,
        sink: "PageSink",
        page_style_provider: Callable[[], Optional[PageStyle]],
    ) -> PageDimensions:
        """Resolve geometry and create the page unless a page already exists.

        ``page_style_provider`` is only consulted on the first successful
        call; later calls return the stored geometry without doing any work.
        """
        if self._state is PageState.PAGE_ACTIVE:
            return self._dimensions

        dimensions = resolve_page_dimensions(
            page_style_provider(),
            default_margin=self.default_margin,
            default_papersize=self.default_papersize,
        )

        sink.default_page_width = dimensions.width
        sink.default_page_height = dimensions.height
        sink.create_page()
        self._dimensions = dimensions
        self._state = PageState.PAGE_ACTIVE

        logger.debug(
            "Page created: %s x %s, margins t=%s b=%s l=%s r=%s",
            format_length(dimensions.width),
            format_length(dimensions.height),
            format_length(dimensions.margin_top),
            format_length(dimensions.margin_bottom),
            format_length(dimensions.margin_left),
            format_length(dimensions.margin_right),
        )
        return dimensions
