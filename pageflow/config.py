"""Document level configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentOptions:
    """
    Defaults used by a document when the stylesheet says nothing.

    Attributes:
        default_font: Base-14 or registered ReportLab font for unstyled text.
        default_font_size: Font size in points for unstyled text.
        line_height: Line height as a multiple of the font size.
        default_margin: Margin literal used for unspecified page margins.
        default_papersize: Paper size used when no ``@page`` rule exists.
    """

    default_font: str = "Helvetica"
    default_font_size: float = 12.0
    line_height: float = 1.2
    default_margin: str = "1cm"
    default_papersize: str = "A4"

    @classmethod
    def from_dict(cls, values: Optional[Mapping[str, Any]]) -> "DocumentOptions":
        """Build options from a plain mapping, ignoring unknown keys."""
        if not values:
            return cls()
        known = {f.name for f in fields(cls)}
        accepted: Dict[str, Any] = {}
        for key, value in values.items():
            if key in known:
                accepted[key] = value
            else:
                logger.warning("Ignoring unknown document option %r", key)
        return cls(**accepted)
