"""
HTML fragment reader - turns an HTML chunk into styled text blocks.

Handles:
- block elements (p, div, h1-h6, li, ...) as separate blocks
- inline formatting through the stylesheet (b, i, code, span with classes)
- inline ``style`` attributes
- ``<br>`` as a forced line break
"""

from __future__ import annotations

import logging
import re
from html.parser import HTMLParser
from typing import List, Optional, Tuple

from .config import DocumentOptions
from .exceptions import StyleError
from .fonts import select_font, split_font_family
from .models import BlockSettings, StyledTextBlock, TextRun
from .styles import (
    Declarations,
    ElementInfo,
    StyleStack,
    Stylesheet,
    is_bold,
    is_italic,
    parse_declarations,
    resolve_font_size,
    resolve_length,
    resolve_line_height,
)

logger = logging.getLogger(__name__)

BLOCK_TAGS = frozenset(
    {
        "address", "article", "blockquote", "body", "div", "footer", "h1", "h2", "h3",
        "h4", "h5", "h6", "header", "html", "li", "ol", "p", "pre", "section", "ul",
    }
)
VOID_TAGS = frozenset({"area", "br", "col", "hr", "img", "input", "link", "meta", "wbr"})
IGNORED_TAGS = frozenset({"head", "script", "style", "title"})

_SPACES_RE = re.compile(r"\s+")


class HTMLFragmentReader(HTMLParser):
    """Reads HTML chunks into :class:`StyledTextBlock` objects."""

    def __init__(self, stylesheet: Stylesheet, options: Optional[DocumentOptions] = None):
        super().__init__(convert_charrefs=True)
        self.stylesheet = stylesheet
        self.options = options or DocumentOptions()
        self._begin()

    def _begin(self) -> None:
        root = {
            "font-family": self.options.default_font,
            "font-size": f"{self.options.default_font_size}pt",
            "line-height": str(self.options.line_height),
        }
        self._styles = StyleStack(root)
        self._open: List[Tuple[str, ElementInfo, bool]] = []
        self._block_styles: List[Declarations] = []
        self._runs: List[TextRun] = []
        self._blocks: List[StyledTextBlock] = []
        self._ignore_depth = 0

    def read(self, html: str) -> List[StyledTextBlock]:
        """Parse ``html`` and return its blocks in document order.

        Raises:
            StyleError: On unbalanced closing tags or malformed inline styles.
        """
        self.reset()
        self._begin()
        self.feed(html)
        self.close()
        while self._open:
            self._close_top()
        self._flush_block()
        logger.debug("Read %d block(s) from HTML fragment", len(self._blocks))
        return self._blocks

    # ------------------------------------------------------------------
    def handle_starttag(self, tag: str, attrs: list) -> None:
        if tag in IGNORED_TAGS:
            self._ignore_depth += 1
            return
        if self._ignore_depth:
            return
        if tag == "br":
            self._runs.append(self._make_run("\n", self._styles.current))
            return
        if tag in VOID_TAGS:
            return

        attributes = {name.lower(): value or "" for name, value in attrs}
        info = ElementInfo(
            tag=tag,
            classes=tuple(attributes.get("class", "").split()),
            element_id=attributes.get("id") or None,
        )
        ancestors = [element for _, element, _ in self._open]
        declarations = self.stylesheet.declarations_for(info, ancestors)
        if attributes.get("style"):
            declarations.update(parse_declarations(attributes["style"]))

        parent_size = self._font_size(self._styles.current)
        if "font-size" in declarations:
            declarations["font-size"] = f"{resolve_font_size(declarations['font-size'], parent_size)}pt"

        is_block = tag in BLOCK_TAGS
        if is_block:
            self._flush_block()
        computed = self._styles.push(declarations)
        self._open.append((tag, info, is_block))
        if is_block:
            self._block_styles.append(computed)

    def handle_startendtag(self, tag: str, attrs: list) -> None:
        self.handle_starttag(tag, attrs)
        if tag not in VOID_TAGS and tag not in IGNORED_TAGS and not self._ignore_depth:
            self.handle_endtag(tag)
        elif tag in IGNORED_TAGS:
            self._ignore_depth -= 1

    def handle_endtag(self, tag: str) -> None:
        if tag in IGNORED_TAGS:
            self._ignore_depth = max(self._ignore_depth - 1, 0)
            return
        if self._ignore_depth or tag in VOID_TAGS:
            return
        if not any(open_tag == tag for open_tag, _, _ in self._open):
            raise StyleError("Unexpected closing tag", f"</{tag}>")
        # Elements left open inside ``tag`` are closed implicitly
        while self._open:
            open_tag = self._open[-1][0]
            self._close_top()
            if open_tag == tag:
                break

    def handle_data(self, data: str) -> None:
        if self._ignore_depth:
            return
        style = self._styles.current
        if style.get("white-space", "normal").strip().lower() not in ("pre", "pre-wrap"):
            data = _SPACES_RE.sub(" ", data)
            if not self._runs and not data.strip():
                return
        if data:
            self._runs.append(self._make_run(data, style))

    # ------------------------------------------------------------------
    def _close_top(self) -> None:
        # Flush while the element is still open so the block keeps its own tag
        if self._open[-1][2]:
            self._flush_block()
            self._block_styles.pop()
        self._open.pop()
        self._styles.pop()

    def _flush_block(self) -> None:
        runs = self._runs
        self._runs = []
        if not any(run.text.strip() for run in runs):
            return

        runs[0].text = runs[0].text.lstrip(" ")
        runs[-1].text = runs[-1].text.rstrip(" ")
        style = self._block_styles[-1] if self._block_styles else self._styles.current
        font_size = self._font_size(style)
        tag = self._current_block_tag()
        self._blocks.append(
            StyledTextBlock(
                runs=[run for run in runs if run.text],
                settings=self._block_settings(style, font_size),
                line_height=resolve_line_height(
                    style.get("line-height", "normal"), font_size, self.options.line_height
                ),
                tag=tag,
            )
        )

    def _current_block_tag(self) -> str:
        for tag, _, is_block in reversed(self._open):
            if is_block:
                return tag
        return "p"

    def _block_settings(self, style: Declarations, font_size: float) -> BlockSettings:
        settings = BlockSettings()
        if "margin-top" in style:
            settings.margin_top = resolve_length(style["margin-top"], font_size)
        if "margin-bottom" in style:
            settings.margin_bottom = resolve_length(style["margin-bottom"], font_size)
        if "text-indent" in style:
            settings.indent_left = resolve_length(style["text-indent"], font_size)
        return settings

    def _make_run(self, text: str, style: Declarations) -> TextRun:
        bold = is_bold(style)
        italic = is_italic(style)
        families = split_font_family(style.get("font-family", self.options.default_font))
        return TextRun(
            text=text,
            font_name=select_font(families, bold, italic, self.options.default_font),
            font_size=self._font_size(style),
            bold=bold,
            italic=italic,
        )

    def _font_size(self, style: Declarations) -> float:
        value = style.get("font-size")
        if value is None:
            return self.options.default_font_size
        return resolve_font_size(value, self.options.default_font_size)
