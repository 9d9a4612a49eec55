"""
Minimal CSS support for styled text blocks.

Handles:
- cumulative stylesheets (``add_css_text`` may be called many times)
- ``@page`` rules feeding the default page record
- tag, class, id and descendant selectors with specificity ordering
- a push/pop stack for inherited properties
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .exceptions import ParseError, StyleError
from .models import PageStyle
from .units import Length, SP_PER_POINT, parse_length, to_points

logger = logging.getLogger(__name__)

Declarations = Dict[str, str]

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.S)
_IMPORTANT_RE = re.compile(r"\s*!\s*important\s*$", re.I)
_COMPOUND_RE = re.compile(r"^(?P<tag>[a-zA-Z][a-zA-Z0-9]*|\*)?(?P<rest>(?:[.#][-_a-zA-Z0-9]+)*)$")
_EM_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))\s*(em|%)\s*$", re.I)
_AT_RULE_RE = re.compile(r"^(@[-a-zA-Z]*)\s*(.*)$", re.S)

INHERITED_PROPERTIES = frozenset(
    {"font-family", "font-size", "font-weight", "font-style", "line-height", "white-space"}
)

BOX_SHORTHANDS = ("margin", "padding")

FONT_SIZE_KEYWORDS = {
    "xx-small": 7.0,
    "x-small": 7.5,
    "small": 10.0,
    "medium": 12.0,
    "large": 14.0,
    "x-large": 18.0,
    "xx-large": 24.0,
}

DEFAULT_CSS = """
h1 { font-size: 2em; font-weight: bold; margin-top: 0.67em; margin-bottom: 0.67em; }
h2 { font-size: 1.5em; font-weight: bold; margin-top: 0.83em; margin-bottom: 0.83em; }
h3 { font-size: 1.17em; font-weight: bold; margin-top: 1em; margin-bottom: 1em; }
h4 { font-weight: bold; margin-top: 1.33em; margin-bottom: 1.33em; }
h5 { font-size: 0.83em; font-weight: bold; margin-top: 1.67em; margin-bottom: 1.67em; }
h6 { font-size: 0.67em; font-weight: bold; margin-top: 2.33em; margin-bottom: 2.33em; }
p, blockquote, pre, ul, ol { margin-top: 1em; margin-bottom: 1em; }
b, strong { font-weight: bold; }
i, em, cite, var { font-style: italic; }
code, kbd, pre, samp, tt { font-family: monospace; }
pre { white-space: pre; }
"""


@dataclass(frozen=True, slots=True)
class ElementInfo:
    """What selectors can see of an element."""

    tag: str
    classes: Tuple[str, ...] = ()
    element_id: Optional[str] = None


@dataclass(slots=True)
class CSSRule:
    selector: str
    specificity: Tuple[int, int, int]
    declarations: Declarations
    order: int
    parts: List[Tuple[Optional[str], Tuple[str, ...], Optional[str]]] = field(default_factory=list)


###############################################################################
# Parsing
###############################################################################


def expand_box_shorthand(name: str, value: str) -> Declarations:
    """Expand ``margin: 1cm 2cm`` into the four longhand properties."""
    values = value.split()
    if not 1 <= len(values) <= 4:
        raise StyleError(f"Invalid {name} shorthand", value)
    top = values[0]
    right = values[1] if len(values) > 1 else top
    bottom = values[2] if len(values) > 2 else top
    left = values[3] if len(values) > 3 else right
    return {
        f"{name}-top": top,
        f"{name}-right": right,
        f"{name}-bottom": bottom,
        f"{name}-left": left,
    }


def parse_declarations(text: str) -> Declarations:
    """Parse ``name: value; ...`` into an ordered mapping.

    Raises:
        StyleError: If a declaration has no colon, name or value.
    """
    result: Declarations = {}
    for item in text.split(";"):
        item = item.strip()
        if not item:
            continue
        if ":" not in item:
            raise StyleError("Malformed declaration", item)
        name, value = item.split(":", 1)
        name = name.strip().lower()
        value = _IMPORTANT_RE.sub("", value.strip())
        if not name or not value:
            raise StyleError("Malformed declaration", item)
        if name in BOX_SHORTHANDS:
            result.update(expand_box_shorthand(name, value))
        else:
            result[name] = value
    return result


def split_rules(css: str) -> List[Tuple[str, str]]:
    """Split stylesheet text into (prelude, body) pairs.

    Raises:
        StyleError: On unbalanced braces or text outside of any rule.
    """
    text = _COMMENT_RE.sub("", css)
    rules: List[Tuple[str, str]] = []
    pos = 0
    while True:
        start = text.find("{", pos)
        if start == -1:
            rest = text[pos:].strip()
            if rest:
                raise StyleError("Unexpected text outside of a rule", rest[:40])
            return rules

        prelude = text[pos:start]
        if "}" in prelude:
            raise StyleError("Unbalanced braces", prelude.strip()[:40])
        # Skip statement at-rules such as @charset or @import
        *statements, prelude = prelude.split(";")
        for statement in statements:
            statement = statement.strip()
            if statement and not statement.startswith("@"):
                raise StyleError("Unexpected text outside of a rule", statement[:40])
        prelude = prelude.strip()
        if not prelude:
            raise StyleError("Rule without selector")

        depth = 1
        index = start + 1
        while index < len(text) and depth:
            if text[index] == "{":
                depth += 1
            elif text[index] == "}":
                depth -= 1
            index += 1
        if depth:
            raise StyleError("Unbalanced braces", prelude[:40])

        rules.append((prelude, text[start + 1:index - 1]))
        pos = index


def _parse_selector(selector: str) -> Optional[List[Tuple[Optional[str], Tuple[str, ...], Optional[str]]]]:
    parts = []
    for compound in selector.split():
        match = _COMPOUND_RE.match(compound)
        if match is None:
            return None
        tag = match.group("tag")
        classes = tuple(re.findall(r"\.([-_a-zA-Z0-9]+)", match.group("rest")))
        ids = re.findall(r"#([-_a-zA-Z0-9]+)", match.group("rest"))
        if len(ids) > 1:
            return None
        parts.append((None if tag in (None, "*") else tag.lower(), classes, ids[0] if ids else None))
    return parts or None


def _specificity(parts) -> Tuple[int, int, int]:
    ids = sum(1 for _, _, element_id in parts if element_id)
    classes = sum(len(classes) for _, classes, _ in parts)
    tags = sum(1 for tag, _, _ in parts if tag)
    return ids, classes, tags


def _matches_compound(part, element: ElementInfo) -> bool:
    tag, classes, element_id = part
    if tag is not None and tag != element.tag:
        return False
    if element_id is not None and element_id != element.element_id:
        return False
    return all(name in element.classes for name in classes)


###############################################################################
# Stylesheet
###############################################################################


class Stylesheet:
    """Cumulative collection of CSS rules and ``@page`` declarations."""

    def __init__(self) -> None:
        self.rules: List[CSSRule] = []
        self.pages: Dict[str, Declarations] = {}
        self._order = 0

    def add_css_text(self, css: str) -> None:
        """Add the rules of ``css`` to the stylesheet.

        Nothing is added when the text is malformed.

        Raises:
            StyleError: If the text cannot be parsed.
        """
        new_rules: List[CSSRule] = []
        new_pages: List[Tuple[str, Declarations]] = []
        order = self._order
        for prelude, body in split_rules(css):
            if prelude.startswith("@"):
                at_keyword, rest = _AT_RULE_RE.match(prelude).groups()
                if at_keyword.lower() == "@page":
                    new_pages.append((rest.strip(), parse_declarations(body)))
                else:
                    logger.debug("Skipping unsupported at-rule %s", at_keyword)
                continue

            if "{" in body:
                raise StyleError("Nested block inside rule", prelude[:40])
            declarations = parse_declarations(body)
            for selector in prelude.split(","):
                selector = selector.strip()
                parts = _parse_selector(selector)
                if parts is None:
                    logger.warning("Ignoring unsupported selector %r", selector)
                    continue
                new_rules.append(CSSRule(selector, _specificity(parts), declarations, order, parts))
                order += 1

        self.rules.extend(new_rules)
        for key, declarations in new_pages:
            self.pages.setdefault(key, {}).update(declarations)
        self._order = order
        logger.debug("Stylesheet now holds %d rule(s)", len(self.rules))

    def default_page(self) -> Optional[PageStyle]:
        """Default page record from ``@page`` without a pseudo-class, if any."""
        declarations = self.pages.get("")
        if declarations is None:
            return None
        return PageStyle(
            papersize=declarations.get("size", ""),
            margin_top=declarations.get("margin-top", ""),
            margin_bottom=declarations.get("margin-bottom", ""),
            margin_left=declarations.get("margin-left", ""),
            margin_right=declarations.get("margin-right", ""),
        )

    def declarations_for(self, element: ElementInfo, ancestors: Sequence[ElementInfo] = ()) -> Declarations:
        """Cascade all matching rules for ``element`` (lowest specificity first)."""
        matched = [rule for rule in self.rules if self._matches(rule, element, ancestors)]
        matched.sort(key=lambda rule: (rule.specificity, rule.order))
        result: Declarations = {}
        for rule in matched:
            result.update(rule.declarations)
        return result

    def _matches(self, rule: CSSRule, element: ElementInfo, ancestors: Sequence[ElementInfo]) -> bool:
        *context, last = rule.parts
        if not _matches_compound(last, element):
            return False
        remaining = list(ancestors)
        for part in reversed(context):
            while remaining and not _matches_compound(part, remaining[-1]):
                remaining.pop()
            if not remaining:
                return False
            remaining.pop()
        return True


###############################################################################
# Style stack and value helpers
###############################################################################


class StyleStack:
    """Push/pop stack of computed styles; inherited properties flow downwards."""

    def __init__(self, root: Declarations):
        self._stack: List[Declarations] = [dict(root)]

    @property
    def current(self) -> Declarations:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack) - 1

    def push(self, declarations: Declarations) -> Declarations:
        computed = {key: value for key, value in self.current.items() if key in INHERITED_PROPERTIES}
        computed.update(declarations)
        self._stack.append(computed)
        return computed

    def pop(self) -> Declarations:
        if len(self._stack) == 1:
            raise StyleError("Style stack underflow")
        return self._stack.pop()


def resolve_font_size(value: str, parent_size: float) -> float:
    """Resolve a ``font-size`` value to points."""
    lowered = value.strip().lower()
    if lowered in FONT_SIZE_KEYWORDS:
        return FONT_SIZE_KEYWORDS[lowered]
    if lowered == "smaller":
        return parent_size / 1.2
    if lowered == "larger":
        return parent_size * 1.2
    match = _EM_RE.match(lowered)
    if match:
        number, unit = float(match.group(1)), match.group(2)
        return parent_size * number / (100.0 if unit == "%" else 1.0)
    try:
        return to_points(parse_length(lowered))
    except ParseError as exc:
        raise StyleError("Invalid font-size", value) from exc


def resolve_length(value: str, font_size: float) -> Optional[Length]:
    """Resolve a block length (margin, indent); ``em`` is relative to ``font_size``.

    Returns ``None`` for ``auto``.
    """
    lowered = value.strip().lower()
    if lowered == "auto":
        return None
    match = _EM_RE.match(lowered)
    if match and match.group(2) == "em":
        return int(round(float(match.group(1)) * font_size * SP_PER_POINT))
    try:
        return parse_length(lowered)
    except ParseError as exc:
        raise StyleError("Invalid length", value) from exc


def resolve_line_height(value: str, font_size: float, default: float) -> float:
    """Resolve ``line-height`` to a multiple of the font size."""
    lowered = value.strip().lower()
    if lowered == "normal":
        return default
    match = _EM_RE.match(lowered)
    if match:
        number = float(match.group(1))
        return number / 100.0 if match.group(2) == "%" else number
    try:
        return float(lowered)
    except ValueError:
        pass
    try:
        return to_points(parse_length(lowered)) / font_size
    except ParseError as exc:
        raise StyleError("Invalid line-height", value) from exc


def is_bold(style: Declarations) -> bool:
    weight = style.get("font-weight", "normal").strip().lower()
    if weight in ("bold", "bolder"):
        return True
    return weight.isdigit() and int(weight) >= 600


def is_italic(style: Declarations) -> bool:
    return style.get("font-style", "normal").strip().lower() in ("italic", "oblique")
