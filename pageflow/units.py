"""Length values and length literal parsing.

All geometry is expressed in scaled points (``sp``): 65536 sp make one
PostScript point (1/72 in). Arithmetic on lengths is plain ``int``
arithmetic, so comparisons and sums are exact.
"""

from __future__ import annotations

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict

from .exceptions import ParseError

logger = logging.getLogger(__name__)

Length = int

SP_PER_POINT = 65536
POINTS_PER_INCH = 72

_CM = Decimal(POINTS_PER_INCH) / Decimal("2.54")

# Points per unit
UNIT_FACTORS: Dict[str, Decimal] = {
    "pt": Decimal(1),
    "bp": Decimal(1),
    "in": Decimal(POINTS_PER_INCH),
    "cm": _CM,
    "mm": _CM / Decimal(10),
    "pc": Decimal(12),
    "px": Decimal("0.75"),
}

_LENGTH_RE = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))\s*([a-zA-Z]*)\s*$")


def parse_length(literal: str) -> Length:
    """Convert a length literal such as ``"1cm"`` or ``"210mm"`` to scaled points.

    Args:
        literal: Number followed by a unit (pt, bp, in, cm, mm, pc, px, sp).
            A bare ``0`` is accepted without a unit.

    Returns:
        Length in scaled points, rounded half away from zero.

    Raises:
        ParseError: If the literal is empty, malformed or uses an unknown unit.
    """
    if not isinstance(literal, str):
        raise ParseError("Length literal must be a string", repr(literal))

    match = _LENGTH_RE.match(literal)
    if match is None:
        raise ParseError("Malformed length literal", repr(literal))

    number_text, unit = match.groups()
    unit = unit.lower()
    try:
        number = Decimal(number_text)
    except InvalidOperation as exc:
        raise ParseError("Malformed length literal", repr(literal)) from exc

    if unit == "sp":
        value = number
    elif unit in UNIT_FACTORS:
        value = number * UNIT_FACTORS[unit] * SP_PER_POINT
    elif unit == "" and number == 0:
        return 0
    elif unit == "":
        raise ParseError("Length literal is missing a unit", repr(literal))
    else:
        raise ParseError("Unknown length unit", f"{unit!r} in {literal!r}")

    result = int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    logger.debug("Parsed length %r -> %d sp", literal, result)
    return result


def to_points(value: Length) -> float:
    """Convert scaled points to PostScript points."""
    return value / SP_PER_POINT


def from_points(value: float) -> Length:
    """Convert PostScript points to scaled points."""
    return int(round(value * SP_PER_POINT))


def format_length(value: Length) -> str:
    """Human readable representation in points, e.g. ``595.28pt``."""
    return f"{to_points(value):.2f}pt"
