"""Paper size lookup for the ``size`` property of ``@page`` rules."""

from __future__ import annotations

import logging
import re
from typing import Dict, Tuple

logger = logging.getLogger(__name__)

DEFAULT_PAPERSIZE = "A4"

# (width, height) in portrait orientation
PAPER_SIZES: Dict[str, Tuple[str, str]] = {
    "a0": ("841mm", "1189mm"),
    "a1": ("594mm", "841mm"),
    "a2": ("420mm", "594mm"),
    "a3": ("297mm", "420mm"),
    "a4": ("210mm", "297mm"),
    "a5": ("148mm", "210mm"),
    "a6": ("105mm", "148mm"),
    "b4": ("250mm", "353mm"),
    "b5": ("176mm", "250mm"),
    "letter": ("8.5in", "11in"),
    "legal": ("8.5in", "14in"),
    "ledger": ("11in", "17in"),
}

_ORIENTATIONS = ("portrait", "landscape")

# Token starting like a number (``15cm``, ``.5in``, ``+20cm``) is a length, never a paper name
_LENGTH_START_RE = re.compile(r"^[+-]?\.?\d")


def papersize_literals(spec: str) -> Tuple[str, str]:
    """Resolve a paper size description to a (width, height) literal pair.

    ``spec`` is the value of a ``size`` declaration: a paper name
    (``A4``, ``letter``), optionally followed by ``portrait`` or
    ``landscape``, or one or two explicit lengths (``"20cm 10cm"``).
    The literals are returned unparsed; converting them is left to the
    caller so a malformed length surfaces as a parse error there.

    Unknown paper names resolve to A4.
    """
    tokens = (spec or "").split()
    landscape = False
    names = []
    for token in tokens:
        lowered = token.lower()
        if lowered in _ORIENTATIONS:
            landscape = lowered == "landscape"
        else:
            names.append(token)

    if not names:
        width, height = PAPER_SIZES[DEFAULT_PAPERSIZE.lower()]
    elif len(names) == 1 and names[0].lower() in PAPER_SIZES:
        width, height = PAPER_SIZES[names[0].lower()]
    elif len(names) == 1 and _LENGTH_START_RE.match(names[0]):
        width = height = names[0]
    elif len(names) == 2:
        width, height = names
    else:
        logger.warning("Unknown paper size %r, using %s", spec, DEFAULT_PAPERSIZE)
        width, height = PAPER_SIZES[DEFAULT_PAPERSIZE.lower()]

    if landscape:
        width, height = height, width
    return width, height
