from __future__ import annotations

from typing import List, Optional

from reportlab.pdfbase import pdfmetrics

STANDARD_FONT_VARIANTS = {
    "Helvetica",
    "Helvetica-Bold",
    "Helvetica-Oblique",
    "Helvetica-BoldOblique",
    "Times-Roman",
    "Times-Bold",
    "Times-Italic",
    "Times-BoldItalic",
    "Courier",
    "Courier-Bold",
    "Courier-Oblique",
    "Courier-BoldOblique",
}

FONT_FALLBACKS = {
    "arial": "Helvetica",
    "helvetica": "Helvetica",
    "sans-serif": "Helvetica",
    "verdana": "Helvetica",
    "times": "Times-Roman",
    "times new roman": "Times-Roman",
    "times-roman": "Times-Roman",
    "georgia": "Times-Roman",
    "serif": "Times-Roman",
    "courier": "Courier",
    "courier new": "Courier",
    "consolas": "Courier",
    "monospace": "Courier",
}

_VARIANTS = {
    "Helvetica": ("Helvetica", "Helvetica-Bold", "Helvetica-Oblique", "Helvetica-BoldOblique"),
    "Times-Roman": ("Times-Roman", "Times-Bold", "Times-Italic", "Times-BoldItalic"),
    "Courier": ("Courier", "Courier-Bold", "Courier-Oblique", "Courier-BoldOblique"),
}


def split_font_family(value: str) -> List[str]:
    """Split a CSS ``font-family`` list into unquoted family names."""
    return [part.strip().strip("'\"") for part in value.split(",") if part.strip()]


def _normalize_base_font(font_name: Optional[str]) -> str:
    if not font_name:
        return "Helvetica"

    cleaned = font_name.strip()
    if not cleaned:
        return "Helvetica"

    if cleaned in STANDARD_FONT_VARIANTS:
        return cleaned

    return FONT_FALLBACKS.get(cleaned.lower(), cleaned)


def resolve_font_variant(font_name: Optional[str], bold: bool, italic: bool) -> str:
    """Map a family name plus weight/style flags to a concrete ReportLab font name.

    Families outside the base-14 fonts are returned with ``-Bold``/``-Italic``
    suffixes, which is how TrueType variants are usually registered.
    """
    base = _normalize_base_font(font_name)
    if base in STANDARD_FONT_VARIANTS and base not in _VARIANTS:
        # Name already encodes weight/style, e.g. Helvetica-Bold
        return base

    if base in _VARIANTS:
        regular, bold_name, italic_name, bold_italic = _VARIANTS[base]
        if bold and italic:
            return bold_italic
        if bold:
            return bold_name
        if italic:
            return italic_name
        return regular

    if bold and italic:
        return f"{base}-BoldItalic"
    if bold:
        return f"{base}-Bold"
    if italic:
        return f"{base}-Italic"
    return base


def is_font_available(font_name: str) -> bool:
    """True for base-14 fonts and fonts registered with ReportLab."""
    return font_name in pdfmetrics.standardFonts or font_name in pdfmetrics.getRegisteredFontNames()


def select_font(families: List[str], bold: bool, italic: bool, default: str) -> str:
    """Pick the first family of a CSS ``font-family`` list ReportLab can draw.

    A registered family without the requested variant falls back to its
    regular face. ``default`` is used when no family matches.
    """
    for family in families:
        variant = resolve_font_variant(family, bold, italic)
        if is_font_available(variant):
            return variant
        regular = resolve_font_variant(family, False, False)
        if is_font_available(regular):
            return regular
    return resolve_font_variant(default, bold, italic)
