"""
Font Style Codec
================

Translates between user typed style and variant strings and canonical codes.

A style is one weight from a fixed ordered scale plus an independent italic
flag. Both "semi-bold italic" and "600 Italic" parse to the same code, and
``format_style`` produces the canonical lower-case spelling that is also used
as the catalog style key.
"""

import re
from dataclasses import dataclass
from enum import Enum, IntEnum

from fontview.core.exceptions import InvalidStyleError


class Weight(IntEnum):
    """Font weights, valued by their CSS numeric weight."""

    THIN = 100
    EXTRA_LIGHT = 200
    LIGHT = 300
    REGULAR = 400
    MEDIUM = 500
    SEMI_BOLD = 600
    BOLD = 700
    EXTRA_BOLD = 800
    BLACK = 900

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")


WEIGHT_ALIASES: dict[str, Weight] = {
    "thin": Weight.THIN,
    "100": Weight.THIN,
    "extra-light": Weight.EXTRA_LIGHT,
    "extralight": Weight.EXTRA_LIGHT,
    "200": Weight.EXTRA_LIGHT,
    "light": Weight.LIGHT,
    "300": Weight.LIGHT,
    "regular": Weight.REGULAR,
    "": Weight.REGULAR,
    "400": Weight.REGULAR,
    "0": Weight.REGULAR,
    "medium": Weight.MEDIUM,
    "500": Weight.MEDIUM,
    "semi-bold": Weight.SEMI_BOLD,
    "semibold": Weight.SEMI_BOLD,
    "600": Weight.SEMI_BOLD,
    "bold": Weight.BOLD,
    "700": Weight.BOLD,
    "extra-bold": Weight.EXTRA_BOLD,
    "extrabold": Weight.EXTRA_BOLD,
    "800": Weight.EXTRA_BOLD,
    "black": Weight.BLACK,
    "900": Weight.BLACK,
}

# "italic" as a standalone word, also when joined by '-' or '_' ("bold-italic")
_ITALIC_RE = re.compile(r"(?:^|[\s_-]+)italic(?:$|[\s_-]+)", re.IGNORECASE)
_SPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class StyleCode:
    """Canonical font style: one weight plus an italic flag."""

    weight: Weight = Weight.REGULAR
    italic: bool = False

    @property
    def css_weight(self) -> int:
        return int(self.weight)

    def __str__(self) -> str:
        return format_style(self)


REGULAR = StyleCode()


class Variant(Enum):
    """Typographic variant selection."""

    NORMAL = "normal"
    SUBSCRIPT = "subscript"
    SUPERSCRIPT = "superscript"
    SMALL_CAPS = "small-caps"

    def __str__(self) -> str:
        return self.value


_VARIANT_ALIASES = {
    "normal": Variant.NORMAL,
    "subscript": Variant.SUBSCRIPT,
    "superscript": Variant.SUPERSCRIPT,
    "small-caps": Variant.SMALL_CAPS,
    "smallcaps": Variant.SMALL_CAPS,
}


def parse_style(value: str) -> StyleCode:
    """
    Parse a human style string into a StyleCode.

    Args:
        value: Style string such as "Bold Italic", "700" or "semi-bold"

    Returns:
        Parsed StyleCode

    Raises:
        InvalidStyleError: If the weight part is not recognized
    """
    text = value.strip().lower()
    italic = False
    if _ITALIC_RE.search(text):
        italic = True
        text = _ITALIC_RE.sub(" ", text)
    text = _SPACE_RE.sub(" ", text).strip()

    weight = WEIGHT_ALIASES.get(text)
    if weight is None:
        raise InvalidStyleError("style", value)
    return StyleCode(weight=weight, italic=italic)


def format_style(style: StyleCode) -> str:
    """Format a StyleCode as its canonical lower-case name."""
    label = style.weight.label
    if style.italic:
        label += " italic"
    return label


def parse_variant(value: str) -> Variant:
    """
    Parse a variant name.

    Raises:
        InvalidStyleError: If the name is not one of the known variants
    """
    variant = _VARIANT_ALIASES.get(value.strip().lower())
    if variant is None:
        raise InvalidStyleError("variant", value)
    return variant


def format_variant(variant: Variant) -> str:
    return variant.value


def style_from_subfamily(subfamily: str, weight_class: int | None = None) -> StyleCode:
    """
    Derive a StyleCode from a font's subfamily name and OS/2 weight class.

    Unlike ``parse_style`` this never fails: font name tables use many
    spellings ("Book", "Oblique", "Heavy") that are not valid user input.
    """
    lowered = subfamily.lower()
    italic = "italic" in lowered or "oblique" in lowered

    if weight_class:
        weight = nearest_weight(weight_class)
    else:
        compact = re.sub(r"[\s_-]+", "", lowered)
        weight = Weight.REGULAR
        # longest keywords first so "extrabold" wins over "bold"
        for keyword, value in _SUBFAMILY_WEIGHTS:
            if keyword in compact:
                weight = value
                break
    return StyleCode(weight=weight, italic=italic)


_SUBFAMILY_WEIGHTS = [
    ("extralight", Weight.EXTRA_LIGHT),
    ("ultralight", Weight.EXTRA_LIGHT),
    ("extrabold", Weight.EXTRA_BOLD),
    ("ultrabold", Weight.EXTRA_BOLD),
    ("semibold", Weight.SEMI_BOLD),
    ("demibold", Weight.SEMI_BOLD),
    ("hairline", Weight.THIN),
    ("medium", Weight.MEDIUM),
    ("black", Weight.BLACK),
    ("heavy", Weight.BLACK),
    ("light", Weight.LIGHT),
    ("thin", Weight.THIN),
    ("bold", Weight.BOLD),
]


def nearest_weight(value: int) -> Weight:
    """Snap an arbitrary numeric weight onto the weight scale."""
    # ties go to the heavier weight
    return min(Weight, key=lambda w: (abs(int(w) - value), -int(w)))


def nearest_style_key(wanted: StyleCode, available: dict[str, StyleCode]) -> str | None:
    """
    Pick the available style key closest to the wanted style.

    Preference order: exact match, same italic flag with the nearest weight,
    then the nearest weight regardless of italic. Weight ties prefer the
    heavier face.

    Args:
        wanted: Requested style
        available: Style key to StyleCode for the faces of one family

    Returns:
        The chosen style key, or None when ``available`` is empty
    """
    if not available:
        return None

    wanted_key = format_style(wanted)
    if wanted_key in available:
        return wanted_key

    def distance(item: tuple[str, StyleCode]) -> tuple[int, int, int, str]:
        key, code = item
        return (
            int(code.italic != wanted.italic),
            abs(code.css_weight - wanted.css_weight),
            -code.css_weight,
            key,
        )

    return min(available.items(), key=distance)[0]
