"""
Font Utilities
==============

Utility functions for font file detection and name table extraction.
"""

import logging
import re
import struct
from pathlib import Path

from fontTools.ttLib import TTCollection, TTFont, TTLibError

from fontview.core.exceptions import FontFileError

logger = logging.getLogger(__name__)

FONT_EXTENSIONS = frozenset({".ttf", ".ttc", ".otf", ".woff", ".woff2", ".sfnt"})

_SPACE_RE = re.compile(r"\s+")

# name table IDs
NAME_FAMILY = 1
NAME_SUBFAMILY = 2
NAME_FULL = 4
NAME_TYPO_FAMILY = 16
NAME_TYPO_SUBFAMILY = 17
NAME_SAMPLE_TEXT = 19


def is_font_file(path: str | Path) -> bool:
    """Check whether a path has a recognized font file extension."""
    return Path(path).suffix.lower() in FONT_EXTENSIONS


def title_case(name: str) -> str:
    """
    Derive a display family name from a file name stem.

    Inserts spaces at lower-to-upper transitions and before the last capital
    of a capital run followed by a lowercase letter, turns non-letters into
    spaces and collapses whitespace.

    Examples:
        >>> title_case("DejaVuSans-Bold")
        'Deja Vu Sans Bold'
        >>> title_case("ABCFont_v2")
        'ABC Font v'
    """
    out: list[str] = []
    prev = ""
    for i, char in enumerate(name):
        if prev.islower() and char.isupper():
            out.append(" ")
        elif not char.isalpha():
            char = " "
        following = name[i + 1] if i + 1 < len(name) else ""
        if prev.isupper() and char.isupper() and following.islower():
            out.append(" ")
        out.append(char)
        prev = char
    return _SPACE_RE.sub(" ", "".join(out).strip())


def family_from_path(path: str | Path) -> str:
    """Provisional family name for a font known only by its path."""
    return title_case(Path(path).stem)


def open_font(path: str | Path, font_number: int = 0) -> TTFont:
    """
    Open a font file with fontTools, handling collections.

    Raises:
        FontFileError: If the file is unreadable or not a valid font
    """
    path = Path(path)
    try:
        if path.suffix.lower() == ".ttc":
            collection = TTCollection(str(path), lazy=True)
            return collection.fonts[font_number]
        return TTFont(str(path), lazy=True, fontNumber=font_number)
    except (OSError, TTLibError, IndexError, AssertionError, struct.error) as e:
        raise FontFileError(str(path), str(e)) from e


def get_font_name(name_table, *name_ids: int) -> str | None:
    """
    Extract the first available name among ``name_ids``.

    English (Windows 0x409 or Mac 0) records are preferred.
    """
    for name_id in name_ids:
        fallback = None
        for record in name_table.names:
            if record.nameID != name_id:
                continue
            try:
                value = record.toUnicode().strip()
            except UnicodeDecodeError:
                continue
            if not value:
                continue
            if record.langID in (0x409, 0):
                return value
            fallback = fallback or value
        if fallback:
            return fallback
    return None


def get_font_info(font: TTFont, with_cmap: bool = False) -> dict:
    """
    Read identification metadata from an open font.

    Args:
        font: Open fontTools font
        with_cmap: Also collect the set of mapped code points

    Returns:
        Dictionary with family, subfamily, full name, sample text, the
        OS/2 weight class (None when the font has no OS/2 table) and, if
        requested, the mapped code points
    """
    family = None
    subfamily = None
    full_name = None
    sample = None
    if "name" in font:
        name_table = font["name"]
        family = get_font_name(name_table, NAME_TYPO_FAMILY, NAME_FAMILY)
        subfamily = get_font_name(name_table, NAME_TYPO_SUBFAMILY, NAME_SUBFAMILY)
        full_name = get_font_name(name_table, NAME_FULL)
        sample = get_font_name(name_table, NAME_SAMPLE_TEXT)

    weight_class = None
    if "OS/2" in font:
        weight_class = getattr(font["OS/2"], "usWeightClass", None) or None

    codepoints = None
    if with_cmap:
        codepoints = frozenset(font.getBestCmap() or {})

    return {
        "family": family,
        "subfamily": subfamily or "Regular",
        "name": full_name,
        "sample_text": sample,
        "weight_class": weight_class,
        "codepoints": codepoints,
    }


def read_font_info(path: str | Path, with_cmap: bool = False) -> dict:
    """
    Open a font file, read its metadata and release the handle.

    Raises:
        FontFileError: If the file is unreadable or its tables are invalid
    """
    with open_font(path) as font:
        try:
            return get_font_info(font, with_cmap=with_cmap)
        except (KeyError, TTLibError, AssertionError, ValueError, struct.error) as e:
            logger.debug(f"Invalid font tables in {path}: {e}")
            raise FontFileError(str(path), str(e)) from e
