"""
Font Matcher
============

Resolves user queries (font paths, directories or family names) to font
records, and enumerates the catalog for "render all" mode.
"""

import logging
import os
from pathlib import Path

from fontview.core.exceptions import FontNotFoundError, NoFontFilesError, UnreadableDirectoryError

from .catalog import FontCatalog
from .models import FontRecord
from .style import StyleCode, format_style
from .utils import is_font_file

logger = logging.getLogger(__name__)


def expand_directory(directory: str | Path) -> list[FontRecord]:
    """
    Build provisional records for the font files directly inside a directory.

    Subdirectories are not descended into. The result is sorted by family
    name, case-insensitively.

    Raises:
        FontLookupError: If the directory cannot be listed or holds no fonts
    """
    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError as e:
        raise UnreadableDirectoryError(str(directory), str(e)) from e

    records = [
        FontRecord.for_path(Path(directory) / entry.name)
        for entry in entries
        if not entry.is_dir() and is_font_file(entry.name)
    ]
    if not records:
        raise NoFontFilesError(str(directory))
    records.sort(key=lambda record: record.family.lower())
    logger.debug(f"Expanded {directory} to {len(records)} font files")
    return records


def match(query: str, style: StyleCode, catalog: FontCatalog) -> FontRecord | None:
    """Match a family or face name against the catalog without loading it."""
    return catalog.match(query, format_style(style))


def resolve(query: str, style: StyleCode, catalog: FontCatalog) -> list[FontRecord]:
    """
    Resolve one user query to font records.

    A regular file is used directly, a directory is expanded to its font
    files, and anything else is matched by name against the catalog.

    Args:
        query: Font path, directory or family/face name
        style: Requested style, used for catalog matching
        catalog: Discovered system fonts

    Returns:
        One or more FontRecords in render order

    Raises:
        FontLookupError: If nothing matches
    """
    if query.strip():
        path = Path(query).expanduser()
        if path.is_dir():
            return expand_directory(path)
        if path.is_file():
            return [FontRecord.for_path(path)]

    record = match(query, style, catalog)
    if record is None:
        raise FontNotFoundError(query)
    return [record]


def all_fonts(catalog: FontCatalog) -> list[FontRecord]:
    """
    Every face in the catalog, sorted by family then by style key.

    Both sorts use plain (case-sensitive, ordinal) string ordering, so for a
    family with "bold" and "regular" faces, "bold" comes first.
    """
    return [
        catalog[family][style]
        for family in catalog.families()
        for style in catalog.styles(family)
    ]


