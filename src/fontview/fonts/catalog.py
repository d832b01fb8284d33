"""
Font Catalog
============

Discovery of installed fonts and the read-only family/style catalog built
from them.

The catalog maps ``family -> style key -> FontRecord`` where the style key is
the canonical ``format_style`` string ("bold", "semi-bold italic", ...).
Name matching lives here too: exact family, then prefix, then substring,
with a fallback that splits trailing style words off face names such as
"DejaVu Sans Bold".
"""

import logging
import os
import platform
import re
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from fontview.core.exceptions import FontLoadError, InvalidStyleError

from .models import FontRecord
from .style import StyleCode, format_style, nearest_style_key, parse_style, style_from_subfamily
from .utils import is_font_file, read_font_info

logger = logging.getLogger(__name__)

_NORMALIZE_RE = re.compile(r"[\s_-]+")


def normalize_name(name: str) -> str:
    """Normalize a family name for matching."""
    return _NORMALIZE_RE.sub(" ", name.casefold()).strip()


def default_font_dirs(system: str | None = None) -> list[Path]:
    """Get platform font directories that exist on this machine."""
    system = (system or platform.system()).lower()
    directories: list[Path] = []

    if system == "windows":
        directories.extend(
            [
                Path(os.environ.get("WINDIR", "C:\\Windows")) / "Fonts",
                Path(os.environ.get("LOCALAPPDATA", "")) / "Microsoft" / "Windows" / "Fonts",
            ]
        )
    elif system == "darwin":
        directories.extend(
            [
                Path("/System/Library/Fonts"),
                Path("/Library/Fonts"),
                Path.home() / "Library" / "Fonts",
            ]
        )
    else:
        data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
        directories.extend(
            [
                Path("/usr/share/fonts"),
                Path("/usr/local/share/fonts"),
                Path.home() / ".fonts",
                Path(data_home) / "fonts",
            ]
        )

    return [d for d in directories if d.is_dir()]


class FontCatalog(Mapping):
    """
    Read-only mapping of family to style key to FontRecord.

    Built once per run. Iteration order is insertion order; callers that need
    a deterministic order sort explicitly.
    """

    def __init__(self, fonts: Mapping[str, Mapping[str, FontRecord]] | None = None):
        self._fonts: dict[str, MappingProxyType] = {
            family: MappingProxyType(dict(styles)) for family, styles in (fonts or {}).items()
        }
        self._index = {normalize_name(family): family for family in self._fonts}

    def __getitem__(self, family: str) -> Mapping[str, FontRecord]:
        return self._fonts[family]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fonts)

    def __len__(self) -> int:
        return len(self._fonts)

    def families(self) -> list[str]:
        """Family names in ordinal order."""
        return sorted(self._fonts)

    def styles(self, family: str) -> list[str]:
        """Style keys of a family in ordinal order."""
        return sorted(self._fonts[family])

    @classmethod
    def from_records(cls, records: Iterable[tuple[str, str, FontRecord]]) -> "FontCatalog":
        """Build a catalog from (family, style key, record) triples; first wins."""
        fonts: dict[str, dict[str, FontRecord]] = {}
        for family, style_key, record in records:
            styles = fonts.setdefault(family, {})
            if style_key in styles:
                logger.debug(
                    f"Duplicate face {family}/{style_key}: keeping {styles[style_key].path}, "
                    f"skipping {record.path}"
                )
                continue
            styles[style_key] = record
        return cls(fonts)

    def find_family(self, name: str) -> str | None:
        """
        Find the catalog family best matching ``name``.

        Exact (normalized) match first, then families starting with the name,
        then families containing it. The shortest candidate wins; ties are
        broken by ordinal order.
        """
        wanted = normalize_name(name)
        if not wanted:
            return None
        if wanted in self._index:
            return self._index[wanted]

        for predicate in (str.startswith, str.__contains__):
            candidates = [
                family for norm, family in self._index.items() if predicate(norm, wanted)
            ]
            if candidates:
                return min(candidates, key=lambda family: (len(family), family))
        return None

    def match(self, name: str, style: str | StyleCode = "regular") -> FontRecord | None:
        """
        Match a family or face name against the catalog.

        Args:
            name: Family name ("DejaVu Sans") or face name ("DejaVu Sans Bold")
            style: Requested style key or StyleCode

        Returns:
            The best matching FontRecord, or None
        """
        wanted = parse_style(style) if isinstance(style, str) else style

        family = self.find_family(name)
        if family is None:
            split = _split_style_suffix(name)
            if split is None:
                return None
            name, wanted = split
            family = self.find_family(name)
            if family is None:
                return None

        styles = self._fonts[family]
        key = nearest_style_key(wanted, {k: _key_style(k) for k in styles})
        if key is None:
            return None
        logger.debug(f"Matched {name!r} ({format_style(wanted)}) to {family}/{key}")
        return styles[key]


def _key_style(key: str) -> StyleCode:
    try:
        return parse_style(key)
    except InvalidStyleError:
        return style_from_subfamily(key)


def _split_style_suffix(name: str) -> tuple[str, StyleCode] | None:
    """Split trailing style words off a face name, e.g. "Foo Semibold Italic"."""
    words = name.split()
    for cut in range(1, len(words)):
        family, suffix = " ".join(words[:cut]), " ".join(words[cut:])
        try:
            return family, parse_style(suffix)
        except InvalidStyleError:
            continue
    return None


def _log_walk_error(error: OSError) -> None:
    logger.debug(f"Cannot read font directory {error.filename}: {error.strerror}")


class SystemFontProvider:
    """
    Discovers fonts in the platform font directories.

    Each file is opened once to read its name table; collections contribute
    their first face. Unreadable files are skipped.
    """

    def __init__(self, font_directories: list[Path] | None = None):
        self.font_directories = (
            default_font_dirs() if font_directories is None else list(font_directories)
        )
        logger.debug(f"Font directories: {[str(d) for d in self.font_directories]}")

    def iter_font_files(self) -> Iterator[Path]:
        for font_dir in self.font_directories:
            for root, _dirs, files in os.walk(font_dir, onerror=_log_walk_error):
                for filename in sorted(files):
                    if is_font_file(filename):
                        yield Path(root) / filename

    def scan(self) -> Iterator[tuple[str, str, FontRecord]]:
        for font_file in self.iter_font_files():
            try:
                info = read_font_info(font_file)
            except FontLoadError as e:
                logger.debug(f"Skipping font {font_file}: {e}")
                continue
            record = FontRecord.for_path(font_file)
            family = info["family"] or record.provisional_family
            style_key = format_style(style_from_subfamily(info["subfamily"], info["weight_class"]))
            record.provisional_family = family
            record.catalog_style = style_key
            yield family, style_key, record

    def build_catalog(self) -> FontCatalog:
        """Scan all font directories into a FontCatalog."""
        catalog = FontCatalog.from_records(self.scan())
        logger.debug(
            f"Found {sum(len(s) for s in catalog.values())} faces "
            f"in {len(catalog)} families"
        )
        return catalog
