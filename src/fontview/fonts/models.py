"""
Font data models and types.
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path

from .style import StyleCode, style_from_subfamily
from .utils import family_from_path, read_font_info

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FontNames:
    """Names read from a font's name table on first load."""

    family: str
    style_name: str
    name: str | None = None
    sample_text: str = ""
    style: StyleCode = field(default_factory=StyleCode)
    codepoints: frozenset[int] = frozenset()


class _LoadOnce:
    """A value computed at most once, guarded by a lock and a done flag."""

    __slots__ = ("_done", "_lock", "_value")

    def __init__(self):
        self._lock = threading.Lock()
        self._done = False
        self._value: FontNames | None = None

    @property
    def done(self) -> bool:
        return self._done

    @property
    def value(self) -> FontNames | None:
        return self._value

    def get(self, compute) -> FontNames:
        if self._done:
            return self._value
        with self._lock:
            if not self._done:
                self._value = compute()
                self._done = True
        return self._value


@dataclass(eq=False)
class FontRecord:
    """
    One discoverable font face.

    Records come from catalog metadata or from a bare path. Until ``load()``
    runs, ``family`` is the catalog family or a name derived from the file
    name. After loading it is the family from the font's name table.
    """

    path: str
    provisional_family: str = ""
    catalog_style: str | None = None
    _names: _LoadOnce = field(default_factory=_LoadOnce, init=False, repr=False)

    @classmethod
    def for_path(cls, path: str | Path) -> "FontRecord":
        """Create a provisional record for a font known only by its path."""
        return cls(path=str(path), provisional_family=family_from_path(path))

    @property
    def loaded(self) -> bool:
        return self._names.done

    def load(self) -> FontNames:
        """
        Read the font's names, once.

        Raises:
            FontLoadError: If the file is unreadable or corrupt
        """
        return self._names.get(self._read_names)

    def _read_names(self) -> FontNames:
        logger.debug(f"Loading font names from {self.path}")
        info = read_font_info(self.path, with_cmap=True)
        family = info["family"] or self.provisional_family or family_from_path(self.path)
        subfamily = info["subfamily"]
        return FontNames(
            family=family,
            style_name=subfamily,
            name=info["name"],
            sample_text=info["sample_text"] or "",
            style=style_from_subfamily(subfamily, info["weight_class"]),
            codepoints=info["codepoints"] or frozenset(),
        )

    @property
    def family(self) -> str:
        names = self._names.value
        if names is not None:
            return names.family
        return self.provisional_family

    @property
    def style_name(self) -> str | None:
        names = self._names.value
        if names is not None:
            return names.style_name
        return self.catalog_style

    @property
    def sample_text(self) -> str:
        names = self._names.value
        return names.sample_text if names is not None else ""

    @property
    def display_name(self) -> str:
        """Best available name: the loaded full name, else the family."""
        names = self._names.value
        if names is not None and names.name:
            return names.name
        return self.family

    @property
    def filename(self) -> str:
        return Path(self.path).name

    @property
    def face(self) -> str:
        """Display name with the style label, e.g. ``Arial Bold (Bold)``."""
        style = self.style_name
        if style:
            return f"{self.display_name} ({style})"
        return self.display_name

    def __str__(self) -> str:
        return f"{json.dumps(self.face, ensure_ascii=False)}: {self.path}"

    def covers(self, text: str) -> bool:
        """Whether the loaded font maps any visible character of ``text``."""
        names = self.load()
        return any(ord(char) in names.codepoints for char in text if not char.isspace())
