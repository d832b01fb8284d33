"""Font Management Module
======================

Font discovery, matching and the style/variant codec.
"""

from .catalog import FontCatalog, SystemFontProvider, default_font_dirs
from .matcher import all_fonts, expand_directory, match, resolve
from .models import FontNames, FontRecord
from .style import (
    StyleCode,
    Variant,
    Weight,
    format_style,
    format_variant,
    parse_style,
    parse_variant,
)
from .utils import title_case

__all__ = [
    "FontCatalog",
    "FontNames",
    "FontRecord",
    "StyleCode",
    "SystemFontProvider",
    "Variant",
    "Weight",
    "all_fonts",
    "default_font_dirs",
    "expand_directory",
    "format_style",
    "format_variant",
    "match",
    "parse_style",
    "parse_variant",
    "resolve",
    "title_case",
]
