"""fontview
========

Render font specimens inline in terminals that speak the Kitty, iTerm2 or
Sixel graphics protocols.
"""

__version__ = "0.1.0"

from .core.exceptions import FontViewError
from .fonts import FontCatalog, FontRecord, StyleCode, Variant, parse_style, parse_variant

__all__ = [
    "FontCatalog",
    "FontRecord",
    "FontViewError",
    "StyleCode",
    "Variant",
    "__version__",
    "parse_style",
    "parse_variant",
]
