"""Core components for the font viewer."""

from .exceptions import (
    ArgumentError,
    CapabilityError,
    FontLoadError,
    FontLookupError,
    FontViewError,
    InvalidStyleError,
    RenderError,
    TemplateSyntaxError,
)
from .config import AppConfig
from .models import RenderParams, TemplateLine

__all__ = [
    "AppConfig",
    "ArgumentError",
    "CapabilityError",
    "FontLoadError",
    "FontLookupError",
    "FontViewError",
    "InvalidStyleError",
    "RenderError",
    "RenderParams",
    "TemplateLine",
    "TemplateSyntaxError",
]
