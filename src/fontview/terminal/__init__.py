"""Terminal graphics capability detection and inline image encoding."""

from .encoders import ImageEncoder, ItermEncoder, KittyEncoder, SixelEncoder, encoder_for
from .negotiator import Negotiator, Protocol, negotiate

__all__ = [
    "ImageEncoder",
    "ItermEncoder",
    "KittyEncoder",
    "Negotiator",
    "Protocol",
    "SixelEncoder",
    "encoder_for",
    "negotiate",
]
