"""Pydantic models for type-safe data structures."""

from typing import NamedTuple

from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field, field_validator

from fontview.fonts.style import StyleCode, Variant, parse_style, parse_variant

from .exceptions import InvalidColorError

RGB = tuple[int, int, int]


def parse_color(value: str | RGB) -> RGB:
    """
    Parse a color name, hex string or rgb() expression to an RGB tuple.

    Raises:
        InvalidColorError: If PIL cannot parse the color
    """
    if isinstance(value, tuple):
        return tuple(value[:3])
    try:
        rgb = ImageColor.getrgb(value.strip())
    except (ValueError, AttributeError) as e:
        raise InvalidColorError(str(value)) from e
    return rgb[:3]


class TemplateLine(NamedTuple):
    """One laid out line of specimen text."""

    text: str
    size: int


class RenderParams(BaseModel):
    """Immutable render configuration shared by every font in a run."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    size: int = Field(48, gt=0, description="Font size in points")
    dpi: int = Field(100, gt=0, description="Raster resolution")
    margin: int = Field(5, ge=0, description="Margin in millimetres")
    fg: RGB = Field((0, 0, 0), description="Foreground color")
    bg: RGB = Field((255, 255, 255), description="Background color")
    style: StyleCode = Field(default_factory=StyleCode, description="Font style")
    variant: Variant = Field(Variant.NORMAL, description="Font variant")
    text: str = Field("", description="Template source; empty uses the default specimen")

    @field_validator("fg", "bg", mode="before")
    @classmethod
    def validate_color(cls, v):
        return parse_color(v)

    @field_validator("style", mode="before")
    @classmethod
    def validate_style(cls, v):
        if isinstance(v, str):
            return parse_style(v)
        return v

    @field_validator("variant", mode="before")
    @classmethod
    def validate_variant(cls, v):
        if isinstance(v, str):
            return parse_variant(v)
        return v

    @property
    def pixel_size(self) -> int:
        return points_to_pixels(self.size, self.dpi)

    @property
    def pixel_margin(self) -> int:
        return round(self.margin * self.dpi / 25.4)


def points_to_pixels(points: float, dpi: int) -> int:
    return max(1, round(points * dpi / 72))
