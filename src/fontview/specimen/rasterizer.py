"""Specimen rasterization with Pillow."""

import itertools
import logging
from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFont, features

from fontview.core.exceptions import FontFileError, NoRenderableTextError, RasterizationError
from fontview.core.models import RenderParams, TemplateLine, points_to_pixels
from fontview.fonts.models import FontRecord
from fontview.fonts.style import StyleCode, Variant

logger = logging.getLogger(__name__)

# Scale and baseline shift (in ems) for subscript/superscript runs
SCRIPT_SCALE = 0.583
SCRIPT_SHIFT = 1 / 3
# Synthesized small caps scale when raqm is unavailable
SMALL_CAPS_SCALE = 0.8


@dataclass
class TextRun:
    """A piece of text placed on a baseline with one face."""

    text: str
    font: ImageFont.FreeTypeFont
    x: float
    baseline: float
    features: list[str] | None = None


class FaceCache:
    """Loads one font file at several pixel sizes with the requested style."""

    def __init__(self, path: str, style: StyleCode):
        self.path = path
        self.style = style
        self._faces: dict[int, ImageFont.FreeTypeFont] = {}

    def get(self, size_px: int) -> ImageFont.FreeTypeFont:
        size_px = max(1, size_px)
        if size_px not in self._faces:
            try:
                face = ImageFont.truetype(self.path, size_px)
            except OSError as e:
                raise FontFileError(self.path, str(e)) from e
            apply_style(face, self.style)
            self._faces[size_px] = face
        return self._faces[size_px]


def apply_style(face: ImageFont.FreeTypeFont, style: StyleCode) -> None:
    """Set weight/italic on variable fonts; static faces render as stored."""
    try:
        axes = face.get_variation_axes()
    except (OSError, AttributeError):
        return

    values = []
    for axis in axes:
        name = axis["name"]
        if isinstance(name, bytes):
            name = name.decode("utf-8", errors="replace")
        name = name.lower()
        lo, hi, default = axis["minimum"], axis["maximum"], axis["default"]
        if name == "weight":
            value = style.css_weight
        elif name == "italic":
            value = hi if style.italic else lo
        elif name == "slant":
            value = lo if style.italic else default
        else:
            value = default
        values.append(min(max(value, lo), hi))

    try:
        face.set_variation_by_axes(values)
    except OSError as e:
        logger.debug(f"Could not set variation axes: {e}")


def has_raqm() -> bool:
    return features.check_feature("raqm")


class SpecimenRasterizer:
    """
    Lays out sized template lines and draws them over the background.

    Lines stack top to bottom, each advanced by the measured height of the
    line above. The drawing is cropped to the ink bounds plus the margin and
    composited over the background color.
    """

    def __init__(self, params: RenderParams):
        self.params = params
        self.raqm = has_raqm()

    def layout(self, font: FontRecord, lines: list[TemplateLine]) -> list[TextRun]:
        """
        Place every renderable line.

        Raises:
            FontLoadError: If Pillow cannot open the font
            RenderError: If no line has glyphs in the font
        """
        faces = FaceCache(font.path, self.params.style)
        runs: list[TextRun] = []
        y = 0.0
        for line in lines:
            size_px = points_to_pixels(line.size, self.params.dpi)
            face = faces.get(size_px)
            ascent, descent = face.getmetrics()
            if line.text and font.covers(line.text):
                runs.extend(self._line_runs(line.text, faces, size_px, y + ascent))
            elif line.text:
                logger.debug(f"No glyphs for {line.text!r} in {font.path}; skipping line")
            y += ascent + descent

        if not runs:
            raise NoRenderableTextError()
        return runs

    def _line_runs(
        self, text: str, faces: FaceCache, size_px: int, baseline: float
    ) -> list[TextRun]:
        variant = self.params.variant
        if variant in (Variant.SUBSCRIPT, Variant.SUPERSCRIPT):
            shift = round(size_px * SCRIPT_SHIFT)
            baseline += shift if variant is Variant.SUBSCRIPT else -shift
            face = faces.get(round(size_px * SCRIPT_SCALE))
            return [TextRun(text, face, 0, baseline)]

        face = faces.get(size_px)
        if variant is not Variant.SMALL_CAPS:
            return [TextRun(text, face, 0, baseline)]
        if self.raqm:
            return [TextRun(text, face, 0, baseline, ["smcp"])]

        small = faces.get(round(size_px * SMALL_CAPS_SCALE))
        runs = []
        x = 0.0
        for lower, chars in itertools.groupby(text, key=str.islower):
            piece = "".join(chars)
            run_face = face
            if lower:
                piece, run_face = piece.upper(), small
            runs.append(TextRun(piece, run_face, x, baseline))
            x += run_face.getlength(piece)
        return runs

    def draw(self, runs: list[TextRun]) -> Image.Image:
        """Draw placed runs and compose them over the background."""
        params = self.params
        pad = max(points_to_pixels(params.size, params.dpi), 1) + params.pixel_margin
        width = max(run.x + run.font.getlength(run.text, features=run.features) for run in runs)
        height = max(run.baseline + run.font.getmetrics()[1] for run in runs)

        try:
            layer = Image.new("RGBA", (int(width) + 2 * pad, int(height) + 2 * pad), (0, 0, 0, 0))
            draw = ImageDraw.Draw(layer)
            for run in runs:
                draw.text(
                    (pad + run.x, pad + run.baseline),
                    run.text,
                    font=run.font,
                    fill=(*params.fg, 255),
                    anchor="ls",
                    features=run.features,
                )
        except (OSError, ValueError, KeyError) as e:
            raise RasterizationError(str(e)) from e

        bbox = layer.getbbox()
        if bbox is None:
            raise NoRenderableTextError()

        margin = params.pixel_margin
        left, top, right, bottom = bbox
        text = layer.crop((left - margin, top - margin, right + margin, bottom + margin))

        background = Image.new("RGBA", text.size, (*params.bg, 255))
        return Image.alpha_composite(background, text).convert("RGB")

    def rasterize(self, font: FontRecord, lines: list[TemplateLine]) -> Image.Image:
        return self.draw(self.layout(font, lines))
