"""
Pytest configuration and fixtures for fontview tests.
"""

import string
from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from fontview.core.models import RenderParams
from fontview.fonts.catalog import FontCatalog
from fontview.fonts.models import FontRecord
from fontview.terminal.encoders import ImageEncoder
from fontview.terminal.negotiator import Protocol

UPEM = 1000
ASCENT = 800
DESCENT = -200
GLYPH_CHARS = string.ascii_letters + string.digits + string.punctuation


def rect_glyph(x0: int, y0: int, x1: int, y1: int):
    pen = TTGlyphPen(None)
    if x1 > x0 and y1 > y0:
        pen.moveTo((x0, y0))
        pen.lineTo((x0, y1))
        pen.lineTo((x1, y1))
        pen.lineTo((x1, y0))
        pen.closePath()
    return pen.glyph()


def build_font(
    path: Path,
    family: str = "Test Sans",
    style_name: str = "Regular",
    weight: int = 400,
    sample_text: str | None = None,
    chars: str = GLYPH_CHARS,
) -> Path:
    """Write a minimal TrueType font whose glyphs are solid boxes."""
    names = {char: f"uni{ord(char):04X}" for char in chars}
    glyph_order = [".notdef", "space", *names.values()]

    fb = FontBuilder(UPEM, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({0x20: "space", **{ord(c): n for c, n in names.items()}})

    glyphs = {".notdef": rect_glyph(100, 0, 500, 700), "space": rect_glyph(0, 0, 0, 0)}
    glyphs.update({name: rect_glyph(50, 0, 550, 700) for name in names.values()})
    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics({name: (600, 50) for name in glyph_order})
    fb.setupHorizontalHeader(ascent=ASCENT, descent=DESCENT)
    fb.setupOS2(
        sTypoAscender=ASCENT,
        sTypoDescender=DESCENT,
        usWinAscent=ASCENT,
        usWinDescent=-DESCENT,
        usWeightClass=weight,
    )
    name_strings = {
        "familyName": family,
        "styleName": style_name,
        "fullName": f"{family} {style_name}",
        "uniqueFontIdentifier": f"{family} {style_name}",
        "psName": f"{family}-{style_name}".replace(" ", ""),
        "version": "Version 1.0",
    }
    if sample_text:
        name_strings["sampleText"] = sample_text
    fb.setupNameTable(name_strings)
    fb.setupPost()
    fb.setupMaxp()
    fb.save(str(path))
    return path


@pytest.fixture
def font_factory(tmp_path):
    """Build test fonts inside the test's temporary directory."""
    fonts_dir = tmp_path / "fonts"
    fonts_dir.mkdir()

    def factory(filename: str = "TestSans-Regular.ttf", **kwargs) -> Path:
        return build_font(fonts_dir / filename, **kwargs)

    factory.directory = fonts_dir
    return factory


@pytest.fixture
def regular_font(font_factory) -> Path:
    return font_factory("TestSans-Regular.ttf", sample_text="Sphinx of black quartz")


@pytest.fixture
def bold_font(font_factory) -> Path:
    return font_factory("TestSans-Bold.ttf", style_name="Bold", weight=700)


@pytest.fixture
def corrupt_font(tmp_path) -> Path:
    path = tmp_path / "Broken.ttf"
    path.write_bytes(b"this is not a font")
    return path


@pytest.fixture
def sample_catalog() -> FontCatalog:
    """Catalog of records whose files do not exist; enough for matching."""

    def record(family: str, style: str) -> FontRecord:
        path = f"/fonts/{family.replace(' ', '')}-{style.replace(' ', '')}.ttf"
        return FontRecord(path=path, provisional_family=family, catalog_style=style)

    return FontCatalog(
        {
            "Zeta": {"bold": record("Zeta", "bold")},
            "Alpha": {
                "regular": record("Alpha", "regular"),
                "bold": record("Alpha", "bold"),
            },
            "DejaVu Sans": {
                "regular": record("DejaVu Sans", "regular"),
                "bold": record("DejaVu Sans", "bold"),
                "bold italic": record("DejaVu Sans", "bold italic"),
                "light": record("DejaVu Sans", "light"),
            },
            "DejaVu Sans Mono": {"regular": record("DejaVu Sans Mono", "regular")},
        }
    )


class RecordingEncoder(ImageEncoder):
    """Encoder that records images and emits a short fake payload."""

    protocol = Protocol.KITTY

    def __init__(self):
        self.images = []

    def encode(self, image) -> bytes:
        self.images.append(image)
        return f"<image {image.size[0]}x{image.size[1]}>".encode()


@pytest.fixture
def recording_encoder() -> RecordingEncoder:
    return RecordingEncoder()


@pytest.fixture
def render_params() -> RenderParams:
    return RenderParams(size=24, dpi=72, margin=2)
