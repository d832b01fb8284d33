"""
Basic Usage Examples
====================

This module demonstrates using fontview as a library rather than through
the ``fv`` command.
"""

import sys
from pathlib import Path

from fontview.core.config import AppConfig
from fontview.core.exceptions import CapabilityError, FontLookupError
from fontview.fonts import SystemFontProvider, all_fonts, resolve
from fontview.specimen import SpecimenRenderer, collect_fonts, compile_template, write_outcomes
from fontview.specimen.rasterizer import SpecimenRasterizer
from fontview.terminal import Negotiator


def example_match_font():
    """
    Find what a family name resolves to on this machine.
    """
    print("=== Match a Font ===")

    catalog = SystemFontProvider().build_catalog()
    params = AppConfig().render_params(style="bold")

    try:
        (font,) = resolve("DejaVu Sans", params.style, catalog)
    except FontLookupError as e:
        print(f"Lookup failed: {e}")
        return

    print(f"Family: {font.family}")
    print(f"Style:  {font.style_name}")
    print(f"Path:   {font.path}")


def example_save_png():
    """
    Rasterize a specimen to a PNG file instead of the terminal.
    """
    print("\n=== Save a Specimen as PNG ===")

    params = AppConfig().render_params(size=36, dpi=144, fg="#202020", bg="ivory")
    catalog = SystemFontProvider().build_catalog()
    fonts = all_fonts(catalog)
    if not fonts:
        print("No fonts installed")
        return

    font = fonts[0]
    font.load()
    template = compile_template("{{ size(inc(font_size, 12)) }}{{ name }}\n{{ sample }}")
    lines = template.execute(font, params.size, str(params.style))
    image = SpecimenRasterizer(params).rasterize(font, lines)

    output = Path("specimen.png")
    image.save(output)
    print(f"Wrote {output} ({image.width}x{image.height}) for {font.face}")


def example_render_to_terminal():
    """
    Render several fonts inline, the way ``fv`` does.
    """
    print("\n=== Render to the Terminal ===")

    params = AppConfig().render_params(variant="small-caps")
    try:
        renderer = SpecimenRenderer.create(params, Negotiator().protocol)
    except CapabilityError as e:
        print(f"Cannot render here: {e}")
        return

    catalog = SystemFontProvider().build_catalog()
    items = collect_fonts(["DejaVu Sans", "Liberation Serif"], params, catalog)
    failures = write_outcomes(sys.stdout.buffer, renderer.render_each(items))
    print(f"{failures} failures")


if __name__ == "__main__":
    example_match_font()
    example_save_png()
    example_render_to_terminal()
