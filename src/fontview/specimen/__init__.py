"""Specimen layout, rasterization and rendering."""

from .rasterizer import SpecimenRasterizer
from .renderer import (
    LookupFailure,
    RenderOutcome,
    SpecimenRenderer,
    collect_fonts,
    write_outcomes,
)
from .template import DEFAULT_TEMPLATE, CompiledTemplate, break_lines, compile_template

__all__ = [
    "DEFAULT_TEMPLATE",
    "CompiledTemplate",
    "LookupFailure",
    "RenderOutcome",
    "SpecimenRasterizer",
    "SpecimenRenderer",
    "break_lines",
    "collect_fonts",
    "compile_template",
    "write_outcomes",
]
