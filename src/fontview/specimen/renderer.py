"""
Specimen Renderer
=================

Orchestrates per-font rendering: load names, execute the template, rasterize
and encode. Failures for one font become an error outcome for that font and
never stop the fonts after it.
"""

import json
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import BinaryIO

from PIL import Image

from fontview.core.exceptions import (
    FontLoadError,
    FontLookupError,
    FontViewError,
    RasterizationError,
    RenderError,
)
from fontview.core.models import RenderParams
from fontview.fonts.catalog import FontCatalog
from fontview.fonts.matcher import resolve
from fontview.fonts.models import FontRecord
from fontview.fonts.style import format_style
from fontview.terminal.encoders import ImageEncoder, encoder_for
from fontview.terminal.negotiator import Protocol

from .rasterizer import SpecimenRasterizer
from .template import CompiledTemplate, compile_template

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LookupFailure:
    """A query that resolved to no font, kept at its argument position."""

    position: int
    query: str
    error: FontLookupError

    def __str__(self) -> str:
        return f"arg {self.position} {json.dumps(self.query, ensure_ascii=False)}"


@dataclass(frozen=True)
class RenderOutcome:
    """Result of rendering one item: encoded image bytes or an error."""

    label: str
    image: bytes | None = None
    error: FontViewError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def diagnostic(self) -> str:
        return f"{self.label} -- error: {self.error}"


def collect_fonts(
    queries: list[str], params: RenderParams, catalog: FontCatalog
) -> list[FontRecord | LookupFailure]:
    """
    Resolve every query in argument order.

    A query that matches nothing is kept in place as a LookupFailure so its
    diagnostic appears at the position of the failing argument.
    """
    items: list[FontRecord | LookupFailure] = []
    for position, query in enumerate(queries):
        try:
            items.extend(resolve(query, params.style, catalog))
        except FontLookupError as e:
            logger.debug(f"Lookup failed for arg {position} {query!r}: {e}")
            items.append(LookupFailure(position, query, e))
    return items


class SpecimenRenderer:
    """Renders font specimens with one compiled template and one encoder."""

    def __init__(
        self,
        params: RenderParams,
        template: CompiledTemplate,
        encoder: ImageEncoder,
        rasterizer: SpecimenRasterizer | None = None,
    ):
        self.params = params
        self.template = template
        self.encoder = encoder
        self.rasterizer = rasterizer or SpecimenRasterizer(params)

    @classmethod
    def create(cls, params: RenderParams, protocol: Protocol) -> "SpecimenRenderer":
        """
        Build a renderer, failing fast on run-level configuration errors.

        Raises:
            CapabilityError: If ``protocol`` is unsupported
            TemplateSyntaxError: If the template does not compile
        """
        encoder = encoder_for(protocol)
        template = compile_template(params.text)
        return cls(params, template, encoder)

    def image(self, font: FontRecord) -> Image.Image:
        """
        Lay out and rasterize one font's specimen.

        Raises:
            FontLoadError: If the font file is unreadable or corrupt
            RenderError: If templating or rasterization fails
        """
        font.load()
        lines = self.template.execute(font, self.params.size, format_style(self.params.style))
        return self.rasterizer.rasterize(font, lines)

    def render(self, font: FontRecord) -> bytes:
        """Render one font to protocol framed bytes."""
        image = self.image(font)
        try:
            return self.encoder.encode(image)
        except (OSError, ValueError) as e:
            raise RasterizationError(str(e)) from e

    def render_one(self, font: FontRecord) -> RenderOutcome:
        try:
            data = self.render(font)
        except (FontLoadError, RenderError) as e:
            logger.debug(f"Rendering {font.path} failed: {e}")
            return RenderOutcome(str(font), error=e)
        except Exception as e:
            logger.exception(f"Unexpected error rendering {font.path}")
            return RenderOutcome(str(font), error=RenderError(str(e)))
        return RenderOutcome(str(font), image=data)

    def render_each(self, items: Iterable[FontRecord | LookupFailure]) -> Iterator[RenderOutcome]:
        """Yield one outcome per item, in order."""
        for item in items:
            if isinstance(item, LookupFailure):
                yield RenderOutcome(str(item), error=item.error)
            else:
                yield self.render_one(item)


def write_outcomes(stream: BinaryIO, outcomes: Iterable[RenderOutcome]) -> int:
    """
    Write outcomes to the output stream, flushing after each one.

    Successful outcomes write the identification line and the image bytes;
    failures write a diagnostic line. Consecutive outcomes are separated by a
    blank line.

    Returns:
        Number of failed outcomes
    """
    failures = 0
    for i, outcome in enumerate(outcomes):
        if i:
            stream.write(b"\n")
        if outcome.ok:
            stream.write(f"{outcome.label}\n".encode())
            stream.write(outcome.image)
            stream.write(b"\n")
        else:
            failures += 1
            stream.write(f"{outcome.diagnostic()}\n".encode())
        stream.flush()
    return failures
