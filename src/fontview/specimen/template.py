"""
Specimen Template Layout
========================

Compiles the specimen template once per run and executes it once per font,
producing ordered ``TemplateLine`` values.

Templates are Jinja2. Besides the per-font context (``name``, ``family``,
``style``, ``sample``, ``font_size``) two helpers are available:

``inc(a, b)``
    returns ``a + b``

``size(n)``
    emits a ``\\0n\\0`` marker; when a line starts with the marker the line is
    laid out at size ``n`` and the marker is removed from its text
"""

import logging
import re
from importlib import resources

import jinja2

from fontview.core.exceptions import InvalidTemplateError, TemplateExecutionError
from fontview.core.models import TemplateLine
from fontview.fonts.models import FontRecord

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE: str = (
    resources.files("fontview.specimen").joinpath("templates/specimen.j2").read_text("utf-8")
)

SIZE_MARKER = "\x00"
_SIZE_RE = re.compile(r"^\x00([0-9]+)\x00(.*)$", re.DOTALL)


def size_tag(size: int) -> str:
    """Emit the inline size marker for a line."""
    return f"{SIZE_MARKER}{max(int(size), 1)}{SIZE_MARKER}"


def inc(a: int, b: int) -> int:
    return a + b


def break_lines(output: str, default_size: int) -> list[TemplateLine]:
    """
    Split rendered template output into sized lines.

    Each line that starts with a size marker takes that size and loses the
    marker; other lines use ``default_size``. Visible text is stripped.
    """
    lines = []
    for line in output.split("\n"):
        size = default_size
        match = _SIZE_RE.match(line)
        if match is not None:
            size = int(match.group(1))
            line = match.group(2)
        lines.append(TemplateLine(line.strip(), size))
    return lines


class CompiledTemplate:
    """A parsed specimen template, shared read-only across all fonts."""

    def __init__(self, template: jinja2.Template, source: str):
        self._template = template
        self.source = source

    def render_text(self, font: FontRecord, default_size: int, style: str = "") -> str:
        context = {
            "name": font.display_name,
            "family": font.family,
            "style": font.style_name or style,
            "sample": font.sample_text,
            "font_size": default_size,
        }
        try:
            return self._template.render(context)
        except (jinja2.TemplateError, TypeError, ValueError, ArithmeticError) as e:
            raise TemplateExecutionError(str(e)) from e

    def execute(self, font: FontRecord, default_size: int, style: str = "") -> list[TemplateLine]:
        """
        Execute the template for one font.

        Args:
            font: Font whose names fill the template context
            default_size: Size for lines without a size marker
            style: Style label used when the font has no loaded style name

        Returns:
            The ordered template lines

        Raises:
            RenderError: If the template fails at runtime for this font
        """
        return break_lines(self.render_text(font, default_size, style), default_size)


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        autoescape=False,
        keep_trailing_newline=False,
    )
    env.globals.update(size=size_tag, inc=inc)
    return env


def compile_template(source: str | None = None) -> CompiledTemplate:
    """
    Compile a specimen template.

    Args:
        source: Template source; empty or None selects ``DEFAULT_TEMPLATE``

    Raises:
        TemplateSyntaxError: If the source does not parse
    """
    source = source or DEFAULT_TEMPLATE
    try:
        template = _environment().from_string(source)
    except jinja2.TemplateSyntaxError as e:
        raise InvalidTemplateError(e.message or str(e), e.lineno) from e
    logger.debug(f"Compiled specimen template ({len(source)} chars)")
    return CompiledTemplate(template, source)
