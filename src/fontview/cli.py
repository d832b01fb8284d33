"""
Command line interface for fontview
===================================

``fv [OPTIONS] [FONT]...`` renders specimens of the named fonts, font files
or font directories. ``--all`` renders every installed face, ``--list``
prints the catalog and ``--match`` prints what each name resolves to.
"""

import json
import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from fontview import __version__
from fontview.core.config import AppConfig
from fontview.core.exceptions import (
    ArgumentError,
    CapabilityError,
    ConfigurationError,
    ModeConflictError,
    TemplateSyntaxError,
)
from fontview.core.models import RenderParams, parse_color
from fontview.fonts.catalog import FontCatalog, SystemFontProvider
from fontview.fonts.matcher import all_fonts, match
from fontview.fonts.style import parse_style, parse_variant
from fontview.specimen.renderer import SpecimenRenderer, collect_fonts, write_outcomes
from fontview.terminal.negotiator import Negotiator

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def check_modes(show_all: bool, list_fonts: bool, match_only: bool, has_args: bool) -> None:
    """
    Validate the mode flags against the positional arguments.

    Raises:
        ModeConflictError: For exclusive flags combined or bad argument counts
    """
    if sum((show_all, list_fonts, match_only)) > 1:
        raise ModeConflictError("--all, --list, and --match must be exclusive")
    if (show_all or list_fonts) and has_args:
        raise ModeConflictError("--all and --list take no font arguments")
    if not (show_all or list_fonts) and not has_args:
        raise ModeConflictError(
            "requires --all or one or more args, or --list, or --match and one or more args"
        )


def _convert(converter):
    def callback(_ctx, _param, value):
        if value is None:
            return None
        try:
            converter(value)
        except ArgumentError as e:
            raise click.BadParameter(str(e)) from e
        return value

    return callback


def format_list(catalog: FontCatalog) -> str:
    lines = []
    for family in catalog.families():
        lines.append("---")
        lines.append(f"family: {json.dumps(family, ensure_ascii=False)}")
        lines.append("styles:")
        for style in catalog.styles(family):
            lines.append(f"  {style}: {catalog[family][style].path}")
    return "\n".join(lines)


def format_match(queries: list[str], params: RenderParams, catalog: FontCatalog) -> str:
    lines = []
    for query in queries:
        record = match(query, params.style, catalog)
        quoted = json.dumps(query, ensure_ascii=False)
        if record is None:
            lines.append(f"# {quoted} -- error: unable to locate font {quoted}")
            continue
        lines.append("---")
        lines.append(f"path: {record.path}")
        lines.append(f"family: {json.dumps(record.family, ensure_ascii=False)}")
        lines.append(f"style: {json.dumps(record.style_name or '', ensure_ascii=False)}")
    return "\n".join(lines)


def build_catalog(font_dirs: list[Path] | None) -> FontCatalog:
    provider = SystemFontProvider(font_dirs or None)
    return provider.build_catalog()


def _all_paths(queries: tuple[str, ...]) -> bool:
    return all(Path(query).expanduser().exists() for query in queries)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("fonts", nargs=-1)
@click.option("--all", "show_all", is_flag=True, help="Show all system fonts")
@click.option("--list", "list_fonts", is_flag=True, help="List system fonts")
@click.option("--match", "match_only", is_flag=True, help="Match system fonts")
@click.option("--fg", callback=_convert(parse_color), help="Foreground color [default: black]")
@click.option("--bg", callback=_convert(parse_color), help="Background color [default: white]")
@click.option("--size", type=click.IntRange(min=1), help="Font size in points [default: 48]")
@click.option("--margin", type=click.IntRange(min=0), help="Margin in millimetres [default: 5]")
@click.option("--dpi", type=click.IntRange(min=1), help="Output resolution [default: 100]")
@click.option("--style", callback=_convert(parse_style), help="Font style, e.g. 'bold italic'")
@click.option("--variant", callback=_convert(parse_variant), help="Font variant")
@click.option("--text", help="Specimen template source")
@click.option(
    "--text-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the specimen template from a file",
)
@click.option(
    "--font-dir",
    "font_dirs",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Scan this directory instead of the system font directories",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to a YAML file of option defaults",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.version_option(__version__, prog_name="fv", message="%(prog)s %(version)s")
def cli(
    fonts,
    show_all,
    list_fonts,
    match_only,
    fg,
    bg,
    size,
    margin,
    dpi,
    style,
    variant,
    text,
    text_file,
    font_dirs,
    config_path,
    verbose,
):
    """fv, a font viewer tool.

    Renders FONT (a family name, font file or directory of fonts) to the
    terminal using the Kitty, iTerm2 or Sixel graphics protocol.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        check_modes(show_all, list_fonts, match_only, bool(fonts))
    except ModeConflictError as e:
        raise click.UsageError(str(e)) from e
    if text is not None and text_file is not None:
        raise click.UsageError("--text and --text-file are mutually exclusive")
    if text_file is not None:
        text = text_file.read_text(encoding="utf-8")

    try:
        config = AppConfig.from_yaml(config_path) if config_path else AppConfig()
    except ConfigurationError as e:
        logger.error(f"error: {e}")
        sys.exit(1)
    except ValidationError as e:
        raise click.UsageError(f"invalid configuration: {e}") from e

    try:
        params = config.render_params(
            fg=fg,
            bg=bg,
            size=size,
            margin=margin,
            dpi=dpi,
            style=style,
            variant=variant,
            text=text,
        )
    except ValidationError as e:
        raise click.UsageError(f"invalid configuration: {e}") from e
    font_dirs = list(font_dirs) or config.font_dirs

    if list_fonts:
        click.echo(format_list(build_catalog(font_dirs)))
        return
    if match_only:
        click.echo(format_match(list(fonts), params, build_catalog(font_dirs)))
        return

    try:
        renderer = SpecimenRenderer.create(params, Negotiator().protocol)
    except (CapabilityError, TemplateSyntaxError) as e:
        logger.error(f"error: {e}")
        sys.exit(1)

    if show_all:
        items = all_fonts(build_catalog(font_dirs))
    else:
        catalog = FontCatalog() if _all_paths(fonts) else build_catalog(font_dirs)
        items = collect_fonts(list(fonts), params, catalog)

    stream = sys.stdout.buffer
    failures = write_outcomes(stream, renderer.render_each(items))
    if failures:
        logger.info(f"{failures} of {len(items)} fonts failed")


def main():
    """Console script entry point."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    cli()
