"""
Renders the color markup of a text file.
Outputs a terminal rendering, an SVG preview, resolved segments, or highlight ranges.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path

import click
from . import __version__
from .config import ConfigError, ParserSettings, build_config
from .exceptions import LineTooLongError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    get_max_line_length,
    normalize_filepath,
    write_output,
)
from .highlight import HighlightFileError, enforce_line_length, highlight_lines, read_lines
from .preview import generate_preview_svg, render_ansi
from .resolver import resolve

__all__ = ["cli"]

OUTPUT_FORMATS = ["ansi", "svg", "json", "ranges"]


def parse_variables(values: tuple[str, ...]) -> dict[str, str] | None:
    """Parse repeated ``NAME=VALUE`` options into a custom variable mapping.

    Raises:
        click.BadParameter: If an item has no ``=`` or an empty name.
    """
    if not values:
        return None
    variables = {}
    for item in values:
        name, separator, value = item.partition("=")
        if not separator or not name.strip():
            raise click.BadParameter(f"Expected NAME=VALUE, got {item!r}", param_hint="--var")
        variables[name.strip().lower()] = value.strip()
    return variables


def _render(
    output_format: str,
    selected: list[tuple[int, str]],
    all_lines: list[str],
    config: ParserSettings,
    max_line_length: int,
) -> str:
    text = "\n".join(line for _, line in selected)

    if output_format == "ansi":
        return render_ansi(text, config)

    if output_format == "svg":
        return generate_preview_svg(text, config)

    if output_format == "json":
        payload = [
            {
                "line": line_number,
                "segments": [asdict(segment) for segment in resolve(line, settings=config)],
            }
            for line_number, line in selected
        ]
        return json.dumps(payload, indent=2)

    wanted = {line_number for line_number, _ in selected}
    grouped = highlight_lines(all_lines, config, max_line_length)
    payload = {}
    for key, ranges in grouped.items():
        kept = [list(line_range) for line_range in ranges if line_range.line in wanted]
        if kept:
            payload[key] = kept
    return json.dumps(payload, indent=2)


@click.command()
@click.version_option(version=__version__, prog_name="minecraft-colors")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="ansi",
    show_default=True,
    help="Output format",
)
@click.option("--line", "line_number", type=int, help="Only render this line (one-based)")
@click.option(
    "--output", type=click.Path(dir_okay=False), help="Write the output to a file instead of stdout"
)
@click.option("--legacy/--no-legacy", default=None, help="Recognize & codes")
@click.option("--legacy-hex/--no-legacy-hex", default=None, help="Recognize &#RRGGBB codes")
@click.option("--mini-message/--no-mini-message", default=None, help="Recognize MiniMessage tags")
@click.option("--gradients/--no-gradients", default=None, help="Recognize gradient tags")
@click.option(
    "--highlight-in-backticks/--no-highlight-in-backticks",
    default=None,
    help="Highlight markup inside backtick spans",
)
@click.option(
    "--stop-at-template-expressions/--no-stop-at-template-expressions",
    default=None,
    help="End legacy code scopes at ${",
)
@click.option("--var", "variables", multiple=True, help="Custom tag variable (NAME=VALUE)")
@click.option("--color/--no-color", default=None, help="Force or disable terminal colors")
@click.option("--verbose", is_flag=True, help="Log debug information to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    output_format: str = "ansi",
    line_number: int | None = None,
    output: str | None = None,
    legacy: bool | None = None,
    legacy_hex: bool | None = None,
    mini_message: bool | None = None,
    gradients: bool | None = None,
    highlight_in_backticks: bool | None = None,
    stop_at_template_expressions: bool | None = None,
    variables: tuple[str, ...] = (),
    color: bool | None = None,
    verbose: bool = False,
):
    """
    Entry point for rendering the color markup of a text file.

    Args:
        filepath: Path to the text file to render.
        output_format: One of `ansi`, `svg`, `json` or `ranges`.
        line_number: One-based line to render instead of the whole file.
        output: Destination file; output goes to stdout when omitted.
        legacy: Override for recognizing legacy codes.
        legacy_hex: Override for recognizing legacy hex codes.
        mini_message: Override for recognizing MiniMessage tags.
        gradients: Override for recognizing gradient tags.
        highlight_in_backticks: Override for highlighting inside backticks.
        stop_at_template_expressions: Override for ending scopes at ``${``.
        variables: Custom tag variables as ``NAME=VALUE`` items.
        color: Force (True) or disable (False) terminal colors.
        verbose: Enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If CLI parameters reference invalid paths or lines,
            or contain invalid configuration values.
        click.ClickException: If limits are exceeded, the file cannot be read,
            or the output cannot be written.

    Examples:
        minecraft-colors messages.yml --format svg --line 3 --output preview.svg
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    base_dir = Path.cwd().resolve()
    try:
        filepath = normalize_filepath(filepath, base_dir)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(
            filepath.parent,
            legacy_enabled=legacy,
            legacy_hex_enabled=legacy_hex,
            mini_message_enabled=mini_message,
            mini_message_gradients=gradients,
            highlight_in_backticks=highlight_in_backticks,
            stop_at_template_expressions=stop_at_template_expressions,
            custom_variables=parse_variables(variables),
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
        max_line_length = get_max_line_length(default=config.max_line_length)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        file_stat = collect_file_stat(filepath)
        enforce_file_size(file_stat, max_file_size, filepath)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    try:
        lines = read_lines(filepath)
        enforce_line_length(lines, max_line_length)
    except HighlightFileError as error:
        raise click.ClickException(str(error)) from error
    except LineTooLongError as error:
        error_message = (
            f"{filepath} contains a line at line {error.line_number} "
            f"exceeding the maximum allowed length of {error.max_line_length} characters."
        )
        raise click.ClickException(error_message) from error

    selected = list(enumerate(lines))
    if line_number is not None:
        if not 1 <= line_number <= len(lines):
            raise click.BadParameter(
                f"{filepath} has {len(lines)} lines", param_hint="--line"
            )
        selected = [selected[line_number - 1]]

    rendered = _render(output_format, selected, lines, config, max_line_length)

    if output is None:
        click.echo(rendered, color=color)
        return

    try:
        write_output(
            Path(output).expanduser(),
            rendered + "\n",
            warn=lambda message: click.echo(message, err=True),
        )
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
