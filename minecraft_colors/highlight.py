"""Document highlighting: resolve every line into ranges grouped by style."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .config import ConfigError, ParserSettings, validate_config
from .exceptions import HighlightError, LineTooLongError
from .filesystem import safe_read
from .models import LineRange
from .resolver import resolve_ranges
from .scanner import scan

logger = logging.getLogger(__name__)


def enforce_line_length(lines: Iterable[str], max_line_length: int) -> None:
    """Raise `LineTooLongError` for the first line longer than the limit."""
    for line_number, line in enumerate(lines):
        if len(line) > max_line_length:
            raise LineTooLongError(line_number + 1, max_line_length)


def highlight_lines(
    lines: Iterable[str],
    settings: ParserSettings | None = None,
    max_line_length: int | None = None,
) -> dict[str, list[LineRange]]:
    """Resolve each line independently and group the ranges by style key.

    Style never carries over from one line to the next.

    Args:
        lines: Lines of the document, without line endings.
        settings: Settings controlling recognition and scope heuristics.
            Defaults to a new `ParserSettings` when omitted.
        max_line_length: Optional override for the maximum allowed line
            length.

    Returns:
        dict[str, list[LineRange]]: Ranges keyed by canonical style key, keys
            in first-seen order.

    Raises:
        ConfigError: If the settings fail validation.
        LineTooLongError: If a line exceeds the maximum length.

    Examples:
        highlight_lines(["&aReady", "<red>Stop</red>"])
    """
    settings = settings or ParserSettings()
    validate_config(settings)
    effective_max_line_length = (
        settings.max_line_length if max_line_length is None else max_line_length
    )

    lines = list(lines)
    enforce_line_length(lines, effective_max_line_length)

    grouped: dict[str, list[LineRange]] = {}
    for line_number, line in enumerate(lines):
        for styled_range in resolve_ranges(line, scan(line, settings), settings):
            grouped.setdefault(styled_range.style.key, []).append(
                LineRange(line_number, styled_range.start, styled_range.end)
            )

    logger.debug("Resolved %d lines into %d styles", len(lines), len(grouped))
    return grouped


def highlight_document(
    content: str,
    settings: ParserSettings | None = None,
    max_line_length: int | None = None,
) -> dict[str, list[LineRange]]:
    """Highlight a whole text; see `highlight_lines`."""
    return highlight_lines(content.splitlines(), settings, max_line_length)


class HighlightFileError(Exception):
    """Raised when highlighting a file fails."""


def read_lines(filepath: Path) -> list[str]:
    """Read a UTF-8 text file as lines without line endings.

    Raises:
        HighlightFileError: If the file cannot be read or decoded.
    """
    try:
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise HighlightFileError(error_message) from error
    except IOError as error:
        raise HighlightFileError(str(error)) from error

    return content.splitlines()


def highlight_file(
    filepath: Path,
    settings: ParserSettings | None = None,
    max_line_length: int | None = None,
) -> dict[str, list[LineRange]]:
    """Highlight a file on disk.

    Args:
        filepath: Path to the text file to highlight.
        settings: Settings controlling highlighting; defaults to a new
            `ParserSettings` when omitted.
        max_line_length: Optional override for the maximum allowed line length.

    Returns:
        dict[str, list[LineRange]]: Ranges keyed by canonical style key.

    Raises:
        HighlightFileError: If settings are invalid, the file cannot be read
            or decoded, or a line exceeds the maximum length.

    Examples:
        highlight_file(Path("messages.yml"), settings)
    """
    settings = settings or ParserSettings()
    try:
        validate_config(settings)
    except ConfigError as error:
        raise HighlightFileError(str(error)) from error

    effective_max_line_length = (
        settings.max_line_length if max_line_length is None else max_line_length
    )
    if effective_max_line_length <= 0:
        raise HighlightFileError("`max_line_length` override must be a positive integer")

    lines = read_lines(filepath)

    try:
        return highlight_lines(lines, settings, effective_max_line_length)
    except LineTooLongError as error:
        error_message = (
            f"{filepath} contains a line at line {error.line_number} "
            f"exceeding the maximum allowed length of {error.max_line_length} characters."
        )
        raise HighlightFileError(error_message) from error
    except HighlightError as error:
        raise HighlightFileError(f"{filepath}: {error}") from error
