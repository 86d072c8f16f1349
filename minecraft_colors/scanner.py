"""Markup scanning for legacy codes and MiniMessage tags."""

from __future__ import annotations

import re
from collections.abc import Mapping

from .config import DEFAULT_SETTINGS, ParserSettings
from .constants import (
    CLOSE_COLOR,
    GRADIENT_TAG,
    LEGACY_COLORS,
    LEGACY_FORMATS,
    MINI_MESSAGE_COLORS,
    MINI_MESSAGE_FORMATS,
)
from .models import FormatKind, StyleMatch

LEGACY_PATTERN = re.compile(r"&([0-9a-fklmnor])", re.IGNORECASE)
LEGACY_HEX_PATTERN = re.compile(r"&#([0-9a-f]{6})", re.IGNORECASE)
GRADIENT_PATTERN = re.compile(r"<gradient:(#[0-9a-f]{6}(?::#[0-9a-f]{6})*)>", re.IGNORECASE)
GRADIENT_CLOSE_PATTERN = re.compile(r"</gradient>", re.IGNORECASE)
MINI_HEX_PATTERN = re.compile(r"<#([0-9a-f]{6})>", re.IGNORECASE)
MINI_HEX_CLOSE_PATTERN = re.compile(r"</(#[0-9a-f]{6}|[a-z_]+)>", re.IGNORECASE)
MINI_TAG_PATTERN = re.compile(r"<([a-z_]+)>", re.IGNORECASE)
MINI_CLOSE_PATTERN = re.compile(r"</([a-z_]+)>", re.IGNORECASE)

_HEX_VALUE_PATTERN = re.compile(r"^#[0-9a-f]{6}$", re.IGNORECASE)


def resolve_variable(value: str) -> tuple[str | None, FormatKind | None]:
    """Resolve a custom variable value to the color or format it stands for.

    Accepted values are ``#RRGGBB``, a named color, a format keyword, a legacy
    code such as ``&c`` or ``&#RRGGBB``, each optionally wrapped in ``<...>``.

    Args:
        value: Markup value assigned to the variable.

    Returns:
        tuple[str | None, FormatKind | None]: The color or the format the
            value resolves to; ``(None, None)`` when it resolves to nothing.

    Examples:
        resolve_variable("<gold>")  # ("#FFAA00", None)
        resolve_variable("&l")  # (None, FormatKind.BOLD)
    """
    token = value.strip()
    if token.startswith("<") and token.endswith(">"):
        token = token[1:-1]
    lowered = token.lower()

    if _HEX_VALUE_PATTERN.match(token):
        return token, None
    if lowered in MINI_MESSAGE_COLORS:
        return MINI_MESSAGE_COLORS[lowered], None
    if lowered in MINI_MESSAGE_FORMATS:
        return None, MINI_MESSAGE_FORMATS[lowered]
    if len(lowered) == 2 and lowered[0] == "&":
        code = lowered[1]
        if code in LEGACY_COLORS:
            return LEGACY_COLORS[code], None
        if code in LEGACY_FORMATS:
            return None, LEGACY_FORMATS[code]
    if lowered.startswith("&#") and _HEX_VALUE_PATTERN.match(token[1:]):
        return token[1:], None
    return None, None


def _variable_formats(variables: Mapping[str, str]) -> dict[str, FormatKind]:
    formats = {}
    for name, value in variables.items():
        name = name.lower()
        if name in MINI_MESSAGE_COLORS or name in MINI_MESSAGE_FORMATS:
            continue
        _, format_kind = resolve_variable(value)
        if format_kind is not None:
            formats[name] = format_kind
    return formats


def _variable_colors(variables: Mapping[str, str]) -> dict[str, str]:
    colors = {}
    for name, value in variables.items():
        name = name.lower()
        if name in MINI_MESSAGE_COLORS or name in MINI_MESSAGE_FORMATS:
            continue
        color, _ = resolve_variable(value)
        if color is not None:
            colors[name] = color
    return colors


def _scan_legacy(line: str, settings: ParserSettings) -> list[StyleMatch]:
    matches = []
    for match in LEGACY_PATTERN.finditer(line):
        code = match.group(1).lower()
        if code in LEGACY_COLORS and settings.legacy_colors:
            matches.append(
                StyleMatch(match.start(), len(match.group(0)), color=LEGACY_COLORS[code])
            )
        elif code in LEGACY_FORMATS and settings.legacy_formatting:
            matches.append(
                StyleMatch(match.start(), len(match.group(0)), format=LEGACY_FORMATS[code])
            )
    return matches


def _scan_legacy_hex(line: str) -> list[StyleMatch]:
    return [
        StyleMatch(match.start(), len(match.group(0)), color=f"#{match.group(1)}")
        for match in LEGACY_HEX_PATTERN.finditer(line)
    ]


def _scan_gradients(line: str) -> list[StyleMatch]:
    matches = []
    for match in GRADIENT_PATTERN.finditer(line):
        colors = tuple(color.lower() for color in match.group(1).split(":"))
        matches.append(
            StyleMatch(match.start(), len(match.group(0)), is_mini_message=True, gradient=colors)
        )
    for match in GRADIENT_CLOSE_PATTERN.finditer(line):
        matches.append(
            StyleMatch(
                match.start(),
                len(match.group(0)),
                is_closing_tag=True,
                is_mini_message=True,
                gradient=(),
            )
        )
    return matches


def _scan_mini_hex(line: str, variable_formats: Mapping[str, FormatKind]) -> list[StyleMatch]:
    matches = [
        StyleMatch(
            match.start(), len(match.group(0)), is_mini_message=True, color=f"#{match.group(1)}"
        )
        for match in MINI_HEX_PATTERN.finditer(line)
    ]

    # Any closing tag that is not a format or a gradient closes a color.
    for match in MINI_HEX_CLOSE_PATTERN.finditer(line):
        tag_name = match.group(1).lower()
        if tag_name in MINI_MESSAGE_FORMATS or tag_name == GRADIENT_TAG:
            continue
        if tag_name in variable_formats:
            continue
        matches.append(
            StyleMatch(
                match.start(),
                len(match.group(0)),
                is_closing_tag=True,
                is_mini_message=True,
                color=CLOSE_COLOR,
            )
        )
    return matches


def _scan_named_tags(
    line: str,
    settings: ParserSettings,
    variable_colors: Mapping[str, str],
    variable_formats: Mapping[str, FormatKind],
) -> list[StyleMatch]:
    matches = []
    for match in MINI_TAG_PATTERN.finditer(line):
        tag_name = match.group(1).lower()
        color = MINI_MESSAGE_COLORS.get(tag_name)
        format_kind = MINI_MESSAGE_FORMATS.get(tag_name)
        if color is None and format_kind is None:
            color = variable_colors.get(tag_name)
            format_kind = variable_formats.get(tag_name)

        if color is not None and settings.mini_message_colors:
            matches.append(
                StyleMatch(match.start(), len(match.group(0)), is_mini_message=True, color=color)
            )
        elif format_kind is not None and settings.mini_message_formatting:
            matches.append(
                StyleMatch(
                    match.start(), len(match.group(0)), is_mini_message=True, format=format_kind
                )
            )
    return matches


def _scan_format_closes(
    line: str, variable_formats: Mapping[str, FormatKind]
) -> list[StyleMatch]:
    matches = []
    for match in MINI_CLOSE_PATTERN.finditer(line):
        tag_name = match.group(1).lower()
        format_kind = MINI_MESSAGE_FORMATS.get(tag_name) or variable_formats.get(tag_name)
        if format_kind is None:
            continue
        matches.append(
            StyleMatch(
                match.start(),
                len(match.group(0)),
                is_closing_tag=True,
                is_mini_message=True,
                format=format_kind,
            )
        )
    return matches


def scan(line: str, settings: ParserSettings | None = None) -> list[StyleMatch]:
    """Tokenize one line into the style matches of every enabled dialect.

    Categories are scanned in a fixed order (legacy codes, legacy hex,
    gradients, MiniMessage hex colors and color closes, named colors and
    formats, format closes), merged, then stably sorted by start index so
    ties keep that order. Text that matches no enabled grammar produces no
    match and stays literal.

    Args:
        line: A single line of text, without its line ending.
        settings: Feature gates and custom variables. Defaults to
            `DEFAULT_SETTINGS` when omitted.

    Returns:
        list[StyleMatch]: Matches ordered by `start_index`.

    Examples:
        scan("&cHello <bold>World</bold>")
    """
    settings = settings or DEFAULT_SETTINGS
    variables = settings.custom_variables or {}
    variable_colors = _variable_colors(variables)
    variable_formats = _variable_formats(variables)

    matches: list[StyleMatch] = []

    if settings.legacy_enabled:
        matches.extend(_scan_legacy(line, settings))

    if settings.legacy_hex_enabled:
        matches.extend(_scan_legacy_hex(line))

    if settings.mini_message_enabled:
        if settings.mini_message_gradients:
            matches.extend(_scan_gradients(line))

        if settings.mini_message_colors:
            matches.extend(_scan_mini_hex(line, variable_formats))

        matches.extend(_scan_named_tags(line, settings, variable_colors, variable_formats))

        if settings.mini_message_formatting:
            matches.extend(_scan_format_closes(line, variable_formats))

    matches.sort(key=lambda match: match.start_index)
    return matches
