"""Preview rendering of resolved segments as SVG images or terminal text."""

from __future__ import annotations

import base64
import html
import random
from collections.abc import Sequence

import click

from .config import DEFAULT_SETTINGS, ParserSettings
from .constants import (
    OBFUSCATED_GLYPHS,
    PREVIEW_BACKGROUND,
    PREVIEW_CHAR_HEIGHT,
    PREVIEW_CHAR_WIDTH,
    PREVIEW_DEFAULT_COLOR,
    PREVIEW_FONT_SIZE,
    PREVIEW_PADDING,
)
from .gradient import hex_to_rgb
from .models import StyledSegment, TextStyle
from .resolver import resolve


def styled_lines(text: str, settings: ParserSettings | None = None) -> list[list[StyledSegment]]:
    """Resolve every line of `text` independently into segments."""
    settings = settings or DEFAULT_SETTINGS
    return [resolve(line, settings=settings) for line in text.splitlines()]


def obfuscate(text: str, rng: random.Random | None = None) -> str:
    """Replace every character with a random glyph; new glyphs on every call."""
    rng = rng or random
    return "".join(rng.choice(OBFUSCATED_GLYPHS) for _ in text)


def text_decoration(style: TextStyle | StyledSegment) -> str:
    """CSS ``text-decoration`` value for the underline and strikethrough flags."""
    if style.underline and style.strikethrough:
        return "underline line-through"
    if style.underline:
        return "underline"
    if style.strikethrough:
        return "line-through"
    return ""


def _svg_text(segment: StyledSegment, x_pos: int, y_pos: int, rng: random.Random | None) -> str:
    display_text = obfuscate(segment.text, rng) if segment.obfuscated else segment.text
    decoration = text_decoration(segment)
    attributes = [
        f'x="{x_pos}"',
        f'y="{y_pos}"',
        f'fill="{segment.color or PREVIEW_DEFAULT_COLOR}"',
        'font-family="monospace"',
        f'font-size="{PREVIEW_FONT_SIZE}"',
        f'font-weight="{"bold" if segment.bold else "normal"}"',
        f'font-style="{"italic" if segment.italic else "normal"}"',
    ]
    if decoration:
        attributes.append(f'text-decoration="{decoration}"')
    return f"<text {' '.join(attributes)}>{html.escape(display_text, quote=True)}</text>"


def render_svg(lines: Sequence[Sequence[StyledSegment]], rng: random.Random | None = None) -> str:
    """Render resolved lines as a fixed-font SVG image.

    The image is sized from the visible character count of the longest line
    and the number of lines.

    Args:
        lines: Segments of each line, as returned by `styled_lines`.
        rng: Random source for obfuscated glyphs.

    Returns:
        str: SVG document, or ``""`` when there is nothing to render.
    """
    if not lines:
        return ""

    widest = max(sum(len(segment.text) for segment in line) for line in lines)
    width = widest * PREVIEW_CHAR_WIDTH + PREVIEW_PADDING * 2
    height = len(lines) * PREVIEW_CHAR_HEIGHT + PREVIEW_PADDING * 2

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}">',
        f'<rect width="100%" height="100%" fill="{PREVIEW_BACKGROUND}" rx="4"/>',
    ]
    for row, line in enumerate(lines):
        x_pos = PREVIEW_PADDING
        y_pos = PREVIEW_PADDING + (row + 1) * PREVIEW_CHAR_HEIGHT - 4
        for segment in line:
            if not segment.text:
                continue
            parts.append(_svg_text(segment, x_pos, y_pos, rng))
            x_pos += len(segment.text) * PREVIEW_CHAR_WIDTH
    parts.append("</svg>")
    return "".join(parts)


def generate_preview_svg(
    text: str, settings: ParserSettings | None = None, rng: random.Random | None = None
) -> str:
    """Render marked-up text as an SVG preview.

    Args:
        text: Text to preview; each line is resolved independently.
        settings: Settings used for scanning. Defaults to `DEFAULT_SETTINGS`.
        rng: Random source for obfuscated glyphs.

    Returns:
        str: SVG document, or ``""`` for empty text.

    Examples:
        generate_preview_svg("<gradient:#ff0000:#0000ff>Rainbow</gradient>")
    """
    return render_svg(styled_lines(text, settings), rng)


def generate_preview_data_uri(
    text: str, settings: ParserSettings | None = None, rng: random.Random | None = None
) -> str:
    """Render an SVG preview as a base64 ``data:`` URI, or ``""`` for empty text."""
    svg = generate_preview_svg(text, settings, rng)
    if not svg:
        return ""
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


def style_segment(segment: StyledSegment, rng: random.Random | None = None) -> str:
    """Render one segment with terminal escape sequences."""
    display_text = obfuscate(segment.text, rng) if segment.obfuscated else segment.text
    if segment.style.is_plain:
        return display_text
    return click.style(
        display_text,
        fg=hex_to_rgb(segment.color) if segment.color else None,
        bold=segment.bold or None,
        italic=segment.italic or None,
        underline=segment.underline or None,
        strikethrough=segment.strikethrough or None,
    )


def render_ansi(
    text: str, settings: ParserSettings | None = None, rng: random.Random | None = None
) -> str:
    """Render marked-up text for a 24-bit color terminal, one output line per input line."""
    return "\n".join(
        "".join(style_segment(segment, rng) for segment in line)
        for line in styled_lines(text, settings)
    )
