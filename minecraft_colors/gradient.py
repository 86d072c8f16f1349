"""Linear RGB interpolation across gradient stop colors."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """Decode a ``#RRGGBB`` color; anything else decodes to black."""
    match = HEX_COLOR_PATTERN.match(color)
    if not match:
        return (0, 0, 0)
    red, green, blue = (int(channel, 16) for channel in match.groups())
    return (red, green, blue)


def rgb_to_hex(red: float, green: float, blue: float) -> str:
    """Encode channels as lowercase ``#rrggbb``, rounding half up."""
    return "#" + "".join(f"{_round_channel(channel):02x}" for channel in (red, green, blue))


def _round_channel(value: float) -> int:
    # Half-up rounding; `round` would round half to even.
    return math.floor(value + 0.5)


def interpolate_color(start: str, end: str, factor: float) -> str:
    """Blend two colors channel by channel.

    Args:
        start: Color at ``factor == 0``.
        end: Color at ``factor == 1``.
        factor: Position between the two colors.

    Returns:
        str: Interpolated color as ``#rrggbb``.

    Examples:
        interpolate_color("#000000", "#ffffff", 0.5)  # "#808080"
    """
    start_rgb = hex_to_rgb(start)
    end_rgb = hex_to_rgb(end)
    return rgb_to_hex(
        *(low + (high - low) * factor for low, high in zip(start_rgb, end_rgb))
    )


def gradient_color(colors: Sequence[str], position: int, total: int) -> str | None:
    """Color of the character at `position` in a gradient of `total` characters.

    The ``[0, total - 1]`` position range is split into ``len(colors) - 1``
    equal segments, and the color is interpolated linearly inside the
    segment the position falls into. A single stop, or a gradient of at most
    one character, is a flat fill of the first color.

    Args:
        colors: Gradient stop colors, in order.
        position: Zero-based index of the visible character.
        total: Number of visible characters covered by the gradient.

    Returns:
        str | None: Color for the character, or None when `colors` is empty.

    Examples:
        gradient_color(["#ff0000", "#0000ff"], 0, 2)  # "#ff0000"
        gradient_color(["#ff0000", "#0000ff"], 1, 2)  # "#0000ff"
        gradient_color(["#000000", "#ffffff"], 1, 3)  # "#808080"
    """
    if not colors:
        return None
    if len(colors) == 1 or total <= 1:
        return colors[0]

    segment = (len(colors) - 1) * (position / (total - 1))
    index = math.floor(segment)
    factor = segment - index

    if index >= len(colors) - 1:
        return colors[-1]
    if factor == 0:
        return colors[index]
    return interpolate_color(colors[index], colors[index + 1], factor)
