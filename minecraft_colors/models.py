"""Data models for minecraft-colors."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

FORMAT_FLAGS = ("bold", "italic", "underline", "strikethrough", "obfuscated")


class FormatKind(Enum):
    """Formatting directives understood by both markup dialects.

    Attributes:
        BOLD: Bold text (``&l``, ``<bold>``, ``<b>``).
        ITALIC: Italic text (``&o``, ``<italic>``, ``<em>``, ``<i>``).
        UNDERLINE: Underlined text (``&n``, ``<underlined>``, ``<u>``).
        STRIKETHROUGH: Struck-through text (``&m``, ``<strikethrough>``, ``<st>``).
        OBFUSCATED: Scrambled text (``&k``, ``<obfuscated>``, ``<obf>``).
        RESET: Clears every color and format (``&r``, ``<reset>``).
    """

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"
    OBFUSCATED = "obfuscated"
    RESET = "reset"


@dataclass(frozen=True)
class StyleMatch:
    """One recognized markup token on a line.

    Exactly one of `color`, `format` or `gradient` is set. A generic color
    close carries ``color == "close"``; a gradient close carries an empty
    `gradient` tuple.

    Attributes:
        start_index: Zero-based offset of the token in the line.
        match_length: Number of characters covered by the token.
        is_closing_tag: Whether the token closes a scope (``</...>``).
        is_mini_message: Whether the token uses the tag dialect.
        color: Hex color opened by the token, or ``"close"``.
        format: Formatting directive opened or closed by the token.
        gradient: Gradient stop colors, empty for a gradient close.
    """

    start_index: int
    match_length: int
    is_closing_tag: bool = False
    is_mini_message: bool = False
    color: str | None = None
    format: FormatKind | None = None
    gradient: tuple[str, ...] | None = None

    @property
    def end_index(self) -> int:
        return self.start_index + self.match_length


@dataclass(frozen=True)
class TextStyle:
    """Resolved style in effect at a point in a line."""

    color: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    obfuscated: bool = False

    @property
    def is_plain(self) -> bool:
        return not self.color and not any(getattr(self, flag) for flag in FORMAT_FLAGS)

    @property
    def key(self) -> str:
        return style_key(self)

    def with_color(self, color: str | None) -> TextStyle:
        return TextStyle(color, *(getattr(self, flag) for flag in FORMAT_FLAGS))


def style_key(style: TextStyle) -> str:
    """Encode a style as a canonical string.

    The same `(color, bold, italic, underline, strikethrough, obfuscated)`
    tuple always yields the same key, so presentation layers can use it to
    cache rendering resources. An unset color is encoded as ``""``.

    Args:
        style: Style to encode.

    Returns:
        str: Compact JSON object with a fixed key order.

    Examples:
        style_key(TextStyle("#FF5555", bold=True))
        # '{"color":"#FF5555","bold":true,"italic":false,...}'
    """
    payload = {"color": style.color or ""}
    payload.update((flag, bool(getattr(style, flag))) for flag in FORMAT_FLAGS)
    return json.dumps(payload, separators=(",", ":"))


def parse_style_key(key: str) -> TextStyle:
    """Decode a key produced by `style_key` back into a `TextStyle`."""
    payload = json.loads(key)
    return TextStyle(
        payload.get("color") or None,
        *(bool(payload.get(flag, False)) for flag in FORMAT_FLAGS),
    )


@dataclass
class StyledSegment:
    """A maximal run of text sharing one resolved style.

    Attributes:
        text: Visible text of the run, markup removed.
        color: Hex color of the run, or None when uncolored.
        bold: Whether the run is bold.
        italic: Whether the run is italic.
        underline: Whether the run is underlined.
        strikethrough: Whether the run is struck through.
        obfuscated: Whether the run is obfuscated.
    """

    text: str
    color: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    obfuscated: bool = False

    @classmethod
    def from_style(cls, text: str, style: TextStyle) -> StyledSegment:
        return cls(text, style.color, *(getattr(style, flag) for flag in FORMAT_FLAGS))

    @property
    def style(self) -> TextStyle:
        return TextStyle(self.color, *(getattr(self, flag) for flag in FORMAT_FLAGS))


@dataclass
class StyledRange:
    """A styled character range ``[start, end)`` on one line."""

    start: int
    end: int
    style: TextStyle


@dataclass
class GradientRange:
    """Visible run inside a gradient body and the formatting applied to it.

    Nested format tags split a gradient body into several ranges; the
    per-character colors are later computed across all of them.

    Attributes:
        start_index: Offset of the first visible character of the run.
        end_index: Offset right after the last visible character of the run.
        colors: Gradient stop colors.
        bold: Bold flag in effect for the run.
        italic: Italic flag in effect for the run.
        underline: Underline flag in effect for the run.
        strikethrough: Strikethrough flag in effect for the run.
        obfuscated: Obfuscated flag in effect for the run.
    """

    start_index: int
    end_index: int
    colors: tuple[str, ...]
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    obfuscated: bool = False

    @property
    def style(self) -> TextStyle:
        return TextStyle(None, *(getattr(self, flag) for flag in FORMAT_FLAGS))


@dataclass
class ActiveGradient:
    """Gradient accumulator used while a gradient tag is open.

    Attributes:
        colors: Gradient stop colors.
        start_index: Offset right after the opening tag.
        ranges: Visible runs collected between nested tags.
    """

    colors: tuple[str, ...]
    start_index: int
    ranges: list[GradientRange] = field(default_factory=list)


@dataclass
class StyleState:
    """Line-local style state mutated match by match while resolving.

    Attributes:
        color: Current color, or None.
        bold: Current bold flag.
        italic: Current italic flag.
        underline: Current underline flag.
        strikethrough: Current strikethrough flag.
        obfuscated: Current obfuscated flag.
        color_stack: Outer colors restored when a nested scope closes.
        gradient: Open gradient accumulator, if any.
    """

    color: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    obfuscated: bool = False
    color_stack: list[str] = field(default_factory=list)
    gradient: ActiveGradient | None = None

    def push_color(self, color: str | None) -> None:
        if self.color:
            self.color_stack.append(self.color)
        self.color = color

    def pop_color(self) -> None:
        self.color = self.color_stack.pop() if self.color_stack else None

    def set_format(self, kind: FormatKind, value: bool) -> None:
        if kind is FormatKind.RESET:
            self.reset()
            return
        setattr(self, kind.value, value)

    def reset(self) -> None:
        self.color = None
        self.color_stack = []
        self.gradient = None
        for flag in FORMAT_FLAGS:
            setattr(self, flag, False)

    def snapshot(self) -> TextStyle:
        return TextStyle(self.color, *(getattr(self, flag) for flag in FORMAT_FLAGS))


class LineRange(NamedTuple):
    """Character range ``[start, end)`` on a zero-based document line."""

    line: int
    start: int
    end: int
