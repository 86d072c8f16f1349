"""Plain-text heuristics that narrow where a legacy code stops applying."""

from __future__ import annotations

from .config import ParserSettings
from .models import StyleMatch

BACKTICK = "`"
TEMPLATE_EXPRESSION = "${"
QUOTES = ("\"", "'")


def is_escaped(text: str, pos: int) -> bool:
    """Determine whether a character is escaped by preceding backslashes.

    Counts consecutive backslashes immediately before `pos`; an odd count marks
    the character as escaped.

    Args:
        text: Text containing the character.
        pos: Zero-based index of the character to inspect.

    Returns:
        bool: True when the character is escaped, otherwise False.

    Examples:
        is_escaped("\\\\'", 2)  # False, two backslashes
        is_escaped("\\'", 1)  # True, one backslash
    """
    if pos == 0:
        return False

    # Count consecutive backslashes before pos
    backslash_count = 0
    i = pos - 1
    while i >= 0 and text[i] == "\\":
        backslash_count += 1
        i -= 1

    # Odd number of backslashes means the character is escaped
    return backslash_count % 2 == 1


def inside_backticks(line: str, index: int) -> bool:
    """Whether `index` sits inside a backtick span.

    Parity is the number of backticks between the start of the line and
    `index`; an odd count means a span is open.

    Examples:
        inside_backticks("`&c`", 1)  # True
        inside_backticks("&c`code`", 0)  # False
    """
    return line.count(BACKTICK, 0, index) % 2 == 1


def open_quote_at(line: str, index: int) -> str | None:
    """Return the quote character of the string `index` sits in, if any.

    A quote opens a string when no other string is open; only the same,
    unescaped quote character closes it.

    Args:
        line: Line being scanned.
        index: Offset to inspect.

    Returns:
        str | None: ``'"'`` or ``"'"`` when inside a quoted string, else None.

    Examples:
        open_quote_at('say("&cHi")', 5)  # '"'
    """
    quote = None
    for pos in range(index):
        character = line[pos]
        if character not in QUOTES or is_escaped(line, pos):
            continue
        if quote is None:
            quote = character
        elif character == quote:
            quote = None
    return quote


def _find_closing_quote(line: str, quote: str, start: int, end: int) -> int:
    pos = line.find(quote, start, end)
    while pos != -1 and is_escaped(line, pos):
        pos = line.find(quote, pos + 1, end)
    return pos


def scope_end(
    line: str, match: StyleMatch, boundary: int, settings: ParserSettings
) -> int:
    """Narrow the end of a legacy code's effect.

    The default end is `boundary` (next match start or end of line). It is
    narrowed, in order, by the first backtick, by the first ``${`` when
    template expressions stop scopes, and by the closing quote of the string
    the code sits in.

    Args:
        line: Line being resolved.
        match: Legacy match whose scope is computed.
        boundary: Default end offset, exclusive.
        settings: Settings providing the template-expression switch.

    Returns:
        int: Narrowed end offset, never before the end of `match`.

    Examples:
        scope_end('"&cRed" + name', StyleMatch(1, 2, color="#FF5555"), 14, settings)  # 6
    """
    start = match.end_index
    end = boundary

    backtick = line.find(BACKTICK, start, end)
    if backtick != -1:
        end = backtick

    if settings.stop_at_template_expressions:
        template = line.find(TEMPLATE_EXPRESSION, start, end)
        if template != -1:
            end = template

    quote = open_quote_at(line, match.start_index)
    if quote is not None:
        closing = _find_closing_quote(line, quote, start, end)
        if closing != -1:
            end = closing

    return max(end, start)


def drop_backtick_matches(line: str, matches: list[StyleMatch]) -> list[StyleMatch]:
    """Remove matches whose start lies inside a backtick span."""
    return [match for match in matches if not inside_backticks(line, match.start_index)]


def gradient_auto_close(line: str, start: int, stop_at_backtick: bool) -> int:
    """End offset for a gradient left open at the end of the line."""
    if stop_at_backtick:
        backtick = line.find(BACKTICK, start)
        if backtick != -1:
            return backtick
    return len(line)
