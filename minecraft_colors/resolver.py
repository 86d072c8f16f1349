"""Style resolution: walk scanned matches and emit styled output."""

from __future__ import annotations

from collections.abc import Sequence

from .config import DEFAULT_SETTINGS, ParserSettings
from .constants import CLOSE_COLOR
from .gradient import gradient_color
from .models import (
    ActiveGradient,
    FormatKind,
    GradientRange,
    StyledRange,
    StyledSegment,
    StyleMatch,
    StyleState,
    TextStyle,
)
from .scanner import scan
from .scope import drop_backtick_matches, gradient_auto_close, scope_end

Span = tuple[int, int, TextStyle]


def _gradient_range(state: StyleState, start: int, end: int) -> GradientRange:
    return GradientRange(
        start,
        end,
        state.gradient.colors,
        bold=state.bold,
        italic=state.italic,
        underline=state.underline,
        strikethrough=state.strikethrough,
        obfuscated=state.obfuscated,
    )


def _flush_gradient(gradient: ActiveGradient, end: int, spans: list[Span]) -> None:
    """Emit one span per visible character of a gradient body.

    Nested tags are not part of `gradient.ranges`, so the gradient position
    is the index among visible characters, not the offset in the line.
    """
    ranges = [
        (grad_range.start_index, min(grad_range.end_index, end), grad_range.style)
        for grad_range in gradient.ranges
        if grad_range.start_index < end
    ]
    total = sum(range_end - range_start for range_start, range_end, _ in ranges)

    position = 0
    for range_start, range_end, style in ranges:
        for offset in range(range_start, range_end):
            color = gradient_color(gradient.colors, position, total)
            spans.append((offset, offset + 1, style.with_color(color)))
            position += 1


def _flush_plain(gradient: ActiveGradient, spans: list[Span]) -> None:
    for grad_range in gradient.ranges:
        spans.append((grad_range.start_index, grad_range.end_index, grad_range.style))


def _apply_match(state: StyleState, match: StyleMatch, spans: list[Span]) -> None:
    """Apply one match to the style state.

    Args:
        state: Line-local state to mutate.
        match: Match being applied.
        spans: Output spans; receives the body of a gradient closed or
            abandoned by this match.
    """
    if match.format is FormatKind.RESET:
        # Text already collected by an open gradient stays visible, uncolored.
        if state.gradient is not None:
            _flush_plain(state.gradient, spans)
        state.reset()
        return

    if match.gradient is not None:
        if match.is_closing_tag:
            if state.gradient is not None:
                _flush_gradient(state.gradient, match.start_index, spans)
                state.gradient = None
            state.pop_color()
            return
        if state.gradient is not None:
            _flush_gradient(state.gradient, match.start_index, spans)
        state.push_color(None)
        state.gradient = ActiveGradient(match.gradient, match.end_index)
        return

    if match.color == CLOSE_COLOR:
        state.pop_color()
    elif match.color is not None:
        state.push_color(match.color)
    elif match.format is not None:
        state.set_format(match.format, not match.is_closing_tag)


def _walk(
    line: str,
    matches: Sequence[StyleMatch],
    settings: ParserSettings,
    live: bool,
) -> list[Span]:
    """Resolve a line into ordered ``(start, end, style)`` spans.

    Args:
        line: Line being resolved.
        matches: Matches ordered by start index.
        settings: Settings used by the scope heuristics.
        live: Whether to apply the live-highlighting scope heuristics.

    Returns:
        list[Span]: Non-empty spans in line order, markup excluded.
    """
    spans: list[Span] = []
    state = StyleState()

    if matches[0].start_index > 0:
        spans.append((0, matches[0].start_index, TextStyle()))

    for index, match in enumerate(matches):
        _apply_match(state, match, spans)

        start = match.end_index
        end = matches[index + 1].start_index if index + 1 < len(matches) else len(line)

        if state.gradient is not None:
            if end > start:
                state.gradient.ranges.append(_gradient_range(state, start, end))
            continue

        if live and not match.is_mini_message:
            end = scope_end(line, match, end, settings)

        if end > start:
            spans.append((start, end, state.snapshot()))

    if state.gradient is not None:
        close_at = gradient_auto_close(line, state.gradient.start_index, stop_at_backtick=live)
        _flush_gradient(state.gradient, close_at, spans)

    return spans


def resolve(
    line: str,
    matches: Sequence[StyleMatch] | None = None,
    settings: ParserSettings | None = None,
) -> list[StyledSegment]:
    """Resolve a line into styled text segments for preview rendering.

    Tags and legacy codes are removed from the output. Gradient bodies are
    emitted one segment per visible character, each with its interpolated
    color. A line without matches yields one unstyled segment holding the
    whole line.

    Args:
        line: A single line of text.
        matches: Matches from `scan`; the line is scanned when omitted.
        settings: Settings used for scanning. Defaults to `DEFAULT_SETTINGS`.

    Returns:
        list[StyledSegment]: Segments in line order.

    Examples:
        resolve("&cHello &9World")
        # [StyledSegment("Hello ", "#FF5555"), StyledSegment("World", "#5555FF")]
    """
    settings = settings or DEFAULT_SETTINGS
    if matches is None:
        matches = scan(line, settings)
    if not matches:
        return [StyledSegment(line)]

    return [
        StyledSegment.from_style(line[start:end], style)
        for start, end, style in _walk(line, matches, settings, live=False)
    ]


def resolve_ranges(
    line: str,
    matches: Sequence[StyleMatch] | None = None,
    settings: ParserSettings | None = None,
) -> list[StyledRange]:
    """Resolve a line into styled character ranges for live highlighting.

    Only ranges that carry a color or a format are returned. Markup stays in
    place and is not restyled; a legacy code's range ends early at a
    backtick, a template expression (when enabled) or the end of the quoted
    string it sits in. With `highlight_in_backticks` disabled, matches inside
    backtick spans are ignored.

    Args:
        line: A single line of text.
        matches: Matches from `scan`; the line is scanned when omitted.
        settings: Settings for scanning and the scope heuristics. Defaults to
            `DEFAULT_SETTINGS`.

    Returns:
        list[StyledRange]: Ranges in line order.

    Examples:
        resolve_ranges("<red>Hi</red>")
        # [StyledRange(5, 7, TextStyle("#FF5555"))]
    """
    settings = settings or DEFAULT_SETTINGS
    if matches is None:
        matches = scan(line, settings)
    if not settings.highlight_in_backticks:
        matches = drop_backtick_matches(line, list(matches))
    if not matches:
        return []

    return [
        StyledRange(start, end, style)
        for start, end, style in _walk(line, matches, settings, live=True)
        if not style.is_plain
    ]


def group_ranges(ranges: Sequence[StyledRange]) -> dict[str, list[tuple[int, int]]]:
    """Group ranges by canonical style key, keys in first-seen order."""
    grouped: dict[str, list[tuple[int, int]]] = {}
    for styled_range in ranges:
        grouped.setdefault(styled_range.style.key, []).append(
            (styled_range.start, styled_range.end)
        )
    return grouped
