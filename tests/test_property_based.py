from __future__ import annotations

import string

from hypothesis import given
from hypothesis import strategies as st
from minecraft_colors.gradient import gradient_color, hex_to_rgb
from minecraft_colors.models import StyledSegment
from minecraft_colors.resolver import resolve, resolve_ranges
from minecraft_colors.scanner import scan

MARKUP_TOKENS = [
    "&c",
    "&9",
    "&l",
    "&o",
    "&r",
    "&#12ab34",
    "<red>",
    "</red>",
    "<#00ff00>",
    "</#00ff00>",
    "<bold>",
    "</bold>",
    "<i>",
    "<reset>",
    "<gradient:#ff0000:#0000ff>",
    "<gradient:#000000:#00ff00:#ffffff>",
    "</gradient>",
    "`",
    "\"",
    "'",
    "${",
]

marked_up_lines = st.lists(
    st.one_of(
        st.sampled_from(MARKUP_TOKENS),
        st.text(alphabet=string.ascii_letters + " ", max_size=6),
    ),
    max_size=16,
).map("".join)


@given(st.text(alphabet=st.characters(exclude_characters="&<")))
def test_text_without_markup_is_one_plain_segment(line: str):
    assert scan(line) == []
    assert resolve(line) == [StyledSegment(line)]


@given(marked_up_lines)
def test_resolve_is_deterministic(line: str):
    assert resolve(line) == resolve(line)
    assert resolve_ranges(line) == resolve_ranges(line)


@given(marked_up_lines)
def test_matches_are_ordered(line: str):
    starts = [match.start_index for match in scan(line)]
    assert starts == sorted(starts)


@given(marked_up_lines)
def test_segments_never_exceed_line(line: str):
    segments = resolve(line)

    assert sum(len(segment.text) for segment in segments) <= len(line)


@given(marked_up_lines)
def test_ranges_are_in_bounds_and_disjoint(line: str):
    previous_end = 0
    for styled_range in resolve_ranges(line):
        assert previous_end <= styled_range.start < styled_range.end <= len(line)
        previous_end = styled_range.end


@given(st.integers(min_value=2, max_value=200))
def test_gradient_is_monotonic(total: int):
    colors = ["#000000", "#ff0000"]
    reds = [hex_to_rgb(gradient_color(colors, position, total))[0] for position in range(total)]

    assert reds == sorted(reds)
    assert reds[0] == 0
    assert reds[-1] == 255
