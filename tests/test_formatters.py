"""Tests for the render pass and the ANSI / plain formatters."""

from __future__ import annotations

import io
import typing as t

import pytest

from threadline import (
    ANSIFormatter,
    BackendWriteError,
    Element,
    Formatter,
    PlainFormatter,
    Style,
    box,
    display_width,
    hstack,
    inline,
    measure,
    vstack,
)

from tests.helpers import strip_ansi


class RenderCase(t.NamedTuple):
    """Test case for Formatter.render()."""

    test_id: str
    element: Element
    expected: list[str]


RENDER_CASES: list[RenderCase] = [
    RenderCase(
        "wrapped_box_in_hstack",
        vstack(
            inline("test1"),
            hstack(
                inline("1"),
                inline(" "),
                inline("2"),
                box(inline("#_#_#_#__#_#_#_##_#_#_#__#_#_#_#"), width=8),
            ),
            inline("test3"),
        ),
        [
            "test1      ",
            "1 2#_#_#_#_",
            "   _#_#_#_#",
            "   #_#_#_#_",
            "   _#_#_#_#",
            "test3      ",
        ],
    ),
    RenderCase(
        "tall_neighbour_pushes_columns",
        vstack(hstack(inline("a"), vstack(inline("b"), inline("c"))), inline("dd")),
        ["ab", " c", "dd"],
    ),
    RenderCase(
        "text_after_tall_child",
        box(vstack(inline("xy"), inline("zw")), inline("abc"), width=4),
        ["xyab", "zw  ", "c   "],
    ),
    RenderCase(
        "nested_child_moves_down",
        box(inline("abc"), vstack(inline("xy"), inline("zw")), width=4),
        ["abc ", "xy  ", "zw  "],
    ),
    RenderCase(
        "box_reserves_its_width",
        hstack(box(inline("ab"), width=5), inline("|")),
        ["ab   |"],
    ),
    RenderCase(
        "exact_capacity",
        box(inline("abcdefgh"), width=4),
        ["abcd", "efgh"],
    ),
    RenderCase(
        "wide_characters_wrap_by_columns",
        box(inline("日本語"), width=5),
        ["日本 ", "語   "],
    ),
    RenderCase(
        "unbounded_box",
        box(inline("ab"), vstack(inline("x"), inline("y")), inline("!")),
        ["abx!", "  y "],
    ),
    RenderCase("empty", vstack(), []),
]


@pytest.mark.parametrize("case", RENDER_CASES, ids=[c.test_id for c in RENDER_CASES])
def test_plain_render(case: RenderCase) -> None:
    assert PlainFormatter().render(case.element) == case.expected


@pytest.mark.parametrize("case", RENDER_CASES, ids=[c.test_id for c in RENDER_CASES])
@pytest.mark.parametrize("formatter", [PlainFormatter(), ANSIFormatter()], ids=["plain", "ansi"])
def test_render_matches_measure(case: RenderCase, formatter: Formatter) -> None:
    """Rendered output has exactly the measured number of rows and columns."""
    width, height = measure(case.element)
    lines = formatter.render(case.element)

    assert len(lines) == height
    for line in lines:
        assert display_width(strip_ansi(line)) == width


def test_format_joins_lines() -> None:
    element = vstack(inline("a"), inline("bc"))
    assert PlainFormatter().format(element) == "a \nbc"


def test_base_formatter_is_plain() -> None:
    element = hstack(inline("x", style=Style(bold=True)), inline("y"))
    assert Formatter().render(element) == PlainFormatter().render(element) == ["xy"]


def test_ansi_brackets_styled_runs() -> None:
    bold = Style(bold=True)
    element = hstack(inline("a", style=bold), inline("b"))

    assert ANSIFormatter().render(element) == ["\x1b[1ma\x1b[0mb"]


def test_ansi_emits_truecolor_and_attributes() -> None:
    style = Style(foreground="red", background=(1, 2, 3), bold=True, italic=True)
    begin = ANSIFormatter().begin_style(style)

    assert begin == "\x1b[1m\x1b[3m\x1b[38;2;205;49;49m\x1b[48;2;1;2;3m"
    assert ANSIFormatter().end_style(style) == "\x1b[0m"


def test_ansi_plain_style_has_no_markers() -> None:
    assert ANSIFormatter().begin_style(Style()) == ""
    assert ANSIFormatter().end_style(Style()) == ""


def test_wrapped_pieces_keep_their_style() -> None:
    italic = Style(italic=True)
    lines = ANSIFormatter().render(box(inline("abcdef", style=italic), width=3))

    assert lines == ["\x1b[3mabc\x1b[0m", "\x1b[3mdef\x1b[0m"]


def test_container_style_only_applies_to_padding() -> None:
    """A stack's style brackets the spaces it pads with, not its children."""
    padded = Style(background="blue")
    element = vstack(inline("abc"), inline("a"), style=padded)
    lines = ANSIFormatter().render(element)

    assert lines[0] == "abc"
    assert lines[1] == "a\x1b[48;2;36;114;200m  \x1b[0m"


def test_write_aborts_on_broken_stream(e0412_report, lib_cache) -> None:
    class BrokenStream(io.StringIO):
        def write(self, s: str) -> int:
            raise BrokenPipeError("stream closed")

    with pytest.raises(BackendWriteError, match="stream closed"):
        PlainFormatter().write(e0412_report, lib_cache, BrokenStream())
