"""Measuring elements in terminal display columns.

``measure`` is the size oracle used by the renderer: it computes the
(width, height) an element occupies once rendered. Widths are counted per
grapheme cluster with wcwidth, so wide and combining characters take the
space a terminal gives them rather than their byte or codepoint count.

Bounded boxes are laid out by ``flow``, which both the size pass and the
render pass use, so a box always renders into exactly the rows it measured.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import NamedTuple

import regex
import wcwidth

from .blocks import Box, Element, HStack, Inline, VStack
from .exc import LayoutError

Size = tuple[int, int]

_GRAPHEME = regex.compile(r"\X")

EMOJI_PRESENTATION = "\ufe0f"


def graphemes(text: str) -> list[str]:
    """Split ``text`` into extended grapheme clusters."""
    return _GRAPHEME.findall(text)


def cluster_width(cluster: str) -> int:
    """Display width of a single grapheme cluster.

    The base character decides the width; combining marks, joiners and
    other zero-width members add nothing. Non-printable characters count 0.
    """
    width = wcwidth.wcwidth(cluster[0])
    if width <= 0:
        return 0
    if width == 1 and EMOJI_PRESENTATION in cluster:
        return 2
    return width


def display_width(text: str) -> int:
    """Number of terminal columns ``text`` occupies."""
    if text.isascii() and text.isprintable():
        return len(text)
    return sum(cluster_width(cluster) for cluster in graphemes(text))


def chunks(text: str, width: int) -> list[str]:
    """Split ``text`` into pieces at most ``width`` columns wide.

    Pieces always end on a grapheme cluster boundary. A cluster wider than
    ``width`` gets a piece of its own.

    >>> chunks("╯││ ──", 5)
    ['╯││ ─', '─']
    """
    if width <= 0:
        msg = f"chunk width must be positive, got {width}"
        raise ValueError(msg)

    pieces: list[str] = []
    current: list[str] = []
    used = 0
    for cluster in graphemes(text):
        cw = cluster_width(cluster)
        if used + cw > width and current:
            pieces.append("".join(current))
            current, used = [], 0
        current.append(cluster)
        used += cw
    if current:
        pieces.append("".join(current))
    return pieces


class Placement(NamedTuple):
    """An element positioned inside a box, relative to the box's top-left."""

    element: Element
    row: int
    column: int


class Flow(NamedTuple):
    """Result of laying out the children of a box."""

    placements: list[Placement]
    width: int
    height: int


def flow(element: Box) -> Flow:
    """Place the children of a box.

    Unbounded boxes put their children side by side on one row. Bounded
    boxes split inline text into pieces that wrap at the right edge and
    move any other child to a new row if it does not fit on the current
    one. A row filled exactly to capacity stays open; only the next piece
    of content starts a new row.
    """
    if element.width is None:
        return _flow_unbounded(element)
    return _flow_bounded(element, element.width)


def _flow_unbounded(element: Box) -> Flow:
    placements: list[Placement] = []
    column = 0
    height = 0
    for child in element.children:
        cw, ch = measure(child)
        placements.append(Placement(child, 0, column))
        column += cw
        height = max(height, ch)
    return Flow(placements, column, height)


def _flow_bounded(element: Box, limit: int) -> Flow:
    placements: list[Placement] = []
    row = 0
    row_height = 1
    column = 0
    width = limit

    for child in element.children:
        if isinstance(child, Inline):
            piece: list[str] = []
            piece_column = column
            for cluster in graphemes(child.text):
                cw = cluster_width(cluster)
                if column + cw > limit and column > 0:
                    if piece:
                        placements.append(
                            Placement(Inline(text="".join(piece), style=child.style), row, piece_column)
                        )
                        piece = []
                    row += row_height
                    row_height = 1
                    column = 0
                    piece_column = 0
                piece.append(cluster)
                column += cw
            if piece:
                placements.append(
                    Placement(Inline(text="".join(piece), style=child.style), row, piece_column)
                )
        else:
            cw, ch = measure(child)
            if column + cw > limit and column > 0:
                row += row_height
                row_height = 1
                column = 0
            placements.append(Placement(child, row, column))
            column += cw
            row_height = max(row_height, ch)
        width = max(width, column)

    return Flow(placements, width, row + row_height)


def _measure_vstack(element: VStack) -> Size:
    width, height = 0, 0
    for child in element.children:
        cw, ch = measure(child)
        width = max(width, cw)
        height += ch
    return width, height


def _measure_hstack(element: HStack) -> Size:
    width, height = 0, 0
    for child in element.children:
        cw, ch = measure(child)
        width += cw
        height = max(height, ch)
    return width, height


def _measure_box(element: Box) -> Size:
    result = flow(element)
    return result.width, result.height


def _measure_inline(element: Inline) -> Size:
    return display_width(element.text), 1


_measure_handlers: dict[type, Callable[..., Size]] = {
    VStack: _measure_vstack,
    HStack: _measure_hstack,
    Box: _measure_box,
    Inline: _measure_inline,
}


def measure(element: Element) -> Size:
    """Return the (width, height) ``element`` occupies when rendered."""
    handler = _measure_handlers.get(type(element))
    if handler is None:
        msg = f"cannot lay out {type(element).__name__}"
        raise LayoutError(msg)
    return handler(element)
