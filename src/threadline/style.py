"""Style primitives shared by the element tree and the report models.

A Style is an immutable bundle of colors and text attributes. Styles do not
cascade: a node's style applies only to the text that node emits itself.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, NamedTuple, TypeVar

from pydantic import BaseModel, Field, field_validator

T = TypeVar("T")
U = TypeVar("U")


class Color(NamedTuple):
    """24-bit RGB color."""

    r: int
    g: int
    b: int

    @classmethod
    def parse(cls, value: Any) -> Color:
        """Build a color from a Color, an ``[r, g, b]`` sequence or a name."""
        if isinstance(value, Color):
            return value
        if isinstance(value, str):
            try:
                return NAMED_COLORS[value.lower()]
            except KeyError:
                msg = f"unknown color name: {value!r}"
                raise ValueError(msg) from None
        r, g, b = value
        return cls(int(r), int(g), int(b))


NAMED_COLORS: dict[str, Color] = {
    "black": Color(0, 0, 0),
    "red": Color(205, 49, 49),
    "green": Color(13, 188, 121),
    "yellow": Color(229, 229, 16),
    "blue": Color(36, 114, 200),
    "magenta": Color(188, 63, 188),
    "cyan": Color(17, 168, 205),
    "white": Color(229, 229, 229),
    "gray": Color(118, 118, 118),
    # Report kinds
    "error": Color(237, 61, 61),
    "warning": Color(237, 234, 61),
    "help": Color(61, 161, 237),
    "note": Color(97, 175, 239),
}


class Style(BaseModel):
    """Foreground/background colors plus bold and italic flags."""

    foreground: Color | None = None
    background: Color | None = None
    bold: bool = False
    italic: bool = False

    model_config = {"frozen": True}

    @field_validator("foreground", "background", mode="before")
    @classmethod
    def _parse_color(cls, value: Any) -> Color | None:
        return None if value is None else Color.parse(value)

    @property
    def is_plain(self) -> bool:
        """True when no attribute is set."""
        return (
            self.foreground is None
            and self.background is None
            and not self.bold
            and not self.italic
        )

    def with_fg(self, color: Color | str) -> Style:
        return self.model_copy(update={"foreground": Color.parse(color)})

    def with_bg(self, color: Color | str) -> Style:
        return self.model_copy(update={"background": Color.parse(color)})

    def with_bold(self) -> Style:
        return self.model_copy(update={"bold": True})

    def with_italic(self) -> Style:
        return self.model_copy(update={"italic": True})

    def combine(self, other: Style) -> Style:
        """Overwrite the attributes that ``other`` explicitly sets."""
        update: dict[str, Any] = {}
        if other.foreground is not None:
            update["foreground"] = other.foreground
        if other.background is not None:
            update["background"] = other.background
        if other.bold:
            update["bold"] = True
        if other.italic:
            update["italic"] = True
        return self.model_copy(update=update)


class Styled(BaseModel, Generic[T]):
    """A value paired with the style it should be displayed in."""

    value: T
    style: Style = Field(default_factory=Style)

    model_config = {"frozen": True}

    def map(self, f: Callable[[T], U]) -> Styled[U]:
        return Styled(value=f(self.value), style=self.style)


def styled(
    text: str,
    fg: Color | str | None = None,
    bg: Color | str | None = None,
    bold: bool = False,
    italic: bool = False,
) -> Styled[str]:
    """Build a styled text run.

    >>> styled("Nat", fg="cyan").style.foreground
    Color(r=17, g=168, b=205)
    """
    style = Style(foreground=fg, background=bg, bold=bold, italic=italic)
    return Styled[str](value=text, style=style)


def to_runs(message: Any) -> tuple[Styled[str], ...]:
    """Normalize a message into a tuple of styled text runs.

    Accepts a plain string, a single Styled value, a mapping shaped like a
    run, or an iterable mixing any of those.
    """
    if isinstance(message, (str, Styled, dict)):
        message = [message]
    runs: list[Styled[str]] = []
    for part in message:
        runs.append(_to_run(part))
    return tuple(runs)


def _to_run(part: Any) -> Styled[str]:
    if isinstance(part, str):
        return Styled[str](value=part)
    if isinstance(part, Styled):
        if type(part) is Styled[str]:
            return part
        return Styled[str](value=str(part.value), style=part.style)
    if isinstance(part, dict):
        return Styled[str].model_validate(part)
    msg = f"cannot use {type(part).__name__} as a message run"
    raise ValueError(msg)

