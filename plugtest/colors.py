"""Status colours and the colour palette used by the display."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar


@dataclass(frozen=True)
class Color:
    """An RGBA colour with 8-bit channels."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def rgb(self) -> tuple[int, int, int]:
        return (self.red, self.green, self.blue)


EMPTY = Color(174, 225, 254)
NORMAL = Color(1, 255, 102)
ALARM = Color(255, 0, 0)
OFFLINE = Color(200, 200, 200)
WARNING = Color(255, 255, 0)

WIDGET_BACKGROUND = Color(232, 249, 255)
BUTTON_BACKGROUND = Color(232, 238, 250)

PALETTE = (
    Color(52, 233, 0),
    Color(220, 223, 0),
    Color(255, 162, 0),
    Color(0, 147, 138),
    Color(0, 240, 226),
    Color(0, 158, 240),
    Color(0, 96, 145),
    Color(203, 161, 255),
    Color(119, 80, 168),
    Color(248, 127, 136),
    Color(169, 65, 72),
    Color(138, 196, 139),
    Color(81, 120, 82),
)


def palette_color(index: int) -> Color:
    """Return the palette colour for ``index``, wrapping around the palette."""
    return PALETTE[index % len(PALETTE)]


def temperature_color(value: int) -> Color:
    """Return the colour that represents a temperature reading."""
    if value > 35:
        return Color(255, 90, 0)
    if value > 30:
        return Color(255, 255, 0)
    if value > 25:
        return Color(100, 200, 105)
    if value > 22:
        return Color(100, 128, 255)
    if value > 0:
        return Color(0, 128, 255)
    return Color(200, 200, 200)


T = TypeVar("T")


def in_bound(minimum: T, value: T, maximum: T) -> bool:
    """Return True if ``minimum <= value <= maximum``."""
    return minimum <= value <= maximum  # type: ignore[operator]