from __future__ import annotations

import re
from typing import NamedTuple, Tuple

_HEX_COLOR = re.compile(r"^#([0-9a-fA-F]{6})$")


class Color(NamedTuple):
    r: int
    g: int
    b: int

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        match = _HEX_COLOR.match(text.strip())
        if not match:
            raise ValueError(f"Invalid hex color: {text!r} (expected #RRGGBB)")
        value = int(match.group(1), 16)
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    @property
    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)


def gray_ramp(levels: int) -> Tuple[Color, ...]:
    """Evenly spaced grays from black to white; a single level is black."""
    if levels <= 1:
        return (BLACK,)
    return tuple(
        Color(value, value, value)
        for value in (int(round(index * 255 / (levels - 1))) for index in range(levels))
    )
