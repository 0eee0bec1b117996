from __future__ import annotations

from typing import Optional, Tuple

from ..catalog.palettes import palette_colors
from ..color import Color
from ..errors import InvalidColormap


def parse_colormap(text: str) -> Tuple[Color, ...]:
    tokens = [token.strip() for token in text.split(",")]
    tokens = [token for token in tokens if token]
    if not tokens:
        raise InvalidColormap("Colormap cannot be empty")

    colors = []
    for token in tokens:
        try:
            colors.append(Color.from_hex(token))
        except ValueError:
            raise InvalidColormap(
                f"Invalid colormap entry: {token!r} (expected #RRGGBB)"
            ) from None
    return tuple(colors)


def resolve_colormap(
    palette_id: Optional[str] = None,
    colormap_text: Optional[str] = None,
) -> Optional[Tuple[Color, ...]]:
    """Turn a palette id and/or colormap text into an ordered color list.

    An explicit colormap always wins over a palette id. ``None`` means no
    fixed target set: quantization then falls back to a gray ramp driven by
    the color count and bit depth.
    """

    if colormap_text:
        return parse_colormap(colormap_text)
    if palette_id:
        return palette_colors(palette_id)
    return None
