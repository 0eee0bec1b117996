from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..color import Color
from ..errors import InvalidPalette


@dataclass(frozen=True)
class Palette:
    id: str
    name: str
    grays: Optional[int] = None
    colors: Optional[Tuple[str, ...]] = None


# Palettes without a color list are structural: the engine derives a gray
# ramp from the color count and bit depth instead of a fixed target set.
_PALETTE_TABLE: Tuple[Palette, ...] = (
    Palette("bw", "Black & White", grays=2),
    Palette("gray-4", "4 Grays", grays=4),
    Palette("gray-16", "16 Grays", grays=16),
    Palette("gray-256", "256 Grays", grays=256),
    Palette("color-3bwr", "3 Colors (black, white, red)", colors=("#000000", "#FFFFFF", "#FF0000")),
    Palette(
        "color-4bwry",
        "4 Colors (black, white, red, yellow)",
        colors=("#000000", "#FFFFFF", "#FF0000", "#FFFF00"),
    ),
    Palette(
        "color-6a",
        "6 Colors (Spectra 6)",
        colors=("#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#000000", "#FFFFFF"),
    ),
    Palette(
        "color-7a",
        "7 Colors (ACeP)",
        colors=("#000000", "#FFFFFF", "#FF0000", "#00FF00", "#0000FF", "#FFFF00", "#FFA500"),
    ),
)

PALETTES: Dict[str, Palette] = {palette.id: palette for palette in _PALETTE_TABLE}


def available_palettes() -> Tuple[str, ...]:
    return tuple(PALETTES)


def get_palette(palette_id: str) -> Palette:
    try:
        return PALETTES[palette_id]
    except KeyError:
        raise InvalidPalette(
            f"Invalid palette: {palette_id}. Available palettes: {', '.join(available_palettes())}"
        ) from None


def palette_colors(palette_id: str) -> Tuple[Color, ...]:
    """Return the ordered target colors of ``palette_id``.

    Structural palettes (gray ramps) have no color list and are rejected here;
    they are applied through the color count and bit depth instead.
    """

    palette = get_palette(palette_id)
    if not palette.colors:
        raise InvalidPalette(f"Palette '{palette_id}' has no colors defined")
    return tuple(Color.from_hex(value) for value in palette.colors)
