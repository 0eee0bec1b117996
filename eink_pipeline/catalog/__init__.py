"""Read-only device model and palette tables."""

from .models import MODELS, Model, available_models, get_model
from .palettes import PALETTES, Palette, available_palettes, get_palette, palette_colors

__all__ = [
    "MODELS",
    "Model",
    "available_models",
    "get_model",
    "PALETTES",
    "Palette",
    "available_palettes",
    "get_palette",
    "palette_colors",
]
