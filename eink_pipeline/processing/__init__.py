"""Image quantization engine for e-ink targets."""

from .colormap import parse_colormap, resolve_colormap
from .encode import encode_image, write_image
from .engine import process_image
from .geometry import flatten, place, rotate
from .quantize import floyd_steinberg, map_nearest, nearest_index, quantize

__all__ = [
    "parse_colormap",
    "resolve_colormap",
    "encode_image",
    "write_image",
    "process_image",
    "flatten",
    "place",
    "rotate",
    "floyd_steinberg",
    "map_nearest",
    "nearest_index",
    "quantize",
]
