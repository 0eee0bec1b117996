"""Configuration accumulated for one image stage run.

A :class:`StageConfig` is filled in two phases: model defaults first, then the
caller's explicit options, so the last write per field wins. Once the source
image size is known it is resolved into an immutable :class:`ResolvedConfig`
that the quantization engine consumes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .catalog.models import Model, get_model
from .catalog.palettes import get_palette
from .color import BLACK, WHITE, Color, gray_ramp
from .errors import GeometryError, PaletteError
from .processing.colormap import resolve_colormap

log = logging.getLogger(__name__)

SUPPORTED_FORMATS: Tuple[str, ...] = ("png", "bmp")
SUPPORTED_BIT_DEPTHS: Tuple[int, ...] = (1, 2, 8)

Colormap = Tuple[Color, ...]


def smallest_bit_depth(count: int) -> int:
    for depth in SUPPORTED_BIT_DEPTHS:
        if count <= 2 ** depth:
            return depth
    raise PaletteError(
        f"{count} colors cannot be indexed with any supported bit depth "
        f"({', '.join(str(depth) for depth in SUPPORTED_BIT_DEPTHS)})"
    )


@dataclass(frozen=True)
class ImageOptions:
    """Explicit per-field overrides; ``None`` means the caller did not supply it."""

    format: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    rotation: Optional[int] = None
    colors: Optional[int] = None
    bit_depth: Optional[int] = None
    offset_x: Optional[int] = None
    offset_y: Optional[int] = None
    dither: Optional[bool] = None
    palette: Optional[str] = None
    colormap: Optional[str] = None


_OVERRIDE_FIELDS = (
    "format",
    "width",
    "height",
    "rotation",
    "colors",
    "bit_depth",
    "offset_x",
    "offset_y",
    "dither",
)


@dataclass
class StageConfig:
    format: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    rotation: Optional[int] = None
    colors: Optional[int] = None
    bit_depth: Optional[int] = None
    offset_x: Optional[int] = None
    offset_y: Optional[int] = None
    dither: Optional[bool] = None
    colormap: Optional[Colormap] = None

    def apply_model(self, model: Model) -> "StageConfig":
        self.format = model.format
        self.width = model.width
        self.height = model.height
        self.rotation = model.rotation
        self.colors = model.colors
        self.bit_depth = model.bit_depth
        self.offset_x = model.offset_x
        self.offset_y = model.offset_y
        if model.palette_id and get_palette(model.palette_id).colors:
            self.colormap = resolve_colormap(palette_id=model.palette_id)
        return self

    def apply_options(self, options: ImageOptions) -> "StageConfig":
        for name in _OVERRIDE_FIELDS:
            value = getattr(options, name)
            if value is not None:
                setattr(self, name, value)

        colormap = resolve_colormap(options.palette, options.colormap)
        if colormap is not None:
            self.colormap = colormap
            # Implied defaults for an explicit target set, unless supplied.
            if options.colors is None:
                self.colors = len(colormap)
            if options.format is None:
                self.format = "png"
            if options.bit_depth is None:
                self.bit_depth = smallest_bit_depth(len(colormap))
        return self

    def resolve(self, source_size: Tuple[int, int]) -> "ResolvedConfig":
        """Fill remaining gaps from ``source_size`` and validate the result."""

        fmt = (self.format or "png").lower()
        if fmt not in SUPPORTED_FORMATS:
            raise GeometryError(
                f"Unsupported format: {self.format}. Supported formats: {', '.join(SUPPORTED_FORMATS)}"
            )

        rotation = 0 if self.rotation is None else int(self.rotation)
        if rotation % 90 != 0:
            raise GeometryError(f"Rotation must be a multiple of 90 degrees, got {rotation}")
        rotation %= 360

        source_width, source_height = source_size
        if rotation in (90, 270):
            source_width, source_height = source_height, source_width
        width = source_width if self.width is None else int(self.width)
        height = source_height if self.height is None else int(self.height)
        if width <= 0 or height <= 0:
            raise GeometryError(f"Image dimensions must be positive, got {width}x{height}")

        bit_depth, colors = self._resolve_depth_and_colors()

        if self.colormap is not None and len(self.colormap) > 2 ** bit_depth:
            raise PaletteError(
                f"Colormap has {len(self.colormap)} colors but bit depth {bit_depth} "
                f"indexes at most {2 ** bit_depth}"
            )

        resolved = ResolvedConfig(
            format=fmt,
            width=width,
            height=height,
            rotation=rotation,
            colors=colors,
            bit_depth=bit_depth,
            offset_x=int(self.offset_x or 0),
            offset_y=int(self.offset_y or 0),
            dither=bool(self.dither),
            colormap=self.colormap,
        )
        resolved.check_container()
        return resolved

    def _resolve_depth_and_colors(self) -> Tuple[int, int]:
        bit_depth = self.bit_depth
        colors = self.colors
        if bit_depth is None and colors is None:
            bit_depth, colors = 8, 256
        elif bit_depth is None:
            if colors < 1:
                raise PaletteError(f"Color count must be at least 1, got {colors}")
            bit_depth = smallest_bit_depth(colors)
        elif colors is None:
            colors = 2 ** int(bit_depth)

        bit_depth = int(bit_depth)
        colors = int(colors)
        if bit_depth not in SUPPORTED_BIT_DEPTHS:
            raise PaletteError(
                f"Unsupported bit depth: {bit_depth}. "
                f"Supported bit depths: {', '.join(str(depth) for depth in SUPPORTED_BIT_DEPTHS)}"
            )
        if colors < 1:
            raise PaletteError(f"Color count must be at least 1, got {colors}")
        if colors > 2 ** bit_depth:
            raise PaletteError(
                f"{colors} colors exceed the {2 ** bit_depth} indexable at bit depth {bit_depth}"
            )
        return bit_depth, colors


@dataclass(frozen=True)
class ResolvedConfig:
    format: str
    width: int
    height: int
    rotation: int
    colors: int
    bit_depth: int
    offset_x: int = 0
    offset_y: int = 0
    dither: bool = False
    colormap: Optional[Colormap] = None

    @property
    def grayscale(self) -> bool:
        return self.colormap is None

    @property
    def targets(self) -> Colormap:
        """Ordered target colors; palette index ``i`` maps to ``targets[i]``."""
        if self.colormap is not None:
            return self.colormap
        return gray_ramp(self.colors)

    def check_container(self) -> None:
        if self.format != "bmp":
            return
        if self.bit_depth == 2:
            raise GeometryError(
                "BMP output does not support bit depth 2. Use bit depth 1 or 8, or format png"
            )
        if self.bit_depth == 1 and any(color not in (BLACK, WHITE) for color in self.targets):
            raise GeometryError(
                "1-bit BMP output only supports black and white; "
                f"got {', '.join(color.hex for color in self.targets)}"
            )


def build_stage_config(
    model: Union[Model, str, None] = None,
    options: Optional[ImageOptions] = None,
) -> StageConfig:
    config = StageConfig()
    if model is not None:
        if isinstance(model, str):
            model = get_model(model)
        log.debug("Applying model defaults for %s", model.id)
        config.apply_model(model)
    if options is not None:
        config.apply_options(options)
    return config
