from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union

from PIL import Image

from ..color import Color
from ..errors import IOFailure
from ..infrastructure.files import atomic_write, read_image, temporary_artifact
from ..processing.encode import encode_image
from ..processing.engine import process_image
from ..stage_config import ImageOptions, ResolvedConfig, StageConfig, build_stage_config
from .base import Stage

log = logging.getLogger(__name__)


def _colormap_text(colors: Union[str, Iterable[Any]]) -> str:
    if isinstance(colors, str):
        return colors
    entries = []
    for color in colors:
        if isinstance(color, str):
            entries.append(color)
        else:
            entries.append(Color(*color).hex)
    return ",".join(entries)


class ImageStage(Stage):
    """Quantize a raster artifact for an e-ink display.

    Model defaults and explicit settings are kept apart and merged when the
    stage runs, model first, so an explicit setting always wins no matter in
    which order the builder methods were called.
    """

    name = "image"

    def __init__(self, options: Optional[ImageOptions] = None) -> None:
        super().__init__()
        self._overrides: Dict[str, Any] = {}
        if options is not None:
            self.options(options)

    def options(self, options: ImageOptions) -> "ImageStage":
        for key, value in vars(options).items():
            if value is not None:
                self._overrides[key] = value
        return self

    def _set(self, key: str, value: Any) -> "ImageStage":
        self._overrides[key] = value
        return self

    def format(self, value: str) -> "ImageStage":
        return self._set("format", value.lower())

    def width(self, value: int) -> "ImageStage":
        return self._set("width", int(value))

    def height(self, value: int) -> "ImageStage":
        return self._set("height", int(value))

    def rotation(self, value: int) -> "ImageStage":
        return self._set("rotation", int(value))

    def colors(self, value: int) -> "ImageStage":
        return self._set("colors", int(value))

    def bit_depth(self, value: int) -> "ImageStage":
        return self._set("bit_depth", int(value))

    def offset_x(self, value: int) -> "ImageStage":
        return self._set("offset_x", int(value))

    def offset_y(self, value: int) -> "ImageStage":
        return self._set("offset_y", int(value))

    def dither(self, enabled: bool = True) -> "ImageStage":
        return self._set("dither", bool(enabled))

    def palette(self, palette_id: str) -> "ImageStage":
        return self._set("palette", palette_id)

    def colormap(self, colors: Union[str, Iterable[Any]]) -> "ImageStage":
        return self._set("colormap", _colormap_text(colors))

    def stage_config(self) -> StageConfig:
        return build_stage_config(self._model, ImageOptions(**self._overrides))

    def encode(self, img: Image.Image) -> Tuple[ResolvedConfig, bytes]:
        """Process a decoded image; return the resolved settings and encoded bytes."""
        resolved = self.stage_config().resolve(img.size)
        return resolved, encode_image(process_image(img, resolved), resolved)

    def __call__(self, input_path: Optional[Path]) -> Path:
        if input_path is None:
            raise IOFailure("Image stage requires an input image")

        resolved, data = self.encode(read_image(input_path))

        target = self._output_path or temporary_artifact("eink_image_", f".{resolved.format}")
        atomic_write(target, data)
        log.info(
            "Wrote %s (%dx%d, %d-bit %s)",
            target,
            resolved.width,
            resolved.height,
            resolved.bit_depth,
            resolved.format.upper(),
        )
        return Path(target)
