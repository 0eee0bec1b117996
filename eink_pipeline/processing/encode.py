from __future__ import annotations

import io
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image

from ..infrastructure.files import PathLike, atomic_write

if TYPE_CHECKING:
    from ..stage_config import ResolvedConfig


def encode_image(indexed: Image.Image, config: "ResolvedConfig") -> bytes:
    """Pack a quantized ``P`` image into the configured container."""

    config.check_container()
    buffer = io.BytesIO()
    if config.format == "bmp":
        if config.bit_depth == 1:
            # Only black and white targets reach here; BMP stores them as mode "1".
            indexed.convert("L").convert("1", dither=Image.Dither.NONE).save(buffer, "BMP")
        else:
            indexed.save(buffer, "BMP")
    else:
        indexed.save(buffer, "PNG", optimize=True, bits=config.bit_depth)
    return buffer.getvalue()


def write_image(indexed: Image.Image, config: "ResolvedConfig", path: PathLike) -> Path:
    """Encode and replace ``path`` in one step; a failed encode leaves it untouched."""
    return atomic_write(path, encode_image(indexed, config))
