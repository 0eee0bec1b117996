from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PIL import Image

from .geometry import flatten, place, rotate
from .quantize import quantize

if TYPE_CHECKING:
    from ..stage_config import ResolvedConfig

log = logging.getLogger(__name__)


def process_image(img: Image.Image, config: "ResolvedConfig") -> Image.Image:
    """Rotate, place and quantize ``img`` for the target display.

    Quantization runs last so dithering sees the final geometry. The result
    is a ``P`` image whose palette holds ``config.targets`` in order.
    """

    config.check_container()
    src = flatten(img)
    src = rotate(src, config.rotation)
    src = place(src, config.width, config.height, config.offset_x, config.offset_y)
    log.debug(
        "Quantizing %dx%d to %d %s colors (bit depth %d, dither=%s)",
        config.width,
        config.height,
        len(config.targets),
        "gray" if config.grayscale else "mapped",
        config.bit_depth,
        config.dither,
    )
    return quantize(src, config.targets, dither=config.dither, grayscale=config.grayscale)
