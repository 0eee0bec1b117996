from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..errors import InvalidModel


@dataclass(frozen=True)
class Model:
    id: str
    label: str
    width: int
    height: int
    rotation: int
    colors: int
    bit_depth: int
    format: str
    palette_id: Optional[str] = None
    offset_x: int = 0
    offset_y: int = 0

    @property
    def viewport(self) -> Tuple[int, int]:
        """Size content has to be rendered at before rotation."""
        if self.rotation % 180 == 90:
            return self.height, self.width
        return self.width, self.height


_MODEL_TABLE: Tuple[Model, ...] = (
    Model("og_png", "TRMNL OG (1-bit PNG)", 800, 480, 0, 2, 1, "png", "bw"),
    Model("og_bmp", "TRMNL OG (1-bit BMP)", 800, 480, 0, 2, 1, "bmp", "bw"),
    Model("og_plus", "TRMNL OG (2-bit PNG)", 800, 480, 0, 4, 2, "png", "gray-4"),
    Model("amazon_kindle_2024", "Amazon Kindle 2024", 1072, 1448, 90, 256, 8, "png", "gray-256"),
    Model(
        "amazon_kindle_paperwhite_6th_gen",
        "Amazon Kindle Paperwhite (6th gen)",
        758,
        1024,
        90,
        256,
        8,
        "png",
        "gray-256",
    ),
    Model(
        "amazon_kindle_paperwhite_7th_gen",
        "Amazon Kindle Paperwhite (7th gen)",
        1072,
        1448,
        90,
        256,
        8,
        "png",
        "gray-256",
    ),
    Model("inkplate_10", "Inkplate 10", 1200, 825, 0, 8, 8, "png", None),
    Model("kobo_libra_2", "Kobo Libra 2", 1264, 1680, 90, 256, 8, "png", "gray-256"),
    Model("seeed_e1001", "Seeed reTerminal E1001", 800, 480, 0, 2, 1, "png", "bw"),
    Model("seeed_e1002", "Seeed reTerminal E1002", 800, 480, 0, 6, 8, "png", "color-6a"),
    Model("waveshare_4in2_bwr", "Waveshare 4.2\" B/W/R", 400, 300, 0, 3, 2, "png", "color-3bwr"),
    Model("waveshare_7in3_7color", "Waveshare 7.3\" ACeP", 800, 480, 0, 7, 8, "png", "color-7a"),
    Model("waveshare_7in5_bw", "Waveshare 7.5\" B/W", 800, 480, 0, 2, 1, "bmp", "bw"),
)

MODELS: Dict[str, Model] = {model.id: model for model in _MODEL_TABLE}


def available_models() -> Tuple[str, ...]:
    return tuple(MODELS)


def get_model(model_id: str) -> Model:
    try:
        return MODELS[model_id]
    except KeyError:
        raise InvalidModel(
            f"Invalid model name: {model_id}. Available models: {', '.join(available_models())}"
        ) from None
