import pytest

from eink_pipeline.catalog import MODELS, PALETTES, available_models, get_model, get_palette, palette_colors
from eink_pipeline.color import Color
from eink_pipeline.errors import InvalidModel, InvalidPalette


def test_get_model_returns_registered_model():
    model = get_model("og_png")

    assert (model.width, model.height) == (800, 480)
    assert model.bit_depth == 1
    assert model.format == "png"


def test_unknown_model_lists_every_registered_id():
    with pytest.raises(InvalidModel) as excinfo:
        get_model("does_not_exist")

    message = str(excinfo.value)
    assert "does_not_exist" in message
    for model_id in available_models():
        assert model_id in message


def test_structural_palette_has_no_color_list():
    assert get_palette("bw").grays == 2

    with pytest.raises(InvalidPalette, match="has no colors defined"):
        palette_colors("bw")


def test_unknown_palette_is_rejected():
    with pytest.raises(InvalidPalette, match="color-6a"):
        palette_colors("neon")


def test_palette_colors_keep_table_order():
    assert palette_colors("color-3bwr") == (Color(0, 0, 0), Color(255, 255, 255), Color(255, 0, 0))


@pytest.mark.parametrize("model", list(MODELS.values()), ids=lambda model: model.id)
def test_model_table_is_self_consistent(model):
    assert model.rotation in (0, 90, 180, 270)
    assert model.bit_depth in (1, 2, 8)
    assert model.colors <= 2 ** model.bit_depth
    assert model.format in ("png", "bmp")
    if model.format == "bmp":
        assert model.bit_depth != 2
    if model.palette_id is not None:
        assert model.palette_id in PALETTES


def test_rotated_model_renders_at_swapped_viewport():
    assert get_model("amazon_kindle_2024").viewport == (1448, 1072)
    assert get_model("og_png").viewport == (800, 480)
