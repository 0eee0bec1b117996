import pytest

from eink_pipeline.catalog import palette_colors
from eink_pipeline.color import Color, gray_ramp
from eink_pipeline.errors import InvalidColormap, InvalidPalette
from eink_pipeline.processing.colormap import parse_colormap, resolve_colormap


def test_parse_colormap_keeps_order():
    assert resolve_colormap(None, "#FF0000,#00FF00,#0000FF") == (
        Color(255, 0, 0),
        Color(0, 255, 0),
        Color(0, 0, 255),
    )


def test_parse_colormap_trims_and_drops_empty_tokens():
    assert parse_colormap(" #ff0000 ,, #000000 ,") == (Color(255, 0, 0), Color(0, 0, 0))


def test_colormap_wins_over_palette():
    assert resolve_colormap("color-7a", "#123456") == (Color(0x12, 0x34, 0x56),)


def test_palette_used_without_colormap():
    assert resolve_colormap("color-6a", None) == palette_colors("color-6a")


def test_nothing_supplied_means_no_colormap():
    assert resolve_colormap(None, None) is None
    assert resolve_colormap("", "") is None


@pytest.mark.parametrize("text", [" , ,", ","])
def test_empty_colormap_is_rejected(text):
    with pytest.raises(InvalidColormap, match="cannot be empty"):
        resolve_colormap(None, text)


@pytest.mark.parametrize("token", ["red", "#FFF", "#GG0000", "FF0000"])
def test_malformed_colormap_entry_is_rejected(token):
    with pytest.raises(InvalidColormap, match="Invalid colormap entry"):
        resolve_colormap(None, f"#000000,{token}")


def test_structural_palette_is_not_a_colormap():
    with pytest.raises(InvalidPalette):
        resolve_colormap("gray-256", None)


def test_hex_round_trip():
    assert Color.from_hex("#0a0B0c").hex == "#0A0B0C"


def test_gray_ramp_spans_black_to_white():
    assert [color.r for color in gray_ramp(4)] == [0, 85, 170, 255]
    assert gray_ramp(1) == (Color(0, 0, 0),)
