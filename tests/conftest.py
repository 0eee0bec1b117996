import dataclasses
from pathlib import Path

import pytest
from PIL import Image

from eink_pipeline.infrastructure import files


@pytest.fixture
def artifact_dir(tmp_path, monkeypatch) -> Path:
    """Redirect generated artifacts into a private directory."""
    directory = tmp_path / "artifacts"
    directory.mkdir()
    monkeypatch.setattr(files, "SETTINGS", dataclasses.replace(files.SETTINGS, tmp_dir=str(directory)))
    return directory


@pytest.fixture
def red_png(tmp_path) -> Path:
    path = tmp_path / "red.png"
    Image.new("RGB", (100, 100), (255, 0, 0)).save(path, "PNG")
    return path


@pytest.fixture
def gradient_png(tmp_path) -> Path:
    path = tmp_path / "gradient.png"
    img = Image.new("RGB", (24, 16))
    pixels = img.load()
    for y in range(16):
        for x in range(24):
            pixels[x, y] = (x * 10, y * 15, 128)
    img.save(path, "PNG")
    return path


class FakeRenderer:
    """Stand-in for the headless browser: paints a solid viewport-sized PNG."""

    def __init__(self, color=(255, 255, 255)):
        self.color = color
        self.calls = []

    def render(self, html, output, viewport=(800, 480), timezone=None):
        self.calls.append({"html": html, "viewport": viewport, "timezone": timezone})
        Image.new("RGB", viewport, self.color).save(output, "PNG")
        return output


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer(color=(40, 40, 40))
