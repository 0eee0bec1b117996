import io

import pytest
from PIL import Image

from eink_pipeline.app import create_app
from eink_pipeline.stages import browser as browser_module


@pytest.fixture
def client():
    app = create_app()
    app.config["TESTING"] = True
    return app.test_client()


def _png_bytes(size=(40, 24), color=(255, 0, 0)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, "PNG")
    return buffer.getvalue()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.get_json()["ok"] is True


def test_models_and_palettes_are_listed(client):
    models = client.get("/models").get_json()["models"]
    palettes = client.get("/palettes").get_json()["palettes"]

    assert "og_png" in [model["id"] for model in models]
    assert "color-7a" in [palette["id"] for palette in palettes]


def test_image_endpoint_returns_quantized_png(client):
    response = client.post("/image?colors=2&bitDepth=1", data=_png_bytes())

    assert response.status_code == 200
    assert response.mimetype == "image/png"
    assert response.data[24] == 1
    assert Image.open(io.BytesIO(response.data)).size == (40, 24)


def test_image_endpoint_returns_bmp(client):
    response = client.post("/image?model=og_bmp&width=40&height=24", data=_png_bytes())

    assert response.status_code == 200
    assert response.mimetype == "image/bmp"
    assert response.data[:2] == b"BM"


def test_image_endpoint_reports_invalid_model(client):
    response = client.post("/image?model=does_not_exist", data=_png_bytes())

    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "invalid_model"
    assert "og_png" in body["message"]


def test_image_endpoint_reports_palette_error(client):
    response = client.post("/image?colors=5&bit_depth=2", data=_png_bytes())

    assert response.status_code == 400
    assert response.get_json()["error"] == "palette_error"


def test_image_endpoint_rejects_non_integer(client):
    response = client.post("/image?width=wide", data=_png_bytes())

    assert response.status_code == 400


def test_image_endpoint_rejects_garbage(client):
    response = client.post("/image", data=b"definitely not an image")

    assert response.status_code == 500
    assert response.get_json()["error"] == "io_failure"


def test_image_endpoint_rejects_oversized_image(client, monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 10)

    response = client.post("/image", data=_png_bytes())

    assert response.status_code == 500
    assert response.get_json()["error"] == "io_failure"


def test_pipeline_endpoint(client, monkeypatch, artifact_dir):
    def render(self, html, output, viewport=(800, 480), timezone=None):
        Image.new("RGB", viewport, (0, 0, 0)).save(output, "PNG")
        return output

    monkeypatch.setattr(browser_module.ChromiumRenderer, "render", render)

    response = client.post("/pipeline?model=og_png&width=80&height=48", data="<p>hello</p>")

    assert response.status_code == 200
    assert response.mimetype == "image/png"
    assert Image.open(io.BytesIO(response.data)).size == (80, 48)
    assert list(artifact_dir.iterdir()) == []


def test_pipeline_endpoint_reports_render_failure(client, monkeypatch, artifact_dir):
    def render(self, html, output, viewport=(800, 480), timezone=None):
        raise browser_module.RenderFailure("browser crashed")

    monkeypatch.setattr(browser_module.ChromiumRenderer, "render", render)

    response = client.post("/pipeline", data="<p>hello</p>")

    assert response.status_code == 502
    assert response.get_json() == {"error": "render_failure", "message": "browser crashed"}
    assert list(artifact_dir.iterdir()) == []
