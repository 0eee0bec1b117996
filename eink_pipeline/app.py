from __future__ import annotations

import io
from dataclasses import asdict
from typing import Optional

from flask import Flask, abort, jsonify, request
from PIL import Image

from .catalog.models import MODELS
from .catalog.palettes import PALETTES
from .config import SETTINGS, configure_logging
from .errors import IOFailure, PipelineError
from .infrastructure.files import discard
from .infrastructure.network import FETCHER, is_url
from .infrastructure.responses import error_response, send_image
from .pipeline import Pipeline
from .stage_config import ImageOptions
from .stages.browser import BrowserStage
from .stages.image import ImageStage

APP_VERSION = "1.0.0"

_INT_FIELDS = ("width", "height", "rotation", "colors", "bit_depth", "offset_x", "offset_y")
_ARG_ALIASES = {"bit_depth": "bitDepth", "offset_x": "offsetX", "offset_y": "offsetY"}


def _arg(name: str) -> Optional[str]:
    value = request.args.get(name)
    if value is None and name in _ARG_ALIASES:
        value = request.args.get(_ARG_ALIASES[name])
    if value is None or value.strip() == "":
        return None
    return value.strip()


def options_from_request() -> ImageOptions:
    values = {}
    for name in _INT_FIELDS:
        raw = _arg(name)
        if raw is None:
            continue
        try:
            values[name] = int(raw)
        except ValueError:
            abort(400, description=f"Query parameter {name} must be an integer, got {raw!r}")

    dither = _arg("dither")
    return ImageOptions(
        format=_arg("format"),
        dither=dither.lower() in ("1", "true", "yes", "on") if dither else None,
        palette=_arg("palette"),
        colormap=_arg("colormap"),
        **values,
    )


def _decode_upload() -> Image.Image:
    upload = request.files.get("image")
    data = upload.read() if upload is not None else request.get_data()
    if not data:
        raise IOFailure("Request body does not contain an image")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (OSError, Image.DecompressionBombError) as exc:
        raise IOFailure(f"Failed to decode uploaded image: {exc}") from exc
    return img


def _html_from_request() -> str:
    url = _arg("url")
    if url:
        if not is_url(url):
            abort(400, description=f"Not a fetchable URL: {url}")
        return FETCHER.fetch_text(url)
    html = request.get_data(as_text=True)
    if not html.strip():
        raise IOFailure("Request body does not contain HTML")
    return html


def create_app() -> Flask:
    configure_logging()
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = SETTINGS.max_upload_bytes

    @app.errorhandler(PipelineError)
    def pipeline_error(exc: PipelineError):
        app.logger.warning("Request failed: %s", exc)
        return error_response(exc)

    @app.route("/health")
    def health():
        return jsonify(ok=True, version=APP_VERSION, browser=SETTINGS.browser_bin)

    @app.route("/models")
    def models():
        return jsonify(models=[asdict(model) for model in MODELS.values()])

    @app.route("/palettes")
    def palettes():
        return jsonify(palettes=[asdict(palette) for palette in PALETTES.values()])

    @app.route("/image", methods=["POST"])
    def image():
        stage = ImageStage(options_from_request())
        model = _arg("model")
        if model:
            stage.configure_from_model(model)
        resolved, data = stage.encode(_decode_upload())
        return send_image(data, resolved.format)

    @app.route("/pipeline", methods=["POST"])
    def pipeline():
        options = options_from_request()
        pipeline = Pipeline()
        model = _arg("model")
        if model:
            pipeline.model(model)

        browser = BrowserStage().html(_html_from_request())
        timezone = _arg("timezone")
        if timezone:
            browser.timezone(timezone)

        image_stage = ImageStage(options)
        pipeline.pipe(browser).pipe(image_stage)

        result = pipeline.process()
        try:
            data = result.read_bytes()
        except OSError as exc:
            raise IOFailure(f"Failed to read pipeline output {result}: {exc}") from exc
        finally:
            discard(result)
        return send_image(data, result.suffix.lstrip(".") or "png")

    return app


# Module-level application for WSGI servers (``eink_pipeline.app:app``).
app = create_app()
application = app
