from __future__ import annotations

import io

from flask import jsonify, send_file

from ..errors import IOFailure, PipelineError, RenderFailure

_MIMETYPES = {"png": "image/png", "bmp": "image/bmp"}

_STATUS_BY_ERROR = {
    RenderFailure: 502,
    IOFailure: 500,
}


def send_image(data: bytes, fmt: str):
    return send_file(io.BytesIO(data), mimetype=_MIMETYPES.get(fmt, "application/octet-stream"))


def error_response(exc: PipelineError):
    status = _STATUS_BY_ERROR.get(type(exc), 400)
    return jsonify(error=exc.kind, message=str(exc)), status
