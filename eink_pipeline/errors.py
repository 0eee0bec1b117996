"""Error taxonomy shared by the registries, the engine and the pipeline.

Callers match on the exception class (or its ``kind``) rather than on the
message text.
"""

from __future__ import annotations


class PipelineError(RuntimeError):
    kind = "pipeline_error"


class InvalidModel(PipelineError):
    kind = "invalid_model"


class InvalidPalette(PipelineError):
    kind = "invalid_palette"


class InvalidColormap(PipelineError):
    kind = "invalid_colormap"


class GeometryError(PipelineError):
    """Bad rotation, dimension or format/bit-depth combination."""

    kind = "geometry_error"


class PaletteError(PipelineError):
    """Bit depth does not fit the requested color count or colormap."""

    kind = "palette_error"


class RenderFailure(PipelineError):
    kind = "render_failure"


class IOFailure(PipelineError):
    kind = "io_failure"


__all__ = [
    "PipelineError",
    "InvalidModel",
    "InvalidPalette",
    "InvalidColormap",
    "GeometryError",
    "PaletteError",
    "RenderFailure",
    "IOFailure",
]
