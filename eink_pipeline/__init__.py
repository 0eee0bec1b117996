"""Convert rendered HTML and raster images into e-ink display artifacts."""

from .app import APP_VERSION, app, create_app
from .pipeline import Pipeline
from .stages import BrowserStage, ImageStage
from . import catalog, infrastructure, processing

__version__ = APP_VERSION

__all__ = [
    "APP_VERSION",
    "__version__",
    "app",
    "create_app",
    "Pipeline",
    "BrowserStage",
    "ImageStage",
    "catalog",
    "infrastructure",
    "processing",
]
