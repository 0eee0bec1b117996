"""Pipeline stages: browser rendering and e-ink image quantization."""

from .base import Stage
from .browser import BrowserStage, ChromiumRenderer, validate_timezone
from .image import ImageStage

__all__ = ["Stage", "BrowserStage", "ChromiumRenderer", "validate_timezone", "ImageStage"]
