"""Infrastructure helpers for file artifacts, networking and HTTP responses."""

from .files import atomic_write, copy_into_place, discard, read_image, read_text, temporary_artifact
from .network import FETCHER, SourceFetcher, is_url
from .responses import error_response, send_image

__all__ = [
    "atomic_write",
    "copy_into_place",
    "discard",
    "read_image",
    "read_text",
    "temporary_artifact",
    "FETCHER",
    "SourceFetcher",
    "is_url",
    "error_response",
    "send_image",
]
