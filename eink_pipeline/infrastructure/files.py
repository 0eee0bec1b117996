from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from PIL import Image

from ..config import SETTINGS
from ..errors import IOFailure

log = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def temporary_artifact(prefix: str, suffix: str) -> Path:
    """Reserve a fresh file path in the configured temp directory."""
    os.makedirs(SETTINGS.tmp_dir, exist_ok=True)
    fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=SETTINGS.tmp_dir)
    os.close(fd)
    return Path(name)


def discard(path: PathLike) -> None:
    try:
        Path(path).unlink()
        log.debug("Removed artifact %s", path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        log.warning("Could not remove artifact %s: %s", path, exc)


def read_image(path: PathLike) -> Image.Image:
    try:
        with Image.open(path) as img:
            img.load()
            return img.copy()
    except FileNotFoundError:
        raise IOFailure(f"Input file not found: {path}") from None
    except (OSError, Image.DecompressionBombError) as exc:
        raise IOFailure(f"Failed to read image {path}: {exc}") from exc


def read_text(path: PathLike) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise IOFailure(f"Input file not found: {path}") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise IOFailure(f"Failed to read input file {path}: {exc}") from exc


def atomic_write(path: PathLike, data: bytes) -> Path:
    """Write ``data`` to ``path`` so readers never observe a partial file.

    Bytes go to a sibling temp file that replaces ``path`` only once fully
    written; on failure the destination is left untouched.
    """

    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".part", dir=target.parent)
    except OSError as exc:
        raise IOFailure(f"Failed to write output file {target}: {exc}") from exc

    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.replace(tmp_name, target)
    except OSError as exc:
        discard(tmp_name)
        raise IOFailure(f"Failed to write output file {target}: {exc}") from exc
    return target


def copy_into_place(source: PathLike, destination: PathLike) -> Path:
    try:
        data = Path(source).read_bytes()
    except OSError as exc:
        raise IOFailure(f"Failed to copy image to output location {destination}: {exc}") from exc
    return atomic_write(destination, data)
