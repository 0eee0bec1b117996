from __future__ import annotations

import logging
import os
import subprocess
from functools import lru_cache
from pathlib import Path
from typing import FrozenSet, List, Optional, Sequence, Tuple
from zoneinfo import available_timezones

from ..config import SETTINGS
from ..errors import RenderFailure
from ..infrastructure.files import copy_into_place, discard, read_text, temporary_artifact
from .base import Stage

log = logging.getLogger(__name__)

DEFAULT_VIEWPORT: Tuple[int, int] = (800, 480)


@lru_cache(maxsize=1)
def _known_timezones() -> FrozenSet[str]:
    return frozenset(available_timezones())


def validate_timezone(name: str) -> str:
    if name not in _known_timezones():
        raise RenderFailure(f"Invalid timezone: {name}")
    return name


class ChromiumRenderer:
    """Screenshot HTML with a headless Chromium-compatible browser binary.

    The page is handed over as a temporary ``file://`` document and the
    browser writes the PNG itself. The call blocks until the browser exits;
    ``timeout`` is only enforced when configured.
    """

    def __init__(
        self,
        binary: Optional[str] = None,
        timeout: Optional[float] = None,
        extra_args: Sequence[str] = (),
    ) -> None:
        self.binary = binary or SETTINGS.browser_bin
        self.timeout = timeout if timeout is not None else SETTINGS.render_timeout
        self.extra_args = tuple(extra_args)

    def command(self, page: Path, output: Path, viewport: Tuple[int, int]) -> List[str]:
        width, height = viewport
        return [
            self.binary,
            "--headless=new",
            "--disable-gpu",
            "--no-sandbox",
            "--hide-scrollbars",
            "--force-device-scale-factor=1",
            f"--window-size={width},{height}",
            f"--screenshot={output}",
            *self.extra_args,
            page.resolve().as_uri(),
        ]

    def render(
        self,
        html: str,
        output: Path,
        viewport: Tuple[int, int] = DEFAULT_VIEWPORT,
        timezone: Optional[str] = None,
    ) -> Path:
        page = temporary_artifact("eink_page_", ".html")
        env = dict(os.environ)
        if timezone:
            env["TZ"] = timezone
        try:
            page.write_text(html, encoding="utf-8")
            args = self.command(page, output, viewport)
            log.info("Rendering %dx%d with %s", viewport[0], viewport[1], self.binary)
            completed = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=env,
                check=False,
            )
        except FileNotFoundError:
            raise RenderFailure(f"Browser binary not found: {self.binary}") from None
        except subprocess.TimeoutExpired:
            raise RenderFailure(f"Browser rendering timed out after {self.timeout}s") from None
        except OSError as exc:
            raise RenderFailure(f"Browser rendering failed: {exc}") from exc
        finally:
            discard(page)

        if completed.returncode != 0:
            detail = (completed.stderr or "").strip().splitlines()
            raise RenderFailure(
                f"Browser exited with status {completed.returncode}"
                + (f": {detail[-1]}" if detail else "")
            )
        if not output.exists() or output.stat().st_size == 0:
            raise RenderFailure(f"Browser produced no image at {output}")
        return output


class BrowserStage(Stage):
    """Render HTML to a raster artifact through an external browser."""

    name = "browser"

    def __init__(self, renderer: Optional[ChromiumRenderer] = None) -> None:
        super().__init__()
        self._renderer = renderer or ChromiumRenderer()
        self._html: Optional[str] = None
        self._viewport: Optional[Tuple[int, int]] = None
        self._timezone: Optional[str] = None

    def html(self, content: str) -> "BrowserStage":
        self._html = content
        return self

    def viewport(self, width: int, height: int) -> "BrowserStage":
        self._viewport = (int(width), int(height))
        return self

    def timezone(self, name: str) -> "BrowserStage":
        self._timezone = validate_timezone(name)
        return self

    @property
    def effective_viewport(self) -> Tuple[int, int]:
        if self._viewport is not None:
            return self._viewport
        if self._model is not None:
            return self._model.viewport
        return DEFAULT_VIEWPORT

    def __call__(self, input_path: Optional[Path] = None) -> Path:
        html = self._html
        if html is None:
            if input_path is None:
                raise RenderFailure("Browser stage has no HTML to render")
            html = read_text(input_path)

        rendered = temporary_artifact("eink_browser_", ".png")
        try:
            self._renderer.render(
                html,
                rendered,
                viewport=self.effective_viewport,
                timezone=self._timezone,
            )
            if self._output_path is None:
                return rendered
            copy_into_place(rendered, self._output_path)
        except BaseException:
            discard(rendered)
            raise
        discard(rendered)
        return self._output_path

