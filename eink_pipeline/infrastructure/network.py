from __future__ import annotations

import logging
import time
from typing import Callable
from urllib.parse import urlsplit

import requests

from ..config import SETTINGS
from ..errors import IOFailure

log = logging.getLogger(__name__)

SessionFactory = Callable[[], requests.Session]


def is_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class SourceFetcher:
    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory or requests.Session
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        session = self._session_factory()
        session.headers.update({"User-Agent": "eink-pipeline/1.0"})
        return session

    def fetch(self, url: str) -> requests.Response:
        last_exception: Exception | None = None
        for attempt in range(1, SETTINGS.source_retries + 2):
            try:
                response = self._session.get(url, timeout=SETTINGS.source_timeout)
                response.raise_for_status()
                return response
            except requests.RequestException as exc:
                last_exception = exc
                log.warning("Fetching %s failed (attempt %d): %s", url, attempt, exc)
                if attempt <= SETTINGS.source_retries:
                    time.sleep(0.4 * attempt)
        raise IOFailure(f"Failed to fetch content from URL: {url} ({last_exception})")

    def fetch_text(self, url: str) -> str:
        log.info("Fetching content from URL: %s", url)
        return self.fetch(url).text

    def fetch_bytes(self, url: str) -> bytes:
        log.info("Fetching image from URL: %s", url)
        return self.fetch(url).content


FETCHER = SourceFetcher()
