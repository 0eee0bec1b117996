import logging
import os
import tempfile
from dataclasses import dataclass
from typing import Optional


def _optional_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


@dataclass(frozen=True)
class Settings:
    browser_bin: str
    render_timeout: Optional[float]
    source_timeout: float
    source_retries: int
    port: int
    log_level: str
    tmp_dir: str
    max_upload_bytes: int

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            browser_bin=os.getenv("BROWSER_BIN", "chromium"),
            render_timeout=_optional_float(os.getenv("RENDER_TIMEOUT")),
            source_timeout=float(os.getenv("SOURCE_TIMEOUT", "10.0")),
            source_retries=int(os.getenv("SOURCE_RETRIES", "2")),
            port=int(os.getenv("PORT", "5500")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            tmp_dir=os.getenv("TMP_DIR", tempfile.gettempdir()),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(16 * 1024 * 1024))),
        )


SETTINGS = Settings.from_env()


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=SETTINGS.log_level)
    return logging.getLogger("eink-pipeline")
