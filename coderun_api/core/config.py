"""
Configuration helpers for the code run backend.

Exposes a frozen Settings object that reads environment variables (port,
storage path, body limit, CORS, log level) so that routers/services do not
fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_PORT = 4000
DEFAULT_MAX_BODY_BYTES = 2 * 1024 * 1024
DEFAULT_DATA_FILE = Path(__file__).resolve().parents[2] / "userdata.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    host: str
    port: int
    data_file: Path
    max_body_bytes: int
    cors_origins: tuple[str, ...]
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            return default
        return parsed if parsed > 0 else default

    def _csv(value: str | None, default: str) -> tuple[str, ...]:
        items = [item.strip() for item in (value or default).split(",") if item.strip()]
        return tuple(items) or (default,)

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        host=os.getenv("HOST") or "0.0.0.0",
        port=_int(os.getenv("PORT"), DEFAULT_PORT),
        data_file=Path(os.getenv("DATA_FILE") or DEFAULT_DATA_FILE),
        max_body_bytes=_int(os.getenv("MAX_BODY_BYTES"), DEFAULT_MAX_BODY_BYTES),
        cors_origins=_csv(os.getenv("CORS_ORIGINS"), "*"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
