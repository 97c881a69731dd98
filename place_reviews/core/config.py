"""Application configuration helpers.

`GOOGLE_API_KEY` is the only mandatory value; it is a billable key and must
come from the environment (or a local `.env`), never from `clients.json`.
"""

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised when mandatory configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    clients_file: Path = Path("clients.json")
    data_dir: Path = Path("data")
    cache_duration: timedelta = timedelta(hours=24)
    request_delay: float = 1.0
    request_timeout: Optional[float] = None


def _get_required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigError(f"{name} must be set in the environment to refresh place reviews.")
    return value


def _get_float_env(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be numeric, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load, validate and cache settings from environment variables."""
    load_dotenv()

    google_api_key = _get_required_env("GOOGLE_API_KEY")
    clients_file = Path(os.getenv("REVIEWS_CLIENTS_FILE") or "clients.json")
    data_dir = Path(os.getenv("REVIEWS_DATA_DIR") or "data")
    cache_hours = _get_float_env("REVIEWS_CACHE_HOURS", 24.0)
    request_delay = _get_float_env("REVIEWS_REQUEST_DELAY", 1.0)
    request_timeout = _get_float_env("REVIEWS_REQUEST_TIMEOUT", None)

    if request_delay < 0:
        raise ConfigError("REVIEWS_REQUEST_DELAY must not be negative")
    if request_timeout is None:
        logger.debug("REVIEWS_REQUEST_TIMEOUT is not set; Places requests will wait indefinitely.")

    return Settings(
        google_api_key=google_api_key,
        clients_file=clients_file,
        data_dir=data_dir,
        cache_duration=timedelta(hours=cache_hours),
        request_delay=request_delay,
        request_timeout=request_timeout,
    )
