"""File helpers for the client list and the per-client result cache."""

import json
import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from place_reviews.core.config import ConfigError
from place_reviews.models import CachedResult, Client

logger = logging.getLogger(__name__)

_CLIENT_LIST = TypeAdapter(List[Client])


class CacheReadError(RuntimeError):
    """Raised when an existing result file cannot be parsed."""


def load_clients(path: Path) -> List[Client]:
    """Read and validate the client list; any problem aborts the whole run."""
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Unable to read client list {path}: {exc}") from exc

    try:
        clients = _CLIENT_LIST.validate_python(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid client list {path}: {exc}") from exc

    seen = set()
    for client in clients:
        if client.slug in seen:
            raise ConfigError(f"Duplicate client slug {client.slug!r} in {path}")
        seen.add(client.slug)

    logger.info("Loaded %d clients from %s", len(clients), path)
    return clients


def result_path(data_dir: Path, slug: str) -> Path:
    return data_dir / f"{slug}.json"


def read_result(path: Path) -> CachedResult:
    try:
        return CachedResult.model_validate_json(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValidationError) as exc:
        raise CacheReadError(f"Malformed cache file {path}: {exc}") from exc


def is_fresh(path: Path, max_age: timedelta, now: Optional[datetime] = None) -> bool:
    """Return True when `path` exists and was last updated less than `max_age` ago."""
    if not path.exists():
        return False

    last_updated = read_result(path).last_updated
    if last_updated.tzinfo is None:
        last_updated = last_updated.replace(tzinfo=timezone.utc)
    age = (now or datetime.now(timezone.utc)) - last_updated
    return age < max_age


def write_result(path: Path, result: CachedResult) -> None:
    """Write `result` next to its final location, then swap it in atomically."""
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(result.to_json_dict(), fh, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug("Saved %s", path)
