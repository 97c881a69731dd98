"""CLI job that refreshes cached Google reviews for every configured client."""

import argparse
import asyncio
import enum
import logging
from collections import Counter
from dataclasses import replace
from datetime import timedelta
from pathlib import Path
from typing import Dict, List, Optional

import httpx

from place_reviews.core.config import ConfigError, Settings, get_settings
from place_reviews.core.storage import is_fresh, load_clients, result_path, write_result
from place_reviews.etl.transform import build_result
from place_reviews.models import Client
from place_reviews.vendors import google_places

logger = logging.getLogger(__name__)


class ClientOutcome(str, enum.Enum):
    CACHED = "cached"
    UPDATED = "updated"
    FALLBACK = "fallback"
    FAILED = "failed"


async def refresh_client(client: Client, index: int, settings: Settings, http: httpx.AsyncClient) -> ClientOutcome:
    """Run gate -> fetch -> transform -> write for one client, isolating its failures."""
    path = result_path(settings.data_dir, client.slug)
    try:
        await asyncio.sleep(index * settings.request_delay)

        if is_fresh(path, settings.cache_duration):
            logger.info("Using fresh cache for %s", client.slug)
            return ClientOutcome.CACHED

        details = await google_places.place_details(http, place_id=client.place_id, api_key=settings.google_api_key)
        result = build_result(client, details)
        write_result(path, result)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Refresh failed for %s: %s", client.slug, exc)
        if path.exists():
            logger.info("Using cached version for %s", client.slug)
            return ClientOutcome.FALLBACK
        logger.error("No fallback available for %s", client.slug)
        return ClientOutcome.FAILED

    logger.info("Updated %s (rating=%s, reviews=%d)", client.slug, result.rating, len(result.reviews))
    return ClientOutcome.UPDATED


async def run_refresh(settings: Settings, http: Optional[httpx.AsyncClient] = None) -> Dict[str, ClientOutcome]:
    clients = load_clients(settings.clients_file)
    settings.data_dir.mkdir(parents=True, exist_ok=True)

    if http is None:
        async with httpx.AsyncClient(timeout=settings.request_timeout) as owned:
            outcomes = await _refresh_all(clients, settings, owned)
    else:
        outcomes = await _refresh_all(clients, settings, http)

    summary = Counter(outcome.value for outcome in outcomes.values())
    logger.info("Completed run: clients=%d %s", len(clients), dict(sorted(summary.items())))
    return outcomes


async def _refresh_all(clients: List[Client], settings: Settings, http: httpx.AsyncClient) -> Dict[str, ClientOutcome]:
    results = await asyncio.gather(
        *(refresh_client(client, index, settings, http) for index, client in enumerate(clients))
    )
    return {client.slug: outcome for client, outcome in zip(clients, results)}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Refresh cached Google reviews and schema markup per client")
    parser.add_argument("--clients", dest="clients_file", type=Path, help="Path to clients.json")
    parser.add_argument("--data-dir", dest="data_dir", type=Path, help="Directory for per-client result files")
    parser.add_argument("--cache-hours", dest="cache_hours", type=float, help="Cache freshness window in hours")
    parser.add_argument("--delay", dest="request_delay", type=float, help="Seconds between client request starts")
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.clients_file is not None:
        overrides["clients_file"] = args.clients_file
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.cache_hours is not None:
        overrides["cache_duration"] = timedelta(hours=args.cache_hours)
    if args.request_delay is not None:
        overrides["request_delay"] = args.request_delay
    return replace(settings, **overrides)


def main(argv=None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        settings = apply_overrides(get_settings(), args)
        asyncio.run(run_refresh(settings))
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc


if __name__ == "__main__":
    main()
