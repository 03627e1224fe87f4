from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import requests

from src.config.collection_menus import load_menu, menu_specs, nightlife_venues
from src.config.settings import Settings, load_settings, validate_settings
from src.engine.collection_builder import build_collections
from src.engine.content import ContentRecord, display_name, record_timestamp
from src.engine.plans import load_plan, load_plan_item
from src.engine.search import search
from src.ingestion.content_feed import ContentFeed
from src.ingestion.lumina_api import fetch_events, fetch_venues
from src.utils.share_text import generate_share_code, generate_share_text, get_share_url
from src.utils.temporal import relative_label


def _describe(record: ContentRecord, now: datetime) -> str:
    ts = record_timestamp(record)
    if ts is None:
        return display_name(record)
    return f"{display_name(record)} ({relative_label(ts, now)})"


def _default_fetch(settings: Settings, kind: str, city: str) -> Callable[[], list[ContentRecord]]:
    if kind == "events":
        return lambda: fetch_events(
            settings.api_base_url,
            city,
            limit=settings.fetch_limit,
            timeout_seconds=settings.request_timeout_seconds,
        )
    return lambda: nightlife_venues(
        fetch_venues(
            settings.api_base_url,
            city,
            limit=settings.fetch_limit,
            timeout_seconds=settings.request_timeout_seconds,
        )
    )


def run_browse(
    settings: Settings,
    kind: str = "events",
    city: str | None = None,
    query: str | None = None,
    now: datetime | None = None,
    fetch: Callable[[], list[ContentRecord]] | None = None,
) -> dict[str, Any]:
    """Fetch content and return collections (or search hits) as plain dicts."""
    now = now or datetime.now()
    city = city or settings.default_city
    feed = ContentFeed(f"{kind}:{city}", verbose=settings.verbose_fetch_logs)
    try:
        feed.refresh(fetch or _default_fetch(settings, kind, city))
    except requests.RequestException as exc:
        return {"status": "failed", "error": str(exc)}

    records = feed.records
    if query is not None:
        hits = search(records, query, cap=settings.search_cap)
        return {"status": "ok", "results": [_describe(r, now) for r in hits]}

    entries = load_menu(
        settings.collections_config_path,
        "events" if kind == "events" else "venues",
        default_cap=settings.collection_cap,
    )
    collections = build_collections(records, menu_specs(entries, now), now=now)
    return {
        "status": "ok",
        "collections": [
            {"label": c.label, "items": [_describe(r, now) for r in c.items]} for c in collections
        ],
    }


def run_share(settings: Settings, payload: dict[str, Any]) -> str:
    """Render share text for a saved plan ``{"plan": {...}, "items": [...]}``."""
    plan = load_plan(payload["plan"])
    items = [
        load_plan_item(item, plan.id)
        for item in payload.get("items") or []
        if isinstance(item, dict)
    ]
    share_url = get_share_url(settings.share_base_url, plan.share_code or generate_share_code())
    return generate_share_text(plan, items, share_url)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Browse nightlife collections for a city.")
    parser.add_argument("--city", default=None)
    parser.add_argument("--kind", choices=["events", "venues"], default="events")
    parser.add_argument("--query", default=None)
    parser.add_argument(
        "--share-plan",
        default=None,
        help="Path to a saved plan JSON file; prints its share text instead of browsing.",
    )
    args = parser.parse_args(argv)

    settings = load_settings()
    errors = validate_settings(settings)
    if errors:
        for error in errors:
            print(f"[CONFIG] error={error}", file=sys.stderr)
        raise SystemExit(1)

    if args.share_plan:
        payload = json.loads(Path(args.share_plan).read_text(encoding="utf-8"))
        print(run_share(settings, payload))
        return

    result = run_browse(settings, kind=args.kind, city=args.city, query=args.query)
    if result["status"] == "failed":
        print(f"[BROWSE] status=failed error={result['error']}", file=sys.stderr)
        raise SystemExit(1)
    if "results" in result:
        for line in result["results"]:
            print(line)
        return
    for collection in result["collections"]:
        print(collection["label"])
        for line in collection["items"]:
            print(f"  {line}")


if __name__ == "__main__":
    main()
