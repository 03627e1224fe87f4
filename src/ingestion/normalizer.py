from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Literal

from src.engine.content import ContentRecord, Event, Venue

EVENT_ONLY_KEYS = frozenset({"venue_name", "date", "start_time", "date_start"})
POPULARITY_KEYS = ("popularity_score", "popularityScore", "popularity", "viberyte_score")
TIMESTAMP_KEYS = ("date", "timestamp", "start_time", "date_start")
LATE_NIGHT_TAG = "late-night"


def _text(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value not in (None, ""):
            return value
    return None


def parse_number(raw: Any) -> float | None:
    if raw is None or isinstance(raw, bool):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def parse_price_level(raw: Any) -> int | None:
    """'$$' -> 2, '3' -> 3; anything else is unknown."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return int(raw)
    text = str(raw).strip()
    if text and set(text) == {"$"}:
        return len(text)
    numbers = re.findall(r"\d+", text)
    return int(numbers[0]) if numbers else None


def split_vibe_tags(raw: Any) -> tuple[str, ...]:
    """Accept a list, 'a, b' or '["a","b"]' and return clean per-tag values."""
    if raw is None:
        return ()
    if isinstance(raw, (list, tuple, set)):
        items = [str(item) for item in raw]
    else:
        items = (
            str(raw).replace("[", "").replace("]", "").replace('"', "").replace("'", "").split(",")
        )
    return tuple(tag for tag in (item.strip() for item in items) if tag)


def _special_features(raw: Any) -> str | None:
    if isinstance(raw, Mapping):
        return "hookah" if raw.get("has_hookah") is True else None
    return _text(raw)


def looks_like_event(raw: Mapping[str, Any]) -> bool:
    return any(key in raw for key in EVENT_ONLY_KEYS)


def normalize_venue(raw: Mapping[str, Any]) -> Venue:
    tags = split_vibe_tags(raw.get("vibe_tags"))
    if raw.get("late_night_spot") and LATE_NIGHT_TAG not in tags:
        tags = (*tags, LATE_NIGHT_TAG)
    return Venue(
        id=_text(raw.get("id")),
        name=_text(_first(raw, "name", "title")),
        category=_text(raw.get("category")),
        music_genre=_text(_first(raw, "music_genre", "music_genres", "musicGenre")),
        vibe_tags=tags,
        vibe_culture=_text(raw.get("vibe_culture")),
        lounge_type=_text(raw.get("lounge_type")),
        special_features=_special_features(raw.get("special_features")),
        neighborhood=_text(raw.get("neighborhood")),
        city=_text(raw.get("city")),
        rating=parse_number(raw.get("rating")),
        popularity_score=parse_number(_first(raw, *POPULARITY_KEYS)),
        price_level=parse_price_level(_first(raw, "price_level", "priceLevel", "price_range")),
        image_url=_text(_first(raw, "image_url", "cover_image_url")),
    )


def normalize_event(raw: Mapping[str, Any]) -> Event:
    return Event(
        id=_text(raw.get("id")),
        name=_text(_first(raw, "name", "title")),
        category=_text(raw.get("category")),
        genre=_text(_first(raw, "genre", "music_genre", "musicGenre")),
        event_type=_text(_first(raw, "event_type", "eventType")),
        venue_name=_text(raw.get("venue_name")),
        neighborhood=_text(raw.get("neighborhood")),
        city=_text(raw.get("city")),
        rating=parse_number(raw.get("rating")),
        popularity_score=parse_number(_first(raw, *POPULARITY_KEYS)),
        price_level=parse_price_level(_first(raw, "price_level", "priceLevel", "price_range")),
        timestamp=_text(_first(raw, *TIMESTAMP_KEYS)),
        image_url=_text(_first(raw, "image_url", "cover_image_url")),
    )


def normalize_record(
    raw: Mapping[str, Any], kind: Literal["venue", "event"] | None = None
) -> ContentRecord:
    if kind is None:
        kind = "event" if looks_like_event(raw) else "venue"
    return normalize_event(raw) if kind == "event" else normalize_venue(raw)


def normalize_records(
    raw_records: list[Any], kind: Literal["venue", "event"] | None = None
) -> list[ContentRecord]:
    return [normalize_record(item, kind) for item in raw_records if isinstance(item, Mapping)]
