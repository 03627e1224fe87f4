from __future__ import annotations

import sys
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

import yaml  # type: ignore[import-untyped]

from src.engine.collection_builder import (
    DEFAULT_CAP,
    CollectionSpec,
    by_score_desc,
    by_timestamp_asc,
    tonight_rule,
    weekend_rule,
)
from src.engine.content import ContentRecord, Venue
from src.engine.matcher import matches

NIGHTLIFE_CATEGORIES = frozenset({"nightlife", "lounge", "bar", "club"})
VENUE_CULTURE_FIELDS = ["vibe_culture", "music_genre", "vibe_tags"]

DEFAULT_EVENT_MENU = [
    {"label": "🔥 Trending Events", "sort": "popularity"},
    {"label": "📅 This Weekend", "when": "weekend"},
    {"label": "🌙 Tonight", "when": "tonight"},
    {"label": "🎵 Afrobeats Nights", "terms": ["afrobeats"]},
    {
        "label": "🕺 Latin Nights",
        "terms": ["latin", "reggaeton", "salsa"],
        "fields": ["genre"],
        "also": {"terms": ["latin"], "fields": ["name"]},
    },
    {"label": "🎧 EDM & House", "terms": ["edm", "house", "techno"], "fields": ["genre"]},
    {
        "label": "🎤 Hip-Hop Events",
        "terms": ["hip-hop", "hiphop", "hip hop", "rap"],
        "fields": ["genre"],
    },
    {"label": "🍾 Brunch Parties", "terms": ["brunch"]},
    {"label": "🎷 R&B & Soul", "terms": ["r&b", "rnb", "soul"], "fields": ["genre"]},
    {"label": "📍 Popular Near You", "sort": "popularity"},
]

DEFAULT_NIGHTLIFE_MENU = [
    {"label": "🔥 Saturday's Moves", "sort": "popularity"},
    {
        "label": "🛋️ Lounges",
        "terms": ["lounge"],
        "fields": ["category", "lounge_type"],
        "sort": "rating",
    },
    {"label": "🍸 Bars", "terms": ["bar"], "fields": ["category", "lounge_type"], "sort": "rating"},
    {
        "label": "🕺 Clubs",
        "terms": ["club"],
        "fields": ["category", "lounge_type"],
        "sort": "popularity",
    },
    {
        "label": "🌃 Rooftops",
        "terms": ["rooftop"],
        "fields": ["lounge_type", "name"],
        "sort": "rating",
    },
    {
        "label": "🌙 Late Night",
        "terms": ["late-night", "after-hours"],
        "fields": ["lounge_type", "vibe_tags"],
        "sort": "rating",
    },
    {
        "label": "🌴 Caribbean Vibes",
        "terms": ["caribbean", "reggae", "soca", "dancehall"],
        "fields": VENUE_CULTURE_FIELDS,
        "sort": "rating",
    },
    {
        "label": "🌶️ Latin Vibes",
        "terms": ["latin", "salsa", "reggaeton", "bachata"],
        "fields": VENUE_CULTURE_FIELDS,
        "sort": "rating",
    },
    {
        "label": "🇩🇴 Dominican Vibes",
        "terms": ["dominican", "dembow", "bachata"],
        "fields": VENUE_CULTURE_FIELDS,
        "sort": "rating",
    },
    {
        "label": "🎶 Afrobeats",
        "terms": ["afrobeats", "afro", "amapiano"],
        "fields": VENUE_CULTURE_FIELDS,
        "sort": "popularity",
    },
    {
        "label": "💨 Hookah Lounges",
        "terms": ["hookah"],
        "fields": ["special_features", "lounge_type"],
        "sort": "rating",
    },
    {"label": "🎤 Hip-Hop", "terms": ["hip-hop", "hiphop", "rap"], "fields": VENUE_CULTURE_FIELDS},
    {
        "label": "🎷 R&B & Jazz",
        "terms": ["r&b", "rnb", "jazz", "soul"],
        "fields": VENUE_CULTURE_FIELDS,
        "also": {"terms": ["jazz-lounge"], "fields": ["lounge_type"]},
    },
]

SORT_KEYS = {
    "popularity": by_score_desc("popularity_score"),
    "rating": by_score_desc("rating"),
    "date": by_timestamp_asc,
}


WHEN_VALUES = frozenset({"tonight", "weekend"})


@dataclass(frozen=True)
class MenuEntry:
    label: str
    terms: tuple[str, ...] = ()
    fields: tuple[str, ...] | None = None
    also_terms: tuple[str, ...] = ()
    also_fields: tuple[str, ...] | None = None
    when: str | None = None
    sort: str | None = None
    cap: int = DEFAULT_CAP


def nightlife_venues(records: list[ContentRecord]) -> list[ContentRecord]:
    """Keep venues whose category is one of the nightlife categories."""
    return [r for r in records if isinstance(r, Venue) and r.category in NIGHTLIFE_CATEGORIES]


def _log_menu_entry(kind: str, label: str, error: str) -> None:
    msg = f"[CONFIG] menu={kind} entry={label or '?'} status=skipped error={error}"
    print(msg, file=sys.stderr)


def _str_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item) for item in value if str(item).strip())


def _coerce_entry(item: dict[str, Any], default_cap: int = DEFAULT_CAP) -> MenuEntry:
    """Build a MenuEntry, raising ValueError for values that would change its meaning."""
    fields = item.get("fields")
    also = item.get("also") if isinstance(item.get("also"), dict) else {}
    also_fields = also.get("fields")
    when = item.get("when")
    if when is not None and (not isinstance(when, str) or when not in WHEN_VALUES):
        raise ValueError(f"unknown when={when!r}")
    sort = item.get("sort")
    if sort is not None and (not isinstance(sort, str) or sort not in SORT_KEYS):
        raise ValueError(f"unknown sort={sort!r}")
    cap = item.get("cap", default_cap)
    if isinstance(cap, bool) or not isinstance(cap, int) or cap <= 0:
        raise ValueError(f"cap must be a positive integer, got {cap!r}")
    return MenuEntry(
        label=str(item.get("label", "")).strip(),
        terms=_str_tuple(item.get("terms")),
        fields=_str_tuple(fields) if fields is not None else None,
        also_terms=_str_tuple(also.get("terms")),
        also_fields=_str_tuple(also_fields) if also_fields is not None else None,
        when=when,
        sort=sort,
        cap=cap,
    )


def default_menu(
    kind: Literal["events", "venues"], default_cap: int = DEFAULT_CAP
) -> list[MenuEntry]:
    raw = DEFAULT_EVENT_MENU if kind == "events" else DEFAULT_NIGHTLIFE_MENU
    return [_coerce_entry(item, default_cap) for item in raw]


def load_menu(
    config_path: str, kind: Literal["events", "venues"], default_cap: int = DEFAULT_CAP
) -> list[MenuEntry]:
    """Read the ``events`` or ``venues`` menu from YAML, falling back to defaults.

    Entries without a label are dropped. Entries with an unknown ``when`` or
    ``sort``, or a bad ``cap``, are dropped with a ``[CONFIG]`` line.
    """
    path = Path(config_path)
    if not path.exists():
        return default_menu(kind, default_cap)
    payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    raw = payload.get(kind) if isinstance(payload, dict) else None
    if not isinstance(raw, list):
        return default_menu(kind, default_cap)

    entries: list[MenuEntry] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        try:
            entry = _coerce_entry(item, default_cap)
        except ValueError as exc:
            _log_menu_entry(kind, str(item.get("label", "")).strip(), str(exc))
            continue
        if entry.label:
            entries.append(entry)
    return entries


def _entry_rule(entry: MenuEntry, now: datetime) -> Callable[[ContentRecord], bool]:
    temporal = {"tonight": tonight_rule, "weekend": weekend_rule}.get(entry.when or "")
    when_rule = temporal(now) if temporal is not None else None

    def rule(record: ContentRecord) -> bool:
        if when_rule is not None and not when_rule(record):
            return False
        if matches(record, entry.terms, entry.fields):
            return True
        return bool(entry.also_terms) and matches(record, entry.also_terms, entry.also_fields)

    return rule


def menu_specs(entries: list[MenuEntry], now: datetime) -> list[CollectionSpec]:
    return [
        CollectionSpec(
            label=entry.label,
            match_rule=_entry_rule(entry, now),
            sort_key=SORT_KEYS.get(entry.sort or ""),
            cap=entry.cap,
        )
        for entry in entries
    ]
