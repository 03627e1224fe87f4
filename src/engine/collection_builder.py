"""Collection building for horizontal content rows.

Each CollectionSpec filters the full content list, optionally sorts it with a
stable key, and caps the result. Rows that end up empty are dropped. A record
may land in more than one row.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.engine.content import ContentRecord, Event, record_timestamp
from src.utils.temporal import is_past, is_this_weekend, is_tonight, parse_timestamp

DEFAULT_CAP = 15


@dataclass(frozen=True)
class CollectionSpec:
    label: str
    match_rule: Callable[[ContentRecord], bool]
    sort_key: Callable[[ContentRecord], Any] | None = None
    cap: int = DEFAULT_CAP

    def __post_init__(self) -> None:
        if self.cap <= 0:
            raise ValueError(f"Collection '{self.label}' cap must be > 0, got {self.cap}")


@dataclass(frozen=True)
class Collection:
    label: str
    items: tuple[ContentRecord, ...]


@dataclass
class ContentBuckets:
    tonight: list[ContentRecord] = field(default_factory=list)
    this_weekend: list[ContentRecord] = field(default_factory=list)
    upcoming: list[ContentRecord] = field(default_factory=list)
    past: list[ContentRecord] = field(default_factory=list)
    no_date: list[ContentRecord] = field(default_factory=list)


def by_score_desc(field_name: str) -> Callable[[ContentRecord], float]:
    """Descending by a numeric field; a missing value ranks as 0."""

    def key(record: ContentRecord) -> float:
        value = getattr(record, field_name, None)
        return -float(value or 0.0)

    return key


def by_timestamp_asc(record: ContentRecord) -> tuple[int, datetime]:
    dt = parse_timestamp(record_timestamp(record))
    if dt is None:
        return (1, datetime.max)
    return (0, dt)


def match_all(record: ContentRecord) -> bool:
    return True


def tonight_rule(now: datetime) -> Callable[[ContentRecord], bool]:
    def rule(record: ContentRecord) -> bool:
        return isinstance(record, Event) and is_tonight(record.timestamp, now)

    return rule


def weekend_rule(now: datetime) -> Callable[[ContentRecord], bool]:
    def rule(record: ContentRecord) -> bool:
        return isinstance(record, Event) and is_this_weekend(record.timestamp, now)

    return rule


def drop_past(records: Sequence[ContentRecord], now: datetime) -> list[ContentRecord]:
    """Remove events dated before today; undated events and venues stay."""
    return [r for r in records if not is_past(record_timestamp(r), now)]


def build_collections(
    records: Sequence[ContentRecord],
    specs: Sequence[CollectionSpec],
    now: datetime | None = None,
) -> list[Collection]:
    """Build the ordered list of non-empty collections.

    Args:
        records: Full content list as fetched.
        specs: Rows to build, in display order.
        now: When given, events in the past are removed before matching.

    Returns:
        One Collection per spec with at least one match, each capped.
    """
    pool = drop_past(records, now) if now is not None else list(records)
    out: list[Collection] = []
    for spec in specs:
        filtered = [r for r in pool if spec.match_rule(r)]
        if spec.sort_key is not None:
            filtered = sorted(filtered, key=spec.sort_key)
        items = tuple(filtered[: spec.cap])
        if items:
            out.append(Collection(label=spec.label, items=items))
    return out


def _hero_completeness(event: Event) -> int:
    return int(bool(event.genre)) + int(bool(event.venue_name))


def select_hero(records: Sequence[ContentRecord], now: datetime) -> Event | None:
    """Pick the banner event.

    Prefers tonight's events with an image, most complete first. Otherwise
    the soonest non-past event with an image. Ties keep input order.
    """
    with_images = [r for r in records if isinstance(r, Event) and r.image_url]
    tonight = [e for e in with_images if is_tonight(e.timestamp, now)]
    if tonight:
        return max(tonight, key=_hero_completeness)
    upcoming = [e for e in with_images if not is_past(e.timestamp, now)]
    if not upcoming:
        return None
    return min(upcoming, key=by_timestamp_asc)


def bucket_by_time(records: Sequence[ContentRecord], now: datetime) -> ContentBuckets:
    """Split records into temporal buckets.

    Dated events fall in exactly one of tonight/upcoming/past and may also
    appear in this_weekend. Venues and unknown timestamps go to no_date.
    """
    buckets = ContentBuckets()
    for record in records:
        ts = record_timestamp(record)
        if parse_timestamp(ts) is None:
            buckets.no_date.append(record)
            continue
        if is_tonight(ts, now):
            buckets.tonight.append(record)
        elif is_past(ts, now):
            buckets.past.append(record)
        else:
            buckets.upcoming.append(record)
        if is_this_weekend(ts, now):
            buckets.this_weekend.append(record)
    return buckets
