from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from src.engine.collection_builder import by_timestamp_asc
from src.engine.content import ContentRecord, Venue, record_timestamp
from src.engine.matcher import field_values, matches
from src.utils.temporal import FRIDAY, days_from_today, parse_timestamp

DEFAULT_SEARCH_CAP = 20
EVENT_SEARCH_FIELDS = ("name", "venue_name", "genre", "event_type")
VENUE_SEARCH_FIELDS = ("name", "neighborhood", "music_genre")
GENRE_FACET_FIELDS = ("genre", "name")
TYPE_FACET_FIELDS = ("event_type", "name")
WEEK_DAYS = 7


def search_fields(record: ContentRecord) -> tuple[str, ...]:
    return VENUE_SEARCH_FIELDS if isinstance(record, Venue) else EVENT_SEARCH_FIELDS


def search(
    records: Sequence[ContentRecord], query: str, cap: int = DEFAULT_SEARCH_CAP
) -> list[ContentRecord]:
    """Return records whose searchable fields contain ``query``.

    A blank query returns an empty list, as does a query that matches nothing;
    callers tell the two apart by checking the query themselves. Results keep
    the input order.
    """
    needle = (query or "").strip().lower()
    if not needle:
        return []
    hits = [r for r in records if any(needle in v for v in field_values(r, search_fields(r)))]
    return hits[:cap]


def _matches_day(record: ContentRecord, facet: str, now: datetime) -> bool:
    ts = record_timestamp(record)
    diff = days_from_today(ts, now)
    if diff is None:
        return False
    facet = facet.strip().lower()
    if facet == "tonight":
        return diff == 0
    if facet == "tomorrow":
        return 0 <= diff <= 1
    if facet in ("this week", "thisweek"):
        return 0 <= diff <= WEEK_DAYS
    if facet == "weekend":
        dt = parse_timestamp(ts)
        return dt is not None and dt.weekday() >= FRIDAY and 0 <= diff <= WEEK_DAYS
    return True


def filter_events(
    records: Sequence[ContentRecord],
    *,
    now: datetime,
    genre: Sequence[str] | None = None,
    day: Sequence[str] | None = None,
    event_type: Sequence[str] | None = None,
) -> list[ContentRecord]:
    """Apply the explore facets and return matches soonest first.

    Values within one facet are alternatives; facets combine with AND. Genre
    and type values also match the title. Any day facet drops undated records.
    Undated records otherwise sort last.
    """
    filtered = list(records)
    if genre:
        filtered = [r for r in filtered if matches(r, genre, GENRE_FACET_FIELDS)]
    if day:
        filtered = [r for r in filtered if any(_matches_day(r, d, now) for d in day)]
    if event_type:
        filtered = [r for r in filtered if matches(r, event_type, TYPE_FACET_FIELDS)]
    return sorted(filtered, key=by_timestamp_asc)
