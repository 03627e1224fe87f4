"""Substring tag/genre matching over content records.

Venues search their vibe tags one tag at a time, so 'hip' never matches
across the boundary of two joined tags. Events only carry a single genre
field next to the title.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from src.engine.content import ContentRecord, Venue

VENUE_FIELDS = ("vibe_tags", "music_genre", "name")
EVENT_FIELDS = ("genre", "name")


def default_fields(record: ContentRecord) -> tuple[str, ...]:
    return VENUE_FIELDS if isinstance(record, Venue) else EVENT_FIELDS


def field_values(record: ContentRecord, fields: Iterable[str]) -> list[str]:
    """Return lowercased candidate values; absent fields contribute nothing."""
    out: list[str] = []
    for name in fields:
        value = getattr(record, name, None)
        if isinstance(value, str):
            out.append(value.lower())
        elif isinstance(value, (list, tuple)):
            out.extend(str(item).lower() for item in value if item is not None)
    return out


def matches(
    record: ContentRecord,
    terms: Sequence[str],
    fields: Sequence[str] | None = None,
) -> bool:
    if not terms:
        return True
    values = field_values(record, fields if fields is not None else default_fields(record))
    lowered = [term.lower() for term in terms]
    return any(term in value for value in values for term in lowered)


def match_rule(
    terms: Sequence[str], fields: Sequence[str] | None = None
) -> Callable[[ContentRecord], bool]:
    frozen_terms = tuple(terms)
    frozen_fields = tuple(fields) if fields is not None else None

    def rule(record: ContentRecord) -> bool:
        return matches(record, frozen_terms, frozen_fields)

    return rule
