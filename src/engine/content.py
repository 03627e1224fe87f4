from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union


@dataclass(frozen=True)
class Venue:
    kind: Literal["venue"] = "venue"
    id: str | None = None
    name: str | None = None
    category: str | None = None
    music_genre: str | None = None
    vibe_tags: tuple[str, ...] = ()
    vibe_culture: str | None = None
    lounge_type: str | None = None
    special_features: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    rating: float | None = None
    popularity_score: float | None = None
    price_level: int | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class Event:
    kind: Literal["event"] = "event"
    id: str | None = None
    name: str | None = None
    category: str | None = None
    genre: str | None = None
    event_type: str | None = None
    venue_name: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    rating: float | None = None
    popularity_score: float | None = None
    price_level: int | None = None
    timestamp: str | None = None
    image_url: str | None = None


ContentRecord = Union[Venue, Event]


def record_timestamp(record: ContentRecord) -> str | None:
    """Venues carry no timestamp; events may."""
    if isinstance(record, Event):
        return record.timestamp
    return None


def display_name(record: ContentRecord) -> str:
    return record.name or "Untitled"
