from __future__ import annotations

from datetime import datetime

import pytest

from src.engine.content import Event, Venue

# Wednesday; the upcoming weekend window is Fri 2026-10-16 .. Sun 2026-10-18.
NOW = datetime(2026, 10, 14, 20, 0, 0)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_events() -> list[Event]:
    return [
        Event(id="1", name="Afro Fest", genre="Afrobeats", timestamp="2026-10-14T22:00:00"),
        Event(id="2", name="Salsa Night", genre="Latin", timestamp="2026-10-24T21:00:00"),
        Event(
            id="3",
            name="Warehouse Rave",
            genre="Techno / House",
            venue_name="Brooklyn Mirage",
            timestamp="2026-10-17T23:00:00",
            popularity_score=90,
        ),
        Event(id="4", name="Bottomless Brunch Party", genre=None, timestamp=None),
        Event(id="5", name="Old Jazz Set", genre="Jazz", timestamp="2026-10-01T20:00:00"),
    ]


@pytest.fixture
def sample_venues() -> list[Venue]:
    return [
        Venue(
            id="v1",
            name="Sky Rooftop",
            category="lounge",
            lounge_type="rooftop",
            music_genre="House",
            vibe_tags=("rooftop", "upscale"),
            rating=4.6,
            popularity_score=80,
        ),
        Venue(
            id="v2",
            name="Club Lagos",
            category="club",
            music_genre="Afrobeats, Amapiano",
            vibe_tags=("late-night",),
            rating=4.2,
        ),
        Venue(
            id="v3",
            name="The Den",
            category="bar",
            lounge_type="dive-bar",
            vibe_tags=("casual",),
            rating=None,
            popularity_score=55,
        ),
    ]
