"""Tests for collection building and temporal content buckets."""

from __future__ import annotations

import pytest

from src.engine.collection_builder import (
    CollectionSpec,
    bucket_by_time,
    build_collections,
    by_score_desc,
    by_timestamp_asc,
    drop_past,
    match_all,
    select_hero,
    tonight_rule,
    weekend_rule,
)
from src.engine.content import Event, Venue
from src.engine.matcher import match_rule


def _names(collection) -> list[str]:
    return [r.name for r in collection.items]


def test_afrobeats_row_end_to_end(now):
    events = [
        Event(name="Afro Fest", genre="Afrobeats", timestamp="2026-10-14T21:00:00"),
        Event(name="Salsa Night", genre="Latin", timestamp="2026-10-24T21:00:00"),
    ]
    spec = CollectionSpec(label="Afrobeats", match_rule=match_rule(["afrobeats"]), cap=15)
    result = build_collections(events, [spec], now=now)
    assert len(result) == 1
    assert result[0].label == "Afrobeats"
    assert _names(result[0]) == ["Afro Fest"]


def test_every_item_satisfies_its_rule_and_cap(sample_events, sample_venues, now):
    records = [*sample_events, *sample_venues]
    specs = [
        CollectionSpec(label="House", match_rule=match_rule(["house"]), cap=1),
        CollectionSpec(label="All", match_rule=match_all, cap=3),
        CollectionSpec(label="Tonight", match_rule=tonight_rule(now), cap=5),
    ]
    result = build_collections(records, specs, now=now)
    by_label = {c.label: c for c in result}
    for spec in specs:
        collection = by_label[spec.label]
        assert 0 < len(collection.items) <= spec.cap
        assert all(spec.match_rule(r) for r in collection.items)


def test_empty_collections_are_dropped(sample_events):
    specs = [
        CollectionSpec(label="Polka", match_rule=match_rule(["polka"])),
        CollectionSpec(label="Jazz", match_rule=match_rule(["jazz"])),
    ]
    result = build_collections(sample_events, specs)
    assert [c.label for c in result] == ["Jazz"]


def test_empty_input_gives_no_collections(now):
    spec = CollectionSpec(label="All", match_rule=match_all)
    assert build_collections([], [spec], now=now) == []


def test_cap_must_be_positive():
    with pytest.raises(ValueError):
        CollectionSpec(label="Broken", match_rule=match_all, cap=0)


def test_score_sort_is_descending_with_missing_as_zero():
    records = [
        Event(name="No score"),
        Event(name="Low", popularity_score=10),
        Event(name="High", popularity_score=99),
    ]
    spec = CollectionSpec(label="Trending", match_rule=match_all, sort_key=by_score_desc("popularity_score"))
    result = build_collections(records, [spec])
    assert _names(result[0]) == ["High", "Low", "No score"]


def test_sort_is_stable_for_equal_keys():
    a = Event(name="A", popularity_score=5)
    b = Event(name="B", popularity_score=5)
    top = Event(name="Top", popularity_score=50)
    spec = CollectionSpec(label="Trending", match_rule=match_all, sort_key=by_score_desc("popularity_score"))

    first = build_collections([a, top, b], [spec])
    swapped = build_collections([b, top, a], [spec])
    assert _names(first[0]) == ["Top", "A", "B"]
    assert _names(swapped[0]) == ["Top", "B", "A"]
    assert build_collections([a, top, b], [spec]) == first


def test_timestamp_sort_puts_undated_last():
    records = [
        Event(name="Undated"),
        Event(name="Later", timestamp="2026-10-20T21:00:00"),
        Event(name="Sooner", timestamp="2026-10-15T21:00:00"),
    ]
    spec = CollectionSpec(label="By date", match_rule=match_all, sort_key=by_timestamp_asc)
    assert _names(build_collections(records, [spec])[0]) == ["Sooner", "Later", "Undated"]


def test_record_can_appear_in_several_collections():
    event = Event(name="Afro Heat", genre="Afrobeats", popularity_score=100)
    specs = [
        CollectionSpec(label="Trending", match_rule=match_all, sort_key=by_score_desc("popularity_score")),
        CollectionSpec(label="Afrobeats Nights", match_rule=match_rule(["afrobeats"])),
    ]
    result = build_collections([event], specs)
    assert [c.items for c in result] == [(event,), (event,)]


def test_now_drops_past_events_but_keeps_undated_and_venues(sample_events, sample_venues, now):
    spec = CollectionSpec(label="All", match_rule=match_all, cap=50)
    names = _names(build_collections([*sample_events, *sample_venues], [spec], now=now)[0])
    assert "Old Jazz Set" not in names
    assert "Bottomless Brunch Party" in names
    assert "Sky Rooftop" in names
    assert len(drop_past(sample_events, now)) == len(sample_events) - 1


def test_temporal_rules_only_accept_dated_events(sample_events, sample_venues, now):
    tonight = tonight_rule(now)
    weekend = weekend_rule(now)
    assert [e.name for e in sample_events if tonight(e)] == ["Afro Fest"]
    assert [e.name for e in sample_events if weekend(e)] == ["Warehouse Rave"]
    assert not any(tonight(v) or weekend(v) for v in sample_venues)


def test_bucket_by_time_keeps_undated_visible(sample_events, sample_venues, now):
    buckets = bucket_by_time([*sample_events, *sample_venues], now)
    assert [r.name for r in buckets.tonight] == ["Afro Fest"]
    assert [r.name for r in buckets.past] == ["Old Jazz Set"]
    assert [r.name for r in buckets.upcoming] == ["Salsa Night", "Warehouse Rave"]
    assert [r.name for r in buckets.this_weekend] == ["Warehouse Rave"]
    assert "Bottomless Brunch Party" in [r.name for r in buckets.no_date]
    assert all(isinstance(v, Venue) for v in buckets.no_date[1:])


def test_bucket_by_time_treats_garbage_timestamp_as_no_date(now):
    broken = Event(name="Broken", timestamp="sometime soon")
    buckets = bucket_by_time([broken], now)
    assert buckets.no_date == [broken]
    assert buckets.tonight == buckets.past == buckets.upcoming == []


def test_hero_prefers_most_complete_tonight_event_with_image(now):
    events = [
        Event(name="Bare", timestamp="2026-10-14T21:00:00", image_url="a.jpg"),
        Event(name="No Image", genre="House", venue_name="Loft", timestamp="2026-10-14T22:00:00"),
        Event(
            name="Full",
            genre="Afrobeats",
            venue_name="Lagos",
            timestamp="2026-10-14T23:00:00",
            image_url="b.jpg",
        ),
    ]
    assert select_hero(events, now).name == "Full"


def test_hero_falls_back_to_soonest_event_with_image(now):
    events = [
        Event(name="Past", timestamp="2026-10-01T21:00:00", image_url="p.jpg"),
        Event(name="Later", timestamp="2026-10-24T21:00:00", image_url="l.jpg"),
        Event(name="Undated", image_url="u.jpg"),
        Event(name="Sooner", timestamp="2026-10-17T21:00:00", image_url="s.jpg"),
        Event(name="Soonest No Image", timestamp="2026-10-15T21:00:00"),
    ]
    assert select_hero(events, now).name == "Sooner"


def test_hero_is_none_without_images(sample_events, sample_venues, now):
    assert select_hero([*sample_events, *sample_venues], now) is None
