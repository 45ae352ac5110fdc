from __future__ import annotations

import itertools
import json

import pytest

from route360.io.trips import TripRepository, day_number
from route360.models import MarkerPoint, Place, Trip
from route360.pipeline.markers import trip_location_markers
from route360.storage import MemoryStore, UserScope


def _repo(store: MemoryStore | None = None) -> TripRepository:
    ticks = itertools.count(1000)
    return TripRepository(store or MemoryStore(), UserScope("u1"), clock=lambda: next(ticks))


def test_add_prepends_and_defaults_title() -> None:
    repo = _repo()
    first = repo.add("Japan Trip", start="2024-04-01", end="2024-04-10")
    second = repo.add("   ")
    assert second.title == "Untitled trip"
    assert [t.id for t in repo.trips()] == [second.id, first.id]
    assert first.id.startswith("t_")


def test_update_and_delete() -> None:
    repo = _repo()
    trip = repo.add("Japan Trip")
    repo.update(trip.id, title="Italy Trip", country="Italy")
    assert repo.get(trip.id).title == "Italy Trip"
    assert repo.get(trip.id).country == "Italy"
    with pytest.raises(ValueError):
        repo.update(trip.id, id="other")
    repo.delete(trip.id)
    assert repo.trips() == []
    with pytest.raises(KeyError):
        repo.delete(trip.id)


def test_itinerary_day_number_and_locations() -> None:
    repo = _repo()
    trip = repo.add("Lisbon", start="2024-05-01")
    item = repo.add_itinerary_item(trip.id, title="Tram", when="2024-05-03")
    assert item.day == 3
    loc = repo.add_location(trip.id, Place(label="Sintra, Portugal", lat=38.8, lng=-9.39))
    stored = repo.get(trip.id)
    assert stored.itinerary[0].title == "Tram"
    assert stored.locations[0].lat == 38.8
    repo.remove_location(trip.id, loc.id)
    assert repo.get(trip.id).locations == []
    with pytest.raises(KeyError):
        repo.remove_location(trip.id, loc.id)


def test_day_number_edges() -> None:
    assert day_number("2024-05-01", "2024-05-01") == 1
    assert day_number("", "2024-05-01") is None
    assert day_number("2024-05-01", "not a date") is None


def test_legacy_records_and_unknown_keys_survive() -> None:
    store = MemoryStore()
    raw = [{"id": "t_1", "title": "Kenya", "itineraries": [{"id": "a", "name": "Safari"}], "rating": 5}]
    store.set(UserScope("u1").trips_key, json.dumps(raw))
    repo = _repo(store)
    trip = repo.get("t_1")
    assert trip.itinerary[0].title == "Safari"
    repo.update("t_1", desc="Great")
    saved = json.loads(store.get(UserScope("u1").trips_key))[0]
    assert saved["rating"] == 5
    assert saved["desc"] == "Great"


def test_trip_from_dict_ignores_bad_coordinates() -> None:
    trip = Trip.from_dict({"id": "t", "title": "x", "locations": [{"id": "l", "title": "A", "lat": "1", "lng": 2}]})
    assert trip.locations[0].lat is None


def test_trip_from_dict_non_list_collections_read_empty() -> None:
    trip = Trip.from_dict({"id": "t", "title": "x", "itinerary": 3, "itineraries": [{"id": "a"}], "locations": {"a": 1}})
    assert [i.id for i in trip.itinerary] == ["a"]
    assert trip.locations == []
    assert Trip.from_dict("junk").id == ""  # type: ignore[arg-type]


def test_day_before_start_has_no_day_number() -> None:
    repo = _repo()
    trip = repo.add("Lisbon", start="2024-05-01")
    item = repo.add_itinerary_item(trip.id, title="Flight", when="2024-04-30")
    assert item.day is None
    assert "day" not in json.loads(repo.store.get(repo.scope.trips_key))[0]["itinerary"][0]


def test_update_itinerary_item_keeps_or_derives_day() -> None:
    repo = _repo()
    trip = repo.add("Lisbon", start="2024-05-01")
    tram = repo.add_itinerary_item(trip.id, title="Tram", when="2024-05-03")
    undated = repo.add_itinerary_item(trip.id, title="Fado")

    moved = repo.update_itinerary_item(trip.id, tram.id, title="Tram 28", when="2024-05-04", note="early")
    assert (moved.title, moved.day, moved.note) == ("Tram 28", 4, "early")

    kept = repo.update_itinerary_item(trip.id, tram.id, title="", when="")
    assert kept.title == "Activity"
    assert kept.day == 4

    positional = repo.update_itinerary_item(trip.id, undated.id, title="Fado night")
    assert positional.day == 2
    assert repo.get(trip.id).itinerary[1].title == "Fado night"

    with pytest.raises(KeyError):
        repo.update_itinerary_item(trip.id, "it_missing", title="x")


def test_delete_itinerary_item() -> None:
    repo = _repo()
    trip = repo.add("Lisbon")
    a = repo.add_itinerary_item(trip.id, title="A")
    b = repo.add_itinerary_item(trip.id, title="B")
    repo.delete_itinerary_item(trip.id, a.id)
    assert [i.id for i in repo.get(trip.id).itinerary] == [b.id]
    with pytest.raises(KeyError):
        repo.delete_itinerary_item(trip.id, a.id)


def test_set_itinerary_location_feeds_trip_pins() -> None:
    repo = _repo()
    trip = repo.add("Lisbon")
    item = repo.add_itinerary_item(trip.id, title="Palace")
    repo.set_itinerary_location(trip.id, item.id, Place(label="Sintra, Portugal", lat=38.8, lng=-9.39))
    stored = repo.get(trip.id).itinerary[0]
    assert (stored.location, stored.lat, stored.lng) == ("Sintra, Portugal", 38.8, -9.39)
    assert trip_location_markers(repo.get(trip.id)) == [MarkerPoint(name="Palace", lat=38.8, lng=-9.39)]


def test_rename_location() -> None:
    repo = _repo()
    trip = repo.add("Lisbon")
    loc = repo.add_location(trip.id, Place(label="Sintra, Lisbon, Portugal", lat=38.8, lng=-9.39))
    assert repo.rename_location(trip.id, loc.id, "  Sintra  ").title == "Sintra"
    assert repo.rename_location(trip.id, loc.id, "   ").title == "Sintra"
    stored = repo.get(trip.id).locations[0]
    assert (stored.title, stored.location) == ("Sintra", "Sintra, Lisbon, Portugal")
    with pytest.raises(KeyError):
        repo.rename_location(trip.id, "loc_missing", "x")
