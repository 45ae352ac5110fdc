from __future__ import annotations

import time
from datetime import date
from typing import Any, Callable

from route360.models import ItineraryItem, Place, Trip, TripLocation
from route360.storage import KeyValueStore, UserScope, load_json_list, save_json_list


def _millis() -> int:
    return int(time.time() * 1000)


def day_number(start: str, when: str) -> int | None:
    """1-based day of `when` within a trip starting on `start` (ISO dates)."""
    if not start or not when:
        return None
    try:
        delta = date.fromisoformat(when) - date.fromisoformat(start)
    except ValueError:
        return None
    return delta.days + 1


class TripRepository:
    """
    A user's trips, stored as one JSON list under the user's trips key.

    Every call re-reads the list; mutations write the whole list back.
    """

    def __init__(self, store: KeyValueStore, scope: UserScope, *, clock: Callable[[], int] = _millis) -> None:
        self.store = store
        self.scope = scope
        self._clock = clock

    def _load_raw(self) -> list[dict[str, Any]]:
        return [t for t in load_json_list(self.store, self.scope.trips_key) if isinstance(t, dict)]

    def _save(self, trips: list[Trip]) -> None:
        save_json_list(self.store, self.scope.trips_key, [t.to_dict() for t in trips])

    def trips(self) -> list[Trip]:
        return [Trip.from_dict(t) for t in self._load_raw()]

    def get(self, trip_id: str) -> Trip:
        for trip in self.trips():
            if trip.id == trip_id:
                return trip
        raise KeyError(f"Trip not found: {trip_id}")

    def add(
        self,
        title: str,
        *,
        desc: str = "",
        start: str = "",
        end: str = "",
        country: str | None = None,
        cover: str = "",
    ) -> Trip:
        trip = Trip(
            id=f"t_{self._clock()}",
            title=title.strip() or "Untitled trip",
            country=country.strip() if country and country.strip() else None,
            desc=desc.strip(),
            start=start,
            end=end,
            cover=cover,
        )
        trips = self.trips()
        trips.insert(0, trip)
        self._save(trips)
        return trip

    def _replace(self, trip: Trip) -> None:
        trips = self.trips()
        for idx, existing in enumerate(trips):
            if existing.id == trip.id:
                trips[idx] = trip
                self._save(trips)
                return
        raise KeyError(f"Trip not found: {trip.id}")

    def update(self, trip_id: str, **fields: Any) -> Trip:
        allowed = {"title", "desc", "start", "end", "country", "cover"}
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"Cannot update trip fields: {sorted(unknown)}")
        trip = self.get(trip_id)
        for key, value in fields.items():
            setattr(trip, key, value)
        self._replace(trip)
        return trip

    def delete(self, trip_id: str) -> None:
        trips = self.trips()
        remaining = [t for t in trips if t.id != trip_id]
        if len(remaining) == len(trips):
            raise KeyError(f"Trip not found: {trip_id}")
        self._save(remaining)

    def add_itinerary_item(self, trip_id: str, *, title: str = "", when: str = "", note: str = "") -> ItineraryItem:
        trip = self.get(trip_id)
        item = ItineraryItem(
            id=f"it_{self._clock()}",
            title=title.strip() or "Activity",
            date=when,
            note=note.strip(),
            day=day_number(trip.start, when) or None,
        )
        trip.itinerary.append(item)
        self._replace(trip)
        return item

    @staticmethod
    def _item_index(trip: Trip, item_id: str) -> int:
        for idx, item in enumerate(trip.itinerary):
            if item.id == item_id:
                return idx
        raise KeyError(f"Itinerary item not found: {item_id}")

    def update_itinerary_item(
        self, trip_id: str, item_id: str, *, title: str = "", when: str = "", note: str = ""
    ) -> ItineraryItem:
        """
        Replace an item's title, date and note.

        The day number is recomputed from the new date; when that gives
        nothing the previous day is kept, else the item's 1-based position.
        """
        trip = self.get(trip_id)
        idx = self._item_index(trip, item_id)
        item = trip.itinerary[idx]
        item.title = title.strip() or "Activity"
        item.date = when
        item.note = note.strip()
        item.day = day_number(trip.start, when) or item.day or idx + 1
        self._replace(trip)
        return item

    def delete_itinerary_item(self, trip_id: str, item_id: str) -> None:
        trip = self.get(trip_id)
        del trip.itinerary[self._item_index(trip, item_id)]
        self._replace(trip)

    def set_itinerary_location(self, trip_id: str, item_id: str, place: Place) -> ItineraryItem:
        trip = self.get(trip_id)
        item = trip.itinerary[self._item_index(trip, item_id)]
        item.location = place.label
        item.lat = place.lat
        item.lng = place.lng
        self._replace(trip)
        return item

    def add_location(self, trip_id: str, place: Place) -> TripLocation:
        trip = self.get(trip_id)
        loc = TripLocation(id=f"loc_{self._clock()}", title=place.label, location=place.label, lat=place.lat, lng=place.lng)
        trip.locations.append(loc)
        self._replace(trip)
        return loc

    def rename_location(self, trip_id: str, loc_id: str, title: str) -> TripLocation:
        """Set a location's display title; a blank title leaves it unchanged."""
        trip = self.get(trip_id)
        for loc in trip.locations:
            if loc.id == loc_id:
                loc.title = title.strip() or loc.title
                self._replace(trip)
                return loc
        raise KeyError(f"Location not found: {loc_id}")

    def remove_location(self, trip_id: str, loc_id: str) -> None:
        trip = self.get(trip_id)
        before = len(trip.locations)
        trip.locations = [loc for loc in trip.locations if loc.id != loc_id]
        if len(trip.locations) == before:
            raise KeyError(f"Location not found: {loc_id}")
        self._replace(trip)
