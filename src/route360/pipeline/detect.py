from __future__ import annotations

from typing import Iterable

from route360.iso import normalize
from route360.models import Source, Trip, VisitedCountry
from route360.reference import CATALOG


def detect_countries(trips: Iterable[Trip], catalog: Iterable[str] = CATALOG) -> list[VisitedCountry]:
    """
    Countries mentioned by a set of trips, tagged as trip-derived.

    A catalog name matches when its normalized form is a plain substring of the
    normalized trip title, so "indonesian food night" yields Indonesia. An
    explicit trip country is added as written. Results are unique by
    normalized name and keep first-seen order. Cost is trips x catalog
    substring tests.
    """
    names = [(normalize(c), c) for c in catalog]
    found: dict[str, str] = {}
    for trip in trips:
        title = normalize(trip.title)
        for key, display in names:
            if key and key in title and key not in found:
                found[key] = display
        if trip.country:
            key = normalize(trip.country)
            if key and key not in found:
                found[key] = trip.country.strip()
    return [VisitedCountry(name=name, source=Source.TRIP) for name in found.values()]
