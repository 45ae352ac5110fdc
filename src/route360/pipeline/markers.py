from __future__ import annotations

from typing import Callable, Iterable, Mapping, Optional, Sequence

import pandas as pd
import structlog

from route360.iso import format_label, normalize, resolve_alias
from route360.models import Centroid, MarkerPoint, Trip, VisitedCountry
from route360.reference import ALIASES, REFERENCE

logger = structlog.get_logger(__name__)

Coordinate = tuple[float, float]
Strategy = Callable[[str, Sequence[Centroid]], Optional[Coordinate]]


def exact_centroid(want: str, centroids: Sequence[Centroid]) -> Optional[Coordinate]:
    for c in centroids:
        if normalize(c.name) == want:
            return c.lat, c.lng
    return None


def contains_centroid(want: str, centroids: Sequence[Centroid]) -> Optional[Coordinate]:
    # Live datasets name some countries differently ("Czech Rep." vs "Czechia").
    for c in centroids:
        if want in normalize(c.name):
            return c.lat, c.lng
    return None


def reference_fallback(want: str, centroids: Sequence[Centroid]) -> Optional[Coordinate]:
    ref = REFERENCE.get(want)
    if ref is None:
        return None
    return ref.lat, ref.lng


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (exact_centroid, contains_centroid, reference_fallback)


def resolve_coordinate(
    name: str,
    centroids: Sequence[Centroid],
    *,
    strategies: Iterable[Strategy] = DEFAULT_STRATEGIES,
    aliases: Mapping[str, str] = ALIASES,
) -> Optional[Coordinate]:
    want = resolve_alias(normalize(name), aliases)
    if not want:
        return None
    for strategy in strategies:
        hit = strategy(want, centroids)
        if hit is not None:
            return hit
    return None


def resolve_markers(
    visited: Iterable[VisitedCountry],
    centroids: Sequence[Centroid],
    *,
    strategies: Iterable[Strategy] = DEFAULT_STRATEGIES,
    aliases: Mapping[str, str] = ALIASES,
) -> list[MarkerPoint]:
    """
    One marker per visited country that any strategy can place.

    Strategies are tried in order for each entry, first hit wins. Entries no
    strategy can place are left out.
    """
    strategies = tuple(strategies)
    markers: list[MarkerPoint] = []
    for entry in visited:
        hit = resolve_coordinate(entry.name, centroids, strategies=strategies, aliases=aliases)
        if hit is None:
            logger.debug("No coordinate for visited country", name=entry.name)
            continue
        lat, lng = hit
        markers.append(MarkerPoint(name=entry.name, lat=float(lat), lng=float(lng)))
    return markers


def trip_location_markers(trip: Trip) -> list[MarkerPoint]:
    """Map pins for itinerary items and trip locations that carry coordinates."""
    markers: list[MarkerPoint] = []
    for item in [*trip.itinerary, *trip.locations]:
        if item.lat is None or item.lng is None:
            continue
        label = item.title or item.location or "Location"
        markers.append(MarkerPoint(name=label, lat=item.lat, lng=item.lng))
    return markers


def markers_frame(markers: Iterable[MarkerPoint], *, label: Callable[[str], str] = format_label) -> pd.DataFrame:
    rows = [{"name": m.name, "label": label(m.name), "lat": m.lat, "lng": m.lng} for m in markers]
    if not rows:
        return pd.DataFrame(columns=["name", "label", "lat", "lng"])
    return pd.DataFrame(rows)
