from __future__ import annotations

from route360.models import Centroid, ItineraryItem, MarkerPoint, Source, Trip, TripLocation, VisitedCountry
from route360.pipeline.markers import (
    DEFAULT_STRATEGIES,
    markers_frame,
    resolve_coordinate,
    resolve_markers,
    trip_location_markers,
)


def visited(*names: str) -> list[VisitedCountry]:
    return [VisitedCountry(name=n, source=Source.MANUAL) for n in names]


def test_static_fallback_when_no_centroids() -> None:
    out = resolve_markers(visited("Czech Republic"), [])
    assert out == [MarkerPoint(name="Czech Republic", lat=49.8, lng=15.5)]


def test_exact_centroid_beats_static_table() -> None:
    centroids = [Centroid(name="Japan", lat=37.0, lng=139.0)]
    out = resolve_markers(visited("japan"), centroids)
    assert out == [MarkerPoint(name="japan", lat=37.0, lng=139.0)]


def test_containment_match_handles_naming_drift() -> None:
    centroids = [Centroid(name="Czech Republic (Czechia)", lat=49.7, lng=15.3)]
    out = resolve_markers(visited("Czech Republic"), centroids)
    assert (out[0].lat, out[0].lng) == (49.7, 15.3)


def test_exact_match_preferred_over_containment() -> None:
    centroids = [
        Centroid(name="Guinea-Bissau", lat=12.0, lng=-15.0),
        Centroid(name="Guinea", lat=10.4, lng=-10.9),
    ]
    assert resolve_coordinate("Guinea", centroids) == (10.4, -10.9)


def test_alias_resolves_before_lookup() -> None:
    centroids = [Centroid(name="United States of America", lat=40.0, lng=-100.0)]
    assert resolve_coordinate("USA", centroids) == (40.0, -100.0)
    # No centroid: alias still lands on the static record.
    assert resolve_coordinate("USA", []) == (39.8, -98.6)


def test_unresolvable_entries_are_dropped_and_order_kept() -> None:
    out = resolve_markers(visited("Peru", "Atlantis", "Chile"), [])
    assert [m.name for m in out] == ["Peru", "Chile"]


def test_custom_strategy_list() -> None:
    def everything_at_origin(want: str, centroids: object) -> tuple[float, float]:
        return 0.0, 0.0

    strategies = (*DEFAULT_STRATEGIES[:-1], everything_at_origin)
    out = resolve_markers(visited("Atlantis"), [], strategies=strategies)
    assert out == [MarkerPoint(name="Atlantis", lat=0.0, lng=0.0)]


def test_resolve_markers_is_pure() -> None:
    entries = visited("France", "UK")
    centroids = [Centroid(name="France", lat=46.0, lng=2.0)]
    assert resolve_markers(entries, centroids) == resolve_markers(entries, centroids)


def test_trip_location_markers_only_uses_items_with_coordinates() -> None:
    t = Trip(
        id="t_1",
        title="Lisbon",
        itinerary=[
            ItineraryItem(id="it_1", title="Tram 28", lat=38.71, lng=-9.13),
            ItineraryItem(id="it_2", title="Dinner"),
        ],
        locations=[TripLocation(id="loc_1", title="", location="Sintra", lat=38.8, lng=-9.39)],
    )
    pins = trip_location_markers(t)
    assert pins == [
        MarkerPoint(name="Tram 28", lat=38.71, lng=-9.13),
        MarkerPoint(name="Sintra", lat=38.8, lng=-9.39),
    ]


def test_markers_frame_columns() -> None:
    df = markers_frame([MarkerPoint(name="Peru", lat=-9.2, lng=-75.0)], label=str.upper)
    assert list(df.columns) == ["name", "label", "lat", "lng"]
    assert df.loc[0, "label"] == "PERU"
    assert markers_frame([]).empty
