from __future__ import annotations

from route360.iso import normalize
from route360.models import Source, Trip
from route360.pipeline.detect import detect_countries


def _names(entries) -> list[str]:
    return [e.name for e in entries]


def test_detects_country_in_title() -> None:
    found = detect_countries([Trip(id="t_1", title="Japan Trip 2024")])
    assert _names(found) == ["Japan"]
    assert found[0].source is Source.TRIP


def test_substring_match_accepts_false_positives() -> None:
    # Naive containment: "indonesian" contains "indonesia".
    found = detect_countries([Trip(id="t_1", title="indonesian food night")])
    assert "Indonesia" in _names(found)

    found = detect_countries([Trip(id="t_2", title="Romania by train")])
    assert {"Romania", "Oman"} <= set(_names(found))


def test_explicit_country_field_is_added_verbatim() -> None:
    found = detect_countries([Trip(id="t_1", title="Honeymoon", country=" Uruguay ")])
    assert _names(found) == ["Uruguay"]


def test_duplicates_across_trips_collapse_by_normalized_name() -> None:
    trips = [
        Trip(id="t_1", title="Italy in spring"),
        Trip(id="t_2", title="ITALY again", country="italy"),
    ]
    found = detect_countries(trips)
    assert _names(found) == ["Italy"]


def test_alias_names_are_detected_in_display_casing() -> None:
    found = detect_countries([Trip(id="t_1", title="Road trip across the usa")])
    assert "USA" in _names(found)


def test_custom_catalog_and_unique_output() -> None:
    trips = [Trip(id="t_1", title="Peru and Chile"), Trip(id="t_2", title="Back to peru")]
    found = detect_countries(trips, catalog=["Peru", "Chile", "Bolivia"])
    assert _names(found) == ["Peru", "Chile"]
    keys = [normalize(n) for n in _names(found)]
    assert len(keys) == len(set(keys))


def test_no_trips_detects_nothing() -> None:
    assert detect_countries([]) == []
    assert detect_countries([Trip(id="t_1", title="")]) == []
