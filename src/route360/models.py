from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class Source(str, Enum):
    MANUAL = "manual"
    TRIP = "trip"

    @classmethod
    def parse(cls, raw: object) -> "Source":
        # Entries written before provenance tagging existed count as manual.
        if raw == cls.TRIP.value:
            return cls.TRIP
        return cls.MANUAL


@dataclass(frozen=True)
class VisitedCountry:
    name: str
    source: Source = Source.MANUAL

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Optional["VisitedCountry"]:
        name = raw.get("name")
        if not isinstance(name, str) or not name.strip():
            return None
        return cls(name=name, source=Source.parse(raw.get("source")))

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "source": self.source.value}


@dataclass(frozen=True)
class CountryReference:
    canonical_name: str
    lat: float
    lng: float
    iso2: str | None = None


@dataclass(frozen=True)
class Centroid:
    name: str
    lat: float
    lng: float


@dataclass(frozen=True)
class MarkerPoint:
    name: str
    lat: float
    lng: float


@dataclass(frozen=True)
class Place:
    label: str
    lat: float
    lng: float


def _coord(value: object) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _records(*candidates: object) -> list[Mapping[str, Any]]:
    """Mapping entries of the first candidate that is a list; anything else reads as empty."""
    for value in candidates:
        if isinstance(value, list):
            return [x for x in value if isinstance(x, Mapping)]
    return []


@dataclass
class ItineraryItem:
    id: str
    title: str = "Activity"
    date: str = ""
    note: str = ""
    day: int | None = None
    location: str | None = None
    lat: float | None = None
    lng: float | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ItineraryItem":
        day = raw.get("day")
        return cls(
            id=str(raw.get("id", "")),
            title=str(raw.get("title") or raw.get("name") or "Activity"),
            date=str(raw.get("date") or ""),
            note=str(raw.get("note") or ""),
            day=int(day) if isinstance(day, int) and not isinstance(day, bool) else None,
            location=str(raw["location"]) if raw.get("location") else None,
            lat=_coord(raw.get("lat")),
            lng=_coord(raw.get("lng")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "title": self.title, "date": self.date, "note": self.note}
        if self.day is not None:
            out["day"] = self.day
        if self.location is not None:
            out["location"] = self.location
        if self.lat is not None and self.lng is not None:
            out["lat"] = self.lat
            out["lng"] = self.lng
        return out


@dataclass
class TripLocation:
    id: str
    title: str
    location: str
    lat: float | None = None
    lng: float | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TripLocation":
        location = str(raw.get("location") or raw.get("title") or "")
        return cls(
            id=str(raw.get("id", "")),
            title=str(raw.get("title") or location),
            location=location,
            lat=_coord(raw.get("lat")),
            lng=_coord(raw.get("lng")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "title": self.title, "location": self.location}
        if self.lat is not None and self.lng is not None:
            out["lat"] = self.lat
            out["lng"] = self.lng
        return out


@dataclass
class Trip:
    id: str
    title: str
    country: str | None = None
    desc: str = ""
    start: str = ""
    end: str = ""
    cover: str = ""
    itinerary: list[ItineraryItem] = field(default_factory=list)
    locations: list[TripLocation] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    _KNOWN = frozenset(
        {"id", "title", "country", "desc", "start", "end", "coverDataUrl", "itinerary", "itineraries", "locations"}
    )

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Trip":
        if not isinstance(raw, Mapping):
            raw = {}
        country = raw.get("country")
        items = _records(raw.get("itinerary"), raw.get("itineraries"))
        locations = _records(raw.get("locations"))
        return cls(
            id=str(raw.get("id", "")),
            title=str(raw.get("title") or ""),
            country=country.strip() if isinstance(country, str) and country.strip() else None,
            desc=str(raw.get("desc") or ""),
            start=str(raw.get("start") or ""),
            end=str(raw.get("end") or ""),
            cover=str(raw.get("coverDataUrl") or ""),
            itinerary=[ItineraryItem.from_dict(x) for x in items],
            locations=[TripLocation.from_dict(x) for x in locations],
            extra={k: v for k, v in raw.items() if k not in cls._KNOWN},
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.extra)
        out.update(
            {
                "id": self.id,
                "title": self.title,
                "desc": self.desc,
                "start": self.start,
                "end": self.end,
                "coverDataUrl": self.cover,
                "itinerary": [x.to_dict() for x in self.itinerary],
                "locations": [x.to_dict() for x in self.locations],
            }
        )
        if self.country:
            out["country"] = self.country
        return out
