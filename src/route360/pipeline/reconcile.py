from __future__ import annotations

from typing import Any, Iterable

from route360.iso import normalize
from route360.models import Source, VisitedCountry


def parse_visited(raw: Any) -> list[VisitedCountry]:
    """Stored visited-country JSON to entries; anything but a list reads as empty."""
    if not isinstance(raw, list):
        return []
    out: list[VisitedCountry] = []
    for item in raw:
        if isinstance(item, str):
            item = {"name": item}
        if not isinstance(item, dict):
            continue
        entry = VisitedCountry.from_dict(item)
        if entry is not None:
            out.append(entry)
    return out


def reconcile(stored: Iterable[VisitedCountry], detected: Iterable[VisitedCountry]) -> list[VisitedCountry]:
    """
    Merge the stored visited list with freshly detected trip countries.

    Manual entries always survive. Stored trip entries are discarded and
    rebuilt from `detected`, so a country whose trip was deleted or retitled
    drops out. Output: manual entries first, then new detections in detection
    order, unique by normalized name.
    """
    seen: set[str] = set()
    merged: list[VisitedCountry] = []
    for entry in stored:
        key = normalize(entry.name)
        if entry.source is not Source.MANUAL or not key or key in seen:
            continue
        seen.add(key)
        merged.append(entry)
    for entry in detected:
        key = normalize(entry.name)
        if not key or key in seen:
            continue
        seen.add(key)
        merged.append(VisitedCountry(name=entry.name, source=Source.TRIP))
    return merged
