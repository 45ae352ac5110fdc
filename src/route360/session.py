from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Sequence

import structlog

from route360.io.trips import TripRepository
from route360.iso import normalize
from route360.models import Centroid, MarkerPoint, Source, Trip, VisitedCountry
from route360.pipeline.detect import detect_countries
from route360.pipeline.markers import resolve_markers
from route360.pipeline.reconcile import parse_visited, reconcile
from route360.storage import KeyValueStore, UserScope, load_json_list, save_json_list

logger = structlog.get_logger(__name__)

CentroidLoader = Callable[[], Sequence[Centroid]]


class VisitedCountryStore:
    def __init__(self, store: KeyValueStore, scope: UserScope) -> None:
        self.store = store
        self.scope = scope

    def load(self) -> list[VisitedCountry]:
        return parse_visited(load_json_list(self.store, self.scope.visited_key))

    def save(self, entries: Sequence[VisitedCountry]) -> None:
        save_json_list(self.store, self.scope.visited_key, [e.to_dict() for e in entries])

    def sync(self, trips: Sequence[Trip]) -> list[VisitedCountry]:
        merged = reconcile(self.load(), detect_countries(trips))
        self.save(merged)
        return merged


class GlobeSession:
    """
    State of one globe view for one user, from mount to unmount.

    Creating the session reconciles the stored visited list with the user's
    trips and, when a centroid loader is given, starts that loader once in a
    background thread. Markers are resolved against whatever centroids are
    loaded at call time; before the load finishes (or after it fails) that is
    the empty set and the static table places every marker.

    Every mutation re-runs detection and reconciliation before returning.
    """

    def __init__(
        self,
        store: KeyValueStore,
        scope: UserScope,
        *,
        centroid_loader: CentroidLoader | None = None,
    ) -> None:
        self.scope = scope
        self.trip_repo = TripRepository(store, scope)
        self.visited_store = VisitedCountryStore(store, scope)
        self.visited: list[VisitedCountry] = []
        self._executor: ThreadPoolExecutor | None = None
        self._centroids_future: Future[Sequence[Centroid]] | None = None

        self.sync()
        if centroid_loader is not None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="route360-centroids")
            self._centroids_future = self._executor.submit(centroid_loader)

    def __enter__(self) -> "GlobeSession":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        """
        Tear the view down without waiting. A centroid fetch still in flight
        is not joined; its worker thread runs until the loader returns.
        """
        if self._executor is not None:
            self._executor.shutdown(wait=False, cancel_futures=True)
            self._executor = None

    @property
    def centroids(self) -> tuple[Centroid, ...]:
        fut = self._centroids_future
        if fut is None or not fut.done() or fut.cancelled():
            return ()
        if fut.exception() is not None:
            return ()
        return tuple(fut.result())

    def wait_for_centroids(self, timeout: float | None = None) -> tuple[Centroid, ...]:
        fut = self._centroids_future
        if fut is None:
            return ()
        try:
            fut.result(timeout=timeout)
        except Exception as e:
            logger.warning("Centroid load did not complete", error=str(e))
        return self.centroids

    def sync(self) -> list[VisitedCountry]:
        self.visited = self.visited_store.sync(self.trip_repo.trips())
        return self.visited

    def add_country(self, name: str) -> bool:
        """Add a manual country; False (and no change) when the name is blank or already visited."""
        name = (name or "").strip()
        key = normalize(name)
        if not key:
            return False
        current = self.visited_store.load()
        if any(normalize(v.name) == key for v in current):
            return False
        current.append(VisitedCountry(name=name, source=Source.MANUAL))
        self.visited_store.save(current)
        self.sync()
        return True

    def remove_country(self, name: str) -> bool:
        """
        Remove a country by normalized name. A country still mentioned by a
        trip comes straight back as a trip entry on the re-sync.
        """
        key = normalize(name)
        current = self.visited_store.load()
        remaining = [v for v in current if normalize(v.name) != key]
        removed = len(remaining) != len(current)
        self.visited_store.save(remaining)
        self.sync()
        return removed

    def add_trip(self, title: str, **fields: Any) -> Trip:
        trip = self.trip_repo.add(title, **fields)
        self.sync()
        return trip

    def update_trip(self, trip_id: str, **fields: Any) -> Trip:
        trip = self.trip_repo.update(trip_id, **fields)
        self.sync()
        return trip

    def delete_trip(self, trip_id: str) -> None:
        self.trip_repo.delete(trip_id)
        self.sync()

    def markers(self) -> list[MarkerPoint]:
        return resolve_markers(self.visited, self.centroids)
