from __future__ import annotations

from pathlib import Path

from route360.config import ensure_dirs, load_config
from route360.io.centroids import read_centroid_cache
from route360.pipeline.markers import resolve_markers, trip_location_markers
from route360.session import GlobeSession
from route360.viz.figures import plot_globe_markers, plot_trip_map


def main() -> None:
    cfg = load_config(Path("config/project.yml"))
    ensure_dirs(cfg)

    # Offline run: cached centroids only, static table for the rest.
    cache = cfg.centroids.cache_path
    centroids = read_centroid_cache(cache) if cache is not None and cache.exists() else []

    with GlobeSession(cfg.open_store(), cfg.scope) as session:
        markers = resolve_markers(session.visited, centroids)
        trips = session.trip_repo.trips()

    out = cfg.paths.reports_figures / f"globe_{cfg.user_id}.png"
    drawn = plot_globe_markers(markers, outpath=out)
    print(f"Wrote {out} ({drawn} of {len(markers)} markers in view)")

    for trip in trips:
        pins = trip_location_markers(trip)
        if not pins:
            continue
        trip_out = cfg.paths.reports_figures / f"trip_{trip.id}.png"
        plot_trip_map(pins, outpath=trip_out, title=trip.title or "Trip map")
        print(f"Wrote {trip_out} ({len(pins)} pins)")


if __name__ == "__main__":
    main()
