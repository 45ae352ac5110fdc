from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import numpy as np
import requests
import structlog

from route360.models import Centroid

logger = structlog.get_logger(__name__)


WORLD_ATLAS_TOPOLOGY_URL = "https://unpkg.com/world-atlas@2/countries-110m.json"


def _get(url: str, *, timeout: float) -> requests.Response:
    resp = requests.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp


def _decode_arcs(topology: dict[str, Any]) -> list[np.ndarray]:
    arcs_raw = topology.get("arcs")
    if not isinstance(arcs_raw, list):
        raise ValueError("Topology has no 'arcs' array.")
    transform = topology.get("transform")
    arcs: list[np.ndarray] = []
    for arc in arcs_raw:
        pts = np.asarray(arc, dtype=float).reshape(-1, 2)
        if transform:
            # Quantized topologies store the first position absolutely and the rest as deltas.
            pts = np.cumsum(pts, axis=0)
            pts = pts * np.asarray(transform["scale"], dtype=float) + np.asarray(transform["translate"], dtype=float)
        arcs.append(pts)
    return arcs


def _ring(indexes: Iterable[int], arcs: list[np.ndarray]) -> np.ndarray:
    parts: list[np.ndarray] = []
    for i in indexes:
        arc = arcs[~i][::-1] if i < 0 else arcs[i]
        parts.append(arc if not parts else arc[1:])
    if not parts:
        return np.empty((0, 2))
    return np.concatenate(parts)


def _ring_area_centroid(ring: np.ndarray) -> tuple[float, float, float]:
    """Absolute shoelace area and centroid (x, y) of a closed ring."""
    if len(ring) < 3:
        return 0.0, float("nan"), float("nan")
    x, y = ring[:, 0], ring[:, 1]
    x0, y0 = x[:-1], y[:-1]
    x1, y1 = x[1:], y[1:]
    cross = x0 * y1 - x1 * y0
    area = cross.sum() / 2.0
    if area == 0:
        return 0.0, float(x.mean()), float(y.mean())
    cx = ((x0 + x1) * cross).sum() / (6.0 * area)
    cy = ((y0 + y1) * cross).sum() / (6.0 * area)
    return abs(float(area)), float(cx), float(cy)


def geometry_centroid(geometry: dict[str, Any], arcs: list[np.ndarray]) -> tuple[float, float] | None:
    """
    Planar area-weighted centroid (lng, lat) of a TopoJSON Polygon/MultiPolygon.

    Holes are subtracted. Polygons that straddle the antimeridian come out
    shifted; that is acceptable for placing a label.
    """
    kind = geometry.get("type")
    if kind == "Polygon":
        polygons = [geometry.get("arcs") or []]
    elif kind == "MultiPolygon":
        polygons = geometry.get("arcs") or []
    else:
        return None

    total = 0.0
    sx = 0.0
    sy = 0.0
    points: list[np.ndarray] = []
    for polygon in polygons:
        for idx, ring_arcs in enumerate(polygon):
            ring = _ring(ring_arcs, arcs)
            if len(ring):
                points.append(ring)
            area, cx, cy = _ring_area_centroid(ring)
            if area == 0:
                continue
            sign = 1.0 if idx == 0 else -1.0
            total += sign * area
            sx += sign * area * cx
            sy += sign * area * cy
    if total > 0:
        return sx / total, sy / total
    if points:
        allp = np.concatenate(points)
        return float(allp[:, 0].mean()), float(allp[:, 1].mean())
    return None


def parse_country_names_tsv(text: str) -> dict[str, str]:
    names: dict[str, str] = {}
    for line in text.splitlines()[1:]:
        parts = line.split("\t")
        if len(parts) >= 2 and parts[0] and parts[1]:
            names[parts[0].strip()] = parts[1].strip()
    return names


def centroids_from_topology(
    topology: dict[str, Any],
    *,
    object_name: str = "countries",
    names: dict[str, str] | None = None,
) -> list[Centroid]:
    objects = topology.get("objects")
    if not isinstance(objects, dict) or object_name not in objects:
        raise ValueError(f"Topology has no '{object_name}' object.")
    collection = objects[object_name]
    if not isinstance(collection, dict):
        raise ValueError(f"Topology object '{object_name}' is not a geometry collection.")
    geometries = collection.get("geometries") or []
    if not isinstance(geometries, list):
        raise ValueError(f"Topology object '{object_name}' has no geometries list.")
    arcs = _decode_arcs(topology)

    out: list[Centroid] = []
    for geom in geometries:
        if not isinstance(geom, dict):
            continue
        name = None
        if names is not None and geom.get("id") is not None:
            name = names.get(str(geom["id"]))
        props = geom.get("properties")
        if not name and isinstance(props, dict):
            name = props.get("name")
        if not name:
            continue
        centre = geometry_centroid(geom, arcs)
        if centre is None:
            continue
        lng, lat = centre
        out.append(Centroid(name=str(name), lat=lat, lng=lng))
    return out


def fetch_centroids(
    topology_url: str = WORLD_ATLAS_TOPOLOGY_URL,
    *,
    names_url: str | None = None,
    timeout: float = 30,
) -> list[Centroid]:
    """
    Download a world-atlas topology and compute one centroid per country.

    Country names come from the features' `name` property, or from an
    id<TAB>name file at `names_url` when one is given. Raises on HTTP or
    payload errors; see `load_centroids` for the non-raising variant.
    """
    topology = _get(topology_url, timeout=timeout).json()
    if not isinstance(topology, dict):
        raise ValueError(f"Unexpected topology response shape for {topology_url}")
    names = None
    if names_url:
        names = parse_country_names_tsv(_get(names_url, timeout=timeout).text)
    return centroids_from_topology(topology, names=names)


def load_centroids(
    topology_url: str = WORLD_ATLAS_TOPOLOGY_URL,
    *,
    names_url: str | None = None,
    timeout: float = 30,
    cache_path: Path | None = None,
) -> list[Centroid]:
    if cache_path is not None and cache_path.exists():
        cached = read_centroid_cache(cache_path)
        if cached:
            return cached
    try:
        centroids = fetch_centroids(topology_url, names_url=names_url, timeout=timeout)
    except (requests.RequestException, ValueError, KeyError, TypeError, IndexError) as e:
        logger.warning("Centroid fetch failed, using static fallback only", url=topology_url, error=str(e))
        return []
    logger.info("Centroids loaded", count=len(centroids))
    return centroids


def parse_centroid_records(payload: Any) -> list[Centroid]:
    if not isinstance(payload, list):
        return []
    out: list[Centroid] = []
    for rec in payload:
        if not isinstance(rec, dict):
            continue
        name, lat, lng = rec.get("name"), rec.get("lat"), rec.get("lng")
        if not isinstance(name, str) or not name:
            continue
        try:
            out.append(Centroid(name=name, lat=float(lat), lng=float(lng)))
        except (TypeError, ValueError):
            continue
    return out


def write_centroid_cache(path: Path, centroids: Iterable[Centroid]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    records = [{"name": c.name, "lat": c.lat, "lng": c.lng} for c in centroids]
    path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")


def read_centroid_cache(path: Path) -> list[Centroid]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Unreadable centroid cache", path=str(path), error=str(e))
        return []
    return parse_centroid_records(payload)
