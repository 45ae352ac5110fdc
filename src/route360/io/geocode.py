from __future__ import annotations

from typing import Any

import requests
import structlog

from route360.models import Place

logger = structlog.get_logger(__name__)


PHOTON_API_URL = "https://photon.komoot.io/api/"
MIN_QUERY_LENGTH = 3


def place_label(properties: dict[str, Any]) -> str:
    parts: list[str] = []
    for key in ("name", "city", "state", "country"):
        value = properties.get(key)
        if isinstance(value, str) and value and value not in parts:
            parts.append(value)
    return ", ".join(parts)


def parse_photon_features(data: Any) -> list[Place]:
    """GeoJSON FeatureCollection from Photon to places; point geometries only."""
    if not isinstance(data, dict):
        return []
    features = data.get("features")
    if not isinstance(features, list):
        return []
    places: list[Place] = []
    for feat in features:
        if not isinstance(feat, dict):
            continue
        geom = feat.get("geometry") or {}
        coords = geom.get("coordinates")
        if geom.get("type") != "Point" or not isinstance(coords, list) or len(coords) < 2:
            continue
        label = place_label(feat.get("properties") or {})
        if not label:
            continue
        try:
            lng, lat = float(coords[0]), float(coords[1])
        except (TypeError, ValueError):
            continue
        places.append(Place(label=label, lat=lat, lng=lng))
    return places


def search_places(
    query: str,
    *,
    limit: int = 6,
    api_url: str = PHOTON_API_URL,
    timeout: float = 15,
) -> list[Place]:
    query = (query or "").strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []
    try:
        resp = requests.get(api_url, params={"q": query, "limit": limit}, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Place search failed", query=query, error=str(e))
        return []
    return parse_photon_features(data)
