from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from route360.io.centroids import WORLD_ATLAS_TOPOLOGY_URL
from route360.io.geocode import PHOTON_API_URL
from route360.storage import JsonFileStore, UserScope


@dataclass(frozen=True)
class StorageConfig:
    path: Path
    prefix: str


@dataclass(frozen=True)
class CentroidConfig:
    enabled: bool
    topology_url: str
    names_url: str | None
    timeout: float
    cache_path: Path | None


@dataclass(frozen=True)
class GeocoderConfig:
    url: str
    limit: int


@dataclass(frozen=True)
class Paths:
    reports_figures: Path


@dataclass(frozen=True)
class ProjectConfig:
    user_id: str
    storage: StorageConfig
    centroids: CentroidConfig
    geocoder: GeocoderConfig
    paths: Paths
    user_name: str | None = None

    @property
    def scope(self) -> UserScope:
        return UserScope(user_id=self.user_id, prefix=self.storage.prefix)

    def open_store(self) -> JsonFileStore:
        return JsonFileStore(self.storage.path)


DEFAULT_CONFIG_PATH = Path("config/project.yml")


def _require(d: dict[str, Any], key: str, *, ctx: str) -> Any:
    if key not in d:
        raise KeyError(f"Missing required key '{key}' in {ctx}.")
    return d[key]


def _section(raw: dict[str, Any], key: str) -> dict[str, Any]:
    value = raw.get(key) or {}
    if not isinstance(value, dict):
        raise TypeError(f"Config section '{key}' must be a mapping.")
    return value


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> ProjectConfig:
    path = Path(path)
    raw = yaml.safe_load(path.read_text())
    if not isinstance(raw, dict):
        raise TypeError(f"Config at {path} must be a mapping.")

    user = _require(raw, "user", ctx="root")
    storage_raw = _require(raw, "storage", ctx="root")
    if not isinstance(user, dict) or not isinstance(storage_raw, dict):
        raise TypeError("user and storage must be mappings.")

    user_id = str(_require(user, "id", ctx="user")).strip()
    if not user_id:
        raise ValueError("user.id must be non-empty.")
    user_name = str(user.get("name") or "").strip() or None

    storage = StorageConfig(
        path=Path(_require(storage_raw, "path", ctx="storage")),
        prefix=str(storage_raw.get("prefix", "route360")),
    )

    centroids_raw = _section(raw, "centroids")
    timeout = float(centroids_raw.get("timeout", 30))
    if timeout <= 0:
        raise ValueError("centroids.timeout must be > 0.")
    cache = centroids_raw.get("cache_path")
    centroids = CentroidConfig(
        enabled=bool(centroids_raw.get("enabled", True)),
        topology_url=str(centroids_raw.get("topology_url", WORLD_ATLAS_TOPOLOGY_URL)),
        names_url=centroids_raw.get("names_url") or None,
        timeout=timeout,
        cache_path=Path(cache) if cache else None,
    )

    geocoder_raw = _section(raw, "geocoder")
    geocoder = GeocoderConfig(
        url=str(geocoder_raw.get("url", PHOTON_API_URL)),
        limit=int(geocoder_raw.get("limit", 6)),
    )

    paths_raw = _section(raw, "paths")
    paths = Paths(reports_figures=Path(paths_raw.get("reports_figures", "reports/figures")))

    return ProjectConfig(
        user_id=user_id,
        storage=storage,
        centroids=centroids,
        geocoder=geocoder,
        paths=paths,
        user_name=user_name,
    )


def ensure_dirs(cfg: ProjectConfig) -> None:
    cfg.storage.path.parent.mkdir(parents=True, exist_ok=True)
    cfg.paths.reports_figures.mkdir(parents=True, exist_ok=True)
    if cfg.centroids.cache_path is not None:
        cfg.centroids.cache_path.parent.mkdir(parents=True, exist_ok=True)
