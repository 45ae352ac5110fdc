"""
Per-user key/value storage.

The stores mirror browser local storage: string keys, string (JSON) values,
whole-value reads and writes. There is no locking and no compare-and-swap;
every mutation elsewhere in the package reads the full list, changes it in
memory and writes it back, so two processes sharing one JSON file can
overwrite each other's changes. That is accepted for a single-user tool.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import structlog

logger = structlog.get_logger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """All keys live in one JSON object file; it is re-read on every access."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Unreadable store file, treating as empty", path=str(self.path), error=str(e))
            return {}
        if not isinstance(raw, dict):
            logger.warning("Store file is not a JSON object, treating as empty", path=str(self.path))
            return {}
        return {str(k): v for k, v in raw.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


@dataclass(frozen=True)
class UserScope:
    user_id: str
    prefix: str = "route360"

    def key(self, name: str) -> str:
        return f"{self.prefix}_{name}_{self.user_id}_v1"

    @property
    def trips_key(self) -> str:
        return self.key("trips")

    @property
    def visited_key(self) -> str:
        return self.key("visitedCountries")

    @property
    def username_key(self) -> str:
        return self.key("username")


def load_json_list(store: KeyValueStore, key: str) -> list[Any]:
    raw = store.get(key)
    if raw is None:
        return []
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning("Stored value is not valid JSON, treating as empty", key=key, error=str(e))
        return []
    if not isinstance(data, list):
        logger.warning("Stored value is not a list, treating as empty", key=key)
        return []
    return data


def save_json_list(store: KeyValueStore, key: str, items: list[Any]) -> None:
    store.set(key, json.dumps(items, ensure_ascii=False))


def load_display_name(store: KeyValueStore, scope: UserScope, fallback: str | None = None) -> str:
    """
    The user's display name. On first use `fallback` (the registered name),
    or "Guest" without one, is stored and returned.
    """
    name = store.get(scope.username_key)
    if name:
        return name
    name = (fallback or "").strip() or "Guest"
    store.set(scope.username_key, name)
    return name


def save_display_name(store: KeyValueStore, scope: UserScope, name: str) -> bool:
    name = name.strip()
    if not name:
        return False
    store.set(scope.username_key, name)
    return True
