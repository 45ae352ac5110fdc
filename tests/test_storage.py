from __future__ import annotations

import json
from pathlib import Path

from route360.storage import (
    JsonFileStore,
    MemoryStore,
    UserScope,
    load_display_name,
    load_json_list,
    save_display_name,
    save_json_list,
)


def test_user_scope_keys() -> None:
    scope = UserScope(user_id="u1")
    assert scope.trips_key == "route360_trips_u1_v1"
    assert scope.visited_key == "route360_visitedCountries_u1_v1"
    assert scope.username_key == "route360_username_u1_v1"
    assert UserScope(user_id="u1", prefix="demo").key("x") == "demo_x_u1_v1"


def test_load_json_list_degrades_to_empty() -> None:
    store = MemoryStore({"bad": "{not json", "obj": '{"a": 1}', "ok": '[1, 2]'})
    assert load_json_list(store, "missing") == []
    assert load_json_list(store, "bad") == []
    assert load_json_list(store, "obj") == []
    assert load_json_list(store, "ok") == [1, 2]


def test_save_then_load_list() -> None:
    store = MemoryStore()
    save_json_list(store, "k", [{"name": "Japan"}])
    assert load_json_list(store, "k") == [{"name": "Japan"}]


def test_json_file_store_persists_across_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "store.json"
    JsonFileStore(path).set("a", "1")
    store = JsonFileStore(path)
    assert store.get("a") == "1"
    store.remove("a")
    assert store.get("a") is None
    assert json.loads(path.read_text()) == {}


def test_json_file_store_corrupt_file_reads_empty(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("[oops")
    store = JsonFileStore(path)
    assert store.get("a") is None
    store.set("a", "x")
    assert store.get("a") == "x"


def test_users_are_isolated() -> None:
    store = MemoryStore()
    save_json_list(store, UserScope("alice").visited_key, [{"name": "Peru"}])
    assert load_json_list(store, UserScope("bob").visited_key) == []


def test_display_name_first_use_and_update() -> None:
    store = MemoryStore()
    scope = UserScope("u1")
    assert load_display_name(store, scope) == "Guest"
    assert store.get(scope.username_key) == "Guest"

    other = UserScope("u2")
    assert load_display_name(store, other, fallback=" Ana ") == "Ana"
    assert load_display_name(store, other, fallback="Someone else") == "Ana"

    assert save_display_name(store, scope, "  ") is False
    assert save_display_name(store, scope, " Sam ") is True
    assert load_display_name(store, scope) == "Sam"
