"""
Tests for the JSON-file key/value store.

Covers round-trip persistence, backup creation, and corruption recovery.
"""

import json

from context_hopper.storage import JsonFileStore
from context_hopper.storage import KeyValueStore
from context_hopper.storage import MemoryKeyValueStore


def test_implements_protocol(tmp_path):
    assert isinstance(JsonFileStore(tmp_path / "state.json"), KeyValueStore)
    assert isinstance(MemoryKeyValueStore(), KeyValueStore)


def test_round_trip_across_instances(tmp_path):
    path = tmp_path / "nested" / "state.json"
    JsonFileStore(path).update("items", [{"id": "1"}])
    assert JsonFileStore(path).get("items") == [{"id": "1"}]


def test_missing_key_returns_default(tmp_path):
    store = JsonFileStore(tmp_path / "state.json")
    assert store.get("nothing") is None
    assert store.get("nothing", []) == []


def test_values_are_copied(tmp_path):
    store = JsonFileStore(tmp_path / "state.json")
    value = {"list": [1]}
    store.update("k", value)
    value["list"].append(2)
    store.get("k")["list"].append(3)
    assert store.get("k") == {"list": [1]}


def test_second_write_creates_backup(tmp_path):
    path = tmp_path / "state.json"
    store = JsonFileStore(path)
    store.update("k", 1)
    store.update("k", 2)
    assert json.loads(store.backup_path.read_text()) == {"k": 1}
    assert json.loads(path.read_text()) == {"k": 2}


def test_recovers_from_corrupt_main_file(tmp_path):
    path = tmp_path / "state.json"
    store = JsonFileStore(path)
    store.update("k", "first")
    store.update("k", "second")

    path.write_text("{not json")
    assert JsonFileStore(path).get("k") == "first"


def test_non_object_document_falls_back_to_empty(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("[1, 2, 3]")
    assert JsonFileStore(path).get("k", "default") == "default"


def test_no_temp_files_left_behind(tmp_path):
    store = JsonFileStore(tmp_path / "state.json")
    store.update("a", 1)
    store.update("b", 2)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["state.json", "state.json.backup"]


def test_memory_store_initial_values_copied():
    initial = {"k": [1]}
    store = MemoryKeyValueStore(initial)
    initial["k"].append(2)
    assert store.get("k") == [1]
