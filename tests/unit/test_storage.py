"""Tests for merchify.core.storage — durable key-value slots."""

from __future__ import annotations

from pathlib import Path

import pytest

from merchify.core.storage import InMemoryStore, JsonFileStore, KeyValueStore


class TestJsonFileStore:
    def test_missing_item_is_none(self, temp_dir: Path):
        assert JsonFileStore(temp_dir).get_item("nothing") is None

    def test_round_trip_creates_directory(self, temp_dir: Path):
        store = JsonFileStore(temp_dir / "nested" / "cache")
        store.set_item("slot", '["x"]')
        assert store.get_item("slot") == '["x"]'
        assert (temp_dir / "nested" / "cache" / "slot.json").exists()

    def test_remove_item(self, temp_dir: Path):
        store = JsonFileStore(temp_dir)
        store.set_item("slot", "1")
        store.remove_item("slot")
        assert store.get_item("slot") is None

    def test_remove_missing_item_is_noop(self, temp_dir: Path):
        JsonFileStore(temp_dir).remove_item("never-written")

    def test_separators_stay_inside_directory(self, temp_dir: Path):
        store = JsonFileStore(temp_dir / "cache")
        store.set_item("../escape", "1")
        assert not (temp_dir / "escape.json").exists()
        assert store.get_item("../escape") == "1"

    def test_unwritable_directory_raises(self, temp_dir: Path):
        blocker = temp_dir / "file"
        blocker.write_text("not a directory")
        store = JsonFileStore(blocker / "cache")
        with pytest.raises(OSError):
            store.set_item("slot", "1")


class TestInMemoryStore:
    def test_round_trip(self):
        store = InMemoryStore()
        store.set_item("a", "1")
        assert store.get_item("a") == "1"
        assert "a" in store
        assert len(store) == 1

    def test_remove_item(self):
        store = InMemoryStore({"a": "1"})
        store.remove_item("a")
        store.remove_item("a")
        assert store.get_item("a") is None


def test_implementations_satisfy_protocol(temp_dir: Path):
    assert isinstance(InMemoryStore(), KeyValueStore)
    assert isinstance(JsonFileStore(temp_dir), KeyValueStore)
