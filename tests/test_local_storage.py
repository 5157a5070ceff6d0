"""Unit tests for the SQLite-backed key-value storage."""

import pytest

from scard.data.local_storage import StorageQuotaExceededError


# ── Raw items ─────────────────────────────────────

def test_set_get_and_overwrite(storage):
    assert storage.get_item("k") is None
    storage.set_item("k", "one")
    storage.set_item("k", "two")
    assert storage.get_item("k") == "two"
    assert storage.keys() == ["k"]


def test_remove_and_clear(storage):
    storage.set_item("a", "1")
    storage.set_item("b", "2")
    storage.remove_item("a")
    storage.remove_item("missing")  # no-op
    assert storage.keys() == ["b"]

    storage.clear()
    assert storage.keys() == []


# ── JSON helpers ──────────────────────────────────

def test_json_roundtrip(storage):
    storage.write_json("data", {"nome": "Ana", "valores": [1, 2]})
    assert storage.read_json("data") == {"nome": "Ana", "valores": [1, 2]}


def test_corrupted_blob_falls_back_to_default(storage):
    storage.set_item("broken", "{not json")
    assert storage.read_json("broken", default=[]) == []
    assert storage.read_json("absent", default={"x": 1}) == {"x": 1}


# ── Quota ─────────────────────────────────────────

def test_quota_exceeded_keeps_previous_value(storage):
    storage.write_json("logo", "small")
    with pytest.raises(StorageQuotaExceededError) as exc:
        storage.write_json("logo", "x" * (70 * 1024))
    assert exc.value.key == "logo"
    assert storage.read_json("logo") == "small"


def test_set_items_is_all_or_nothing(storage):
    storage.set_items({"a": "1", "b": "2"})
    assert storage.get_item("a") == "1"

    with pytest.raises(StorageQuotaExceededError) as exc:
        storage.set_items({"a": "novo", "b": "x" * (70 * 1024)})
    assert exc.value.key == "b"
    assert storage.get_item("a") == "1"
    assert storage.get_item("b") == "2"
