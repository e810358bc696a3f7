from __future__ import annotations

import json
import logging

import pytest

from pyepaper.exceptions import EpaperStorageError
from pyepaper.state.bootstrap import load_initial_state
from pyepaper.state.storage import FileStorage, MemoryStorage
from pyepaper.state.store import INITIAL_STATE


class _BrokenStorage:
    def get_item(self, key: str) -> str | None:
        raise OSError("permission denied")

    def set_item(self, key: str, value: str) -> None:  # pragma: no cover
        raise OSError("permission denied")


def test_missing_entry_returns_initial_state() -> None:
    assert load_initial_state(MemoryStorage()) is INITIAL_STATE


def test_restores_cached_bitmaps_and_keeps_sentinels() -> None:
    storage = MemoryStorage({"bitmap_cache": json.dumps({"/bitmaps/a.bin": {"data": "AAE=", "hash": "-7"}})})

    state = load_initial_state(storage)

    assert state.cached_bitmaps["/bitmaps/a.bin"].data == "AAE="
    assert state.cached_bitmaps["/bitmaps/a.bin"].hash == "-7"
    assert not state.is_loaded("settings")
    assert not state.is_loaded("variables")
    assert not state.is_loaded("bitmaps")


def test_numeric_persisted_hash_is_coerced_to_string() -> None:
    storage = MemoryStorage({"bitmap_cache": '{"a": {"data": "AA==", "hash": 12345}}'})
    assert load_initial_state(storage).cached_bitmaps["a"].hash == "12345"


def test_null_payload_yields_empty_cache() -> None:
    state = load_initial_state(MemoryStorage({"bitmap_cache": "null"}))
    assert state == INITIAL_STATE
    assert state.cached_bitmaps == {}


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        "[1, 2, 3]",
        "[]",
        "false",
        "0",
        '""',
        '{"a": "not-a-record"}',
        '{"a": {"data": 5}}',
        '"just a string"',
    ],
)
def test_corrupt_payload_falls_back_to_initial_state(payload: str, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="pyepaper.state.bootstrap"):
        state = load_initial_state(MemoryStorage({"bitmap_cache": payload}))

    assert state is INITIAL_STATE
    assert any("Error loading cached state" in record.getMessage() for record in caplog.records)


def test_unreadable_storage_falls_back_to_initial_state() -> None:
    assert load_initial_state(_BrokenStorage()) is INITIAL_STATE


def test_custom_key() -> None:
    storage = MemoryStorage({"other": '{"a": {"data": "AA==", "hash": "1"}}'})
    assert load_initial_state(storage, key="other").cached_bitmaps["a"].hash == "1"
    assert load_initial_state(storage) is INITIAL_STATE


def test_file_storage_round_trip(tmp_path) -> None:
    storage = FileStorage(tmp_path / "cache")
    assert storage.get_item("bitmap_cache") is None

    storage.set_item("bitmap_cache", '{"a": {"data": "AA==", "hash": "1"}}')

    assert (tmp_path / "cache" / "bitmap_cache.json").exists()
    assert not (tmp_path / "cache" / "bitmap_cache.tmp").exists()
    assert load_initial_state(FileStorage(tmp_path / "cache")).cached_bitmaps["a"].data == "AA=="


def test_file_storage_rejects_path_like_keys(tmp_path) -> None:
    with pytest.raises(EpaperStorageError):
        FileStorage(tmp_path).set_item("../escape", "{}")
    with pytest.raises(EpaperStorageError):
        FileStorage(tmp_path).set_item("my cache", "{}")


def test_invalid_key_on_file_storage_falls_back_to_initial_state(tmp_path) -> None:
    assert load_initial_state(FileStorage(tmp_path), key="my cache") is INITIAL_STATE
