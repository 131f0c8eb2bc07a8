"""Tests for the JSON file record store."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from survey_portal_api.app.core.store import (
    LOGINS,
    RESPONSES,
    USERS,
    CorruptCollectionError,
    JsonFileRecordStore,
)


def test_load_missing_collection_creates_empty_file(store: JsonFileRecordStore, data_dir: Path) -> None:
    assert store.load(USERS) == []
    path = data_dir / "users.json"
    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_save_writes_pretty_printed_array(store: JsonFileRecordStore, data_dir: Path) -> None:
    store.save(RESPONSES, [{"q1": "yes"}])
    raw = (data_dir / "responses.json").read_text(encoding="utf-8")
    assert raw == json.dumps([{"q1": "yes"}], indent=2)


def test_append_preserves_insertion_order(store: JsonFileRecordStore) -> None:
    for i in range(5):
        store.append(RESPONSES, {"n": i})
    assert [r["n"] for r in store.load(RESPONSES)] == [0, 1, 2, 3, 4]


def test_update_returns_mutator_result(store: JsonFileRecordStore) -> None:
    store.save(USERS, [{"id": 1, "avatarUrl": ""}])

    def _mutate(records):
        records[0]["avatarUrl"] = "https://example.com/a.png"
        return "done"

    assert store.update(USERS, _mutate) == "done"
    assert store.load(USERS)[0]["avatarUrl"] == "https://example.com/a.png"


def test_update_does_not_write_when_mutator_raises(store: JsonFileRecordStore) -> None:
    store.save(USERS, [{"id": 1}])

    def _fail(records):
        records.append({"id": 2})
        raise RuntimeError("nope")

    with pytest.raises(RuntimeError):
        store.update(USERS, _fail)
    assert store.load(USERS) == [{"id": 1}]


def test_corrupt_file_is_not_reset(store: JsonFileRecordStore, data_dir: Path) -> None:
    data_dir.mkdir(parents=True)
    path = data_dir / "logins.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(CorruptCollectionError):
        store.load(LOGINS)
    assert path.read_text(encoding="utf-8") == "{not json"


def test_non_array_file_is_corrupt(store: JsonFileRecordStore, data_dir: Path) -> None:
    data_dir.mkdir(parents=True)
    (data_dir / "users.json").write_text('{"id": 1}', encoding="utf-8")
    with pytest.raises(CorruptCollectionError):
        store.load(USERS)


def test_unknown_collection_rejected(store: JsonFileRecordStore) -> None:
    with pytest.raises(ValueError):
        store.load("secrets")


def test_ensure_collections_creates_all_files(store: JsonFileRecordStore, data_dir: Path) -> None:
    store.ensure_collections()
    assert sorted(p.name for p in data_dir.iterdir()) == ["logins.json", "responses.json", "users.json"]


def test_concurrent_appends_are_not_lost(store: JsonFileRecordStore) -> None:
    def _worker(offset: int) -> None:
        for i in range(20):
            store.append(RESPONSES, {"n": offset + i})

    threads = [threading.Thread(target=_worker, args=(k * 100,)) for k in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store.load(RESPONSES)) == 80
