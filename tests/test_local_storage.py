# tests/test_local_storage.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskflow.storage.local_storage import (
    LocalStorage,
    MemoryStorage,
    QuotaExceededError,
    StorageError,
    StorageSlot,
)
from taskflow.tasks.task_store import TaskStore


def test_local_storage_set_get_remove(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "ls.json"
    storage = LocalStorage(path)

    assert storage.get_item("tasks") is None
    storage.set_item("tasks", "[]")
    storage.set_item("other", "x")

    assert storage.get_item("tasks") == "[]"
    assert sorted(storage.keys()) == ["other", "tasks"]
    assert json.loads(path.read_text("utf-8")) == {"tasks": "[]", "other": "x"}

    storage.remove_item("other")
    storage.remove_item("missing")
    assert storage.keys() == ["tasks"]

    storage.clear()
    assert storage.keys() == []


def test_local_storage_survives_reopen(tmp_path: Path) -> None:
    path = tmp_path / "ls.json"
    LocalStorage(path).set_item("tasks", "payload")
    assert LocalStorage(path).get_item("tasks") == "payload"
    assert not path.with_suffix(".json.tmp").exists()


def test_corrupt_file_reads_as_empty(tmp_path: Path) -> None:
    path = tmp_path / "ls.json"
    path.write_text("{{{ definitely not json", "utf-8")
    storage = LocalStorage(path)

    assert storage.get_item("tasks") is None
    storage.set_item("tasks", "[]")
    assert storage.get_item("tasks") == "[]"


def test_quota_rejects_write_and_keeps_old_value(tmp_path: Path) -> None:
    storage = LocalStorage(tmp_path / "ls.json", quota_bytes=64)
    storage.set_item("tasks", "small")

    with pytest.raises(QuotaExceededError):
        storage.set_item("tasks", "x" * 200)
    assert storage.get_item("tasks") == "small"


def test_memory_storage_quota() -> None:
    storage = MemoryStorage(quota_bytes=32)
    storage.set_item("k", "v")
    with pytest.raises(QuotaExceededError):
        storage.set_item("k", "v" * 100)
    assert storage.get_item("k") == "v"


def test_task_store_over_file_slot_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "ls.json"
    store = TaskStore(StorageSlot(LocalStorage(path), "tasks"))
    task = store.add_task("Buy milk")
    assert task is not None
    store.toggle_complete(task.id)

    reopened = TaskStore(StorageSlot(LocalStorage(path), "tasks"))
    assert reopened.tasks == store.tasks


def test_task_store_keeps_working_when_quota_is_hit() -> None:
    storage = MemoryStorage(quota_bytes=200)
    store = TaskStore(StorageSlot(storage, "tasks"))

    for i in range(10):
        store.add_task(f"task number {i}")

    # In-memory state has everything; storage kept the last snapshot that fit.
    assert len(store.tasks) == 10
    persisted = json.loads(storage.get_item("tasks") or "[]")
    assert 0 < len(persisted) < 10


def test_lone_surrogate_text_survives_reopen(tmp_path: Path) -> None:
    path = tmp_path / "ls.json"
    store = TaskStore(StorageSlot(LocalStorage(path), "tasks"))
    for text in ("first", "bad \udcff byte", "later good task"):
        store.add_task(text)

    reopened = TaskStore(StorageSlot(LocalStorage(path), "tasks"))
    assert [t.text for t in reopened.tasks] == ["first", "bad \udcff byte", "later good task"]


def test_unencodable_value_raises_and_leaves_no_tmp(tmp_path: Path) -> None:
    path = tmp_path / "ls.json"
    storage = LocalStorage(path)
    storage.set_item("k", "ok")

    with pytest.raises(StorageError):
        storage.set_item("k", "\udcff")

    assert storage.get_item("k") == "ok"
    assert not path.with_suffix(".json.tmp").exists()
