# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskflow.core.state import AppState
from taskflow.storage.local_storage import MemoryStorage, StorageSlot
from taskflow.tasks.task_store import TaskStore

from .fakes import RecordingAdapter, StepClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment / .env.
    """
    return SimpleNamespace(
        app_name="TaskFlow",
        log_level="INFO",
        data_dir=tmp_path,
        storage_path=tmp_path / "local_storage.json",
        persist=True,
        storage_key="tasks",
        storage_quota_bytes=None,
    )


@pytest.fixture()
def clock() -> StepClock:
    return StepClock()


@pytest.fixture()
def adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture()
def store(adapter: RecordingAdapter, clock: StepClock) -> TaskStore:
    return TaskStore(adapter, clock=clock)


@pytest.fixture()
def state(settings: SimpleNamespace, clock: StepClock) -> AppState:
    """AppState over in-memory storage (no files touched)."""
    storage = MemoryStorage()
    return AppState(
        settings=settings,
        storage=storage,
        task_store=TaskStore(StorageSlot(storage, settings.storage_key), clock=clock),
    )
