# src/taskflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the storage backend into the task store.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import KeyValueStorage
from ..core.state import AppState
from ..storage.local_storage import LocalStorage, MemoryStorage, StorageSlot
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_storage(settings) -> KeyValueStorage:
    quota = getattr(settings, "storage_quota_bytes", None)
    if not getattr(settings, "persist", True):
        logger.info("Persistence disabled; tasks live only for this session.")
        return MemoryStorage(quota_bytes=quota)
    return LocalStorage(settings.storage_path, quota_bytes=quota)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if getattr(settings, "persist", True):
        _ensure_local_dirs(settings)

    storage = create_storage(settings)
    slot = StorageSlot(storage, getattr(settings, "storage_key", "tasks"))

    return AppState(
        settings=settings,
        storage=storage,
        task_store=TaskStore(slot),
    )
