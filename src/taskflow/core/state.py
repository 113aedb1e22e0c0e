# src/taskflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..core.ports import KeyValueStorage
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    storage: KeyValueStorage
    task_store: TaskStore
