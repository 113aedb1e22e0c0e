# src/taskflow/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from ..core.ports import PersistenceAdapter
from .snapshot import SnapshotError, decode_snapshot, encode_snapshot
from .task_models import Task, TaskCounts, TaskFilter, utc_now_ms

logger = logging.getLogger(__name__)

ChangeListener = Callable[["TaskStore"], None]


class TaskStore:
    """
    In-memory task list with explicit write-through persistence.

    State:
    - tasks (insertion order), persisted as a full snapshot after every
      mutation that changes them
    - filter and edit-in-progress (editing_id / edit_draft), never persisted

    Every operation is total: unknown ids and blank text are no-ops,
    storage failures are logged and swallowed.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        *,
        clock: Callable[[], datetime] = utc_now_ms,
    ) -> None:
        self._adapter = adapter
        self._clock = clock
        self._listeners: list[ChangeListener] = []

        self._tasks: list[Task] = []
        self._filter = TaskFilter.ALL
        self._editing_id: int | None = None
        self._edit_draft = ""
        self._last_id = 0

        self.initialize()

    # ---- hydration ----

    def initialize(self) -> None:
        """(Re)load tasks from the adapter; a missing or bad snapshot means an empty list."""
        self._tasks = self._load_tasks()
        self._filter = TaskFilter.ALL
        self._editing_id = None
        self._edit_draft = ""
        self._last_id = max((t.id for t in self._tasks), default=0)
        logger.info("TaskStore ready total=%s", len(self._tasks))
        self._notify()

    def _load_tasks(self) -> list[Task]:
        try:
            blob = self._adapter.load()
        except Exception:
            logger.exception("Failed to read task snapshot; starting empty.")
            return []

        if blob is None:
            return []

        try:
            return decode_snapshot(blob)
        except SnapshotError as e:
            logger.warning("Ignoring malformed task snapshot: %s", e)
            return []

    # ---- low-level helpers ----

    def _allocate_id(self, created_at: datetime) -> int:
        # Epoch milliseconds, bumped past the last id when the clock has not moved.
        candidate = int(created_at.timestamp() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def _index_of(self, task_id: int) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def _persist(self) -> None:
        try:
            self._adapter.save(encode_snapshot(self._tasks))
        except Exception:
            logger.exception("Failed to persist task snapshot (total=%s).", len(self._tasks))

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Task store listener crashed.")

    def _clear_edit(self) -> None:
        self._editing_id = None
        self._edit_draft = ""

    # ---- change notification ----

    def subscribe(self, listener: ChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ---- read API ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    @property
    def editing_id(self) -> int | None:
        return self._editing_id

    @property
    def edit_draft(self) -> str:
        return self._edit_draft

    def get_task(self, task_id: int) -> Task | None:
        idx = self._index_of(task_id)
        return None if idx is None else self._tasks[idx]

    def visible_tasks(self) -> list[Task]:
        if self._filter is TaskFilter.COMPLETED:
            return [t for t in self._tasks if t.completed]
        if self._filter is TaskFilter.PENDING:
            return [t for t in self._tasks if not t.completed]
        return list(self._tasks)

    def counts(self) -> TaskCounts:
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        return TaskCounts(total=total, completed=completed, pending=total - completed)

    # ---- mutations (persisted) ----

    def add_task(self, raw_text: str) -> Task | None:
        text = raw_text.strip()
        if not text:
            return None

        created_at = self._clock()
        task = Task(
            id=self._allocate_id(created_at),
            text=text,
            completed=False,
            created_at=created_at,
        )
        self._tasks.append(task)
        logger.debug("Task added id=%s", task.id)

        self._persist()
        self._notify()
        return task

    def toggle_complete(self, task_id: int) -> Task | None:
        idx = self._index_of(task_id)
        if idx is None:
            return None

        task = replace(self._tasks[idx], completed=not self._tasks[idx].completed)
        self._tasks[idx] = task
        logger.debug("Task toggled id=%s completed=%s", task_id, task.completed)

        self._persist()
        self._notify()
        return task

    def delete_task(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is None:
            return False

        del self._tasks[idx]
        if self._editing_id == task_id:
            self._clear_edit()
        logger.debug("Task deleted id=%s", task_id)

        self._persist()
        self._notify()
        return True

    def save_edit(self) -> Task | None:
        """
        Commit the draft to the task under edit.

        A blank draft is refused silently and the edit stays open.
        """
        if self._editing_id is None:
            return None

        text = self._edit_draft.strip()
        if not text:
            return None

        idx = self._index_of(self._editing_id)
        if idx is None:
            # Edited task vanished; nothing to commit.
            self._clear_edit()
            self._notify()
            return None

        task = replace(self._tasks[idx], text=text)
        self._tasks[idx] = task
        self._clear_edit()
        logger.debug("Task edited id=%s", task.id)

        self._persist()
        self._notify()
        return task

    # ---- view / edit state (never persisted) ----

    def start_edit(self, task_id: int) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False

        self._editing_id = task.id
        self._edit_draft = task.text
        self._notify()
        return True

    def update_draft(self, text: str) -> None:
        if self._editing_id is None:
            return
        self._edit_draft = text
        self._notify()

    def cancel_edit(self) -> None:
        self._clear_edit()
        self._notify()

    def set_filter(self, value: TaskFilter | str) -> None:
        self._filter = TaskFilter(value)
        self._notify()
