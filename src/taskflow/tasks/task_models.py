# src/taskflow/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum


class TaskFilter(StrEnum):
    """
    View selector over the task list.

    Never mutates tasks and is never persisted (resets to ALL each session).
    """

    ALL = "all"
    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter | None:
        if raw is None:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


def utc_now_ms() -> datetime:
    """Current UTC time truncated to milliseconds (the snapshot's precision)."""
    now = datetime.now(UTC)
    return now.replace(microsecond=(now.microsecond // 1000) * 1000)


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    text: str
    completed: bool
    created_at: datetime


@dataclass(frozen=True, slots=True)
class TaskCounts:
    total: int
    completed: int
    pending: int
