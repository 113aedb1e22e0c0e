# src/taskflow/tasks/snapshot.py

"""
Snapshot codec: the full task list <-> the JSON blob kept in local storage.

Wire format (one JSON array, insertion order):

    [{"id": 1700000000000, "text": "Buy milk", "completed": false,
      "createdAt": "2023-11-14T22:13:20.000Z"}, ...]

Filter and edit state are view-only and never appear here.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from .task_models import Task


class SnapshotError(ValueError):
    """The stored blob cannot be turned into a valid task list."""


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: str) -> datetime:
    try:
        ts = datetime.fromisoformat(raw)
    except ValueError as e:
        raise SnapshotError(f"bad createdAt: {raw!r}") from e

    try:
        ts = ts.replace(tzinfo=UTC) if ts.tzinfo is None else ts.astimezone(UTC)
    except (ValueError, OverflowError) as e:
        # e.g. year 1 with a positive offset falls before datetime.min in UTC
        raise SnapshotError(f"createdAt out of range: {raw!r}") from e
    return ts.replace(microsecond=(ts.microsecond // 1000) * 1000)


def task_to_record(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "createdAt": format_timestamp(task.created_at),
    }


def record_to_task(raw: Any) -> Task:
    if not isinstance(raw, dict):
        raise SnapshotError(f"task record must be an object, got {type(raw).__name__}")

    for field in ("id", "text", "completed", "createdAt"):
        if field not in raw:
            raise SnapshotError(f"task record missing {field!r}")

    task_id = raw["id"]
    # bool is an int subclass; JSON true/false is not an id.
    if isinstance(task_id, bool) or not isinstance(task_id, int):
        raise SnapshotError(f"task id must be an integer, got {task_id!r}")

    text = raw["text"]
    if not isinstance(text, str) or not text.strip():
        raise SnapshotError(f"task {task_id} has empty or non-string text")

    completed = raw["completed"]
    if not isinstance(completed, bool):
        raise SnapshotError(f"task {task_id} completed flag must be boolean")

    created_at = raw["createdAt"]
    if not isinstance(created_at, str):
        raise SnapshotError(f"task {task_id} createdAt must be a string")

    return Task(
        id=task_id,
        text=text,
        completed=completed,
        created_at=parse_timestamp(created_at),
    )


def encode_snapshot(tasks: Iterable[Task]) -> str:
    # ASCII-only: lone surrogates in text are escaped instead of breaking the UTF-8 write.
    return json.dumps([task_to_record(t) for t in tasks])


def decode_snapshot(blob: str) -> list[Task]:
    """
    Parse a stored blob into tasks.

    All-or-nothing: a single bad record (or a duplicate id) rejects the
    whole snapshot with SnapshotError.
    """
    try:
        data = json.loads(blob)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"snapshot is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise SnapshotError(f"snapshot must be a JSON array, got {type(data).__name__}")

    tasks: list[Task] = []
    seen: set[int] = set()
    for raw in data:
        task = record_to_task(raw)
        if task.id in seen:
            raise SnapshotError(f"duplicate task id {task.id}")
        seen.add(task.id)
        tasks.append(task)
    return tasks
