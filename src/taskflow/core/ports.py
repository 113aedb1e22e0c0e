# src/taskflow/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store depends on Protocols instead of concrete implementations.
This keeps storage backends swappable and makes testing easier.
"""

from typing import Protocol


class PersistenceAdapter(Protocol):
    """
    A single key-value slot holding the task snapshot.

    - load() returns the last saved blob, or None if nothing was saved yet.
    - save() overwrites the whole value (no merge/append semantics).
    """

    def load(self) -> str | None: ...
    def save(self, blob: str) -> None: ...


class KeyValueStorage(Protocol):
    """Browser-localStorage-like blob store (string keys -> string values)."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...
    def keys(self) -> list[str]: ...
    def clear(self) -> None: ...
