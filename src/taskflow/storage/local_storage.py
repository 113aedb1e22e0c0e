# src/taskflow/storage/local_storage.py

"""
Local key-value blob storage (the desktop counterpart of browser localStorage).

- LocalStorage: one JSON object file, {key: value} with string values.
- MemoryStorage: same interface, process-local (tests, TASKFLOW_PERSIST=0).
- StorageSlot: binds a storage + key into a PersistenceAdapter for TaskStore.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage cannot be written."""


class QuotaExceededError(StorageError):
    """The write would take the storage over its byte quota."""


def _encoded_size(items: dict[str, str]) -> int:
    return len(json.dumps(items, ensure_ascii=False).encode("utf-8", "surrogatepass"))


def _check_quota(items: dict[str, str], quota_bytes: int | None, key: str) -> None:
    if quota_bytes is None:
        return
    size = _encoded_size(items)
    if size > quota_bytes:
        raise QuotaExceededError(
            f"setting {key!r} needs {size} bytes, quota is {quota_bytes} bytes"
        )


class MemoryStorage:
    def __init__(self, quota_bytes: int | None = None) -> None:
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        candidate = dict(self._items)
        candidate[key] = str(value)
        _check_quota(candidate, self._quota_bytes, key)
        self._items = candidate

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)

    def clear(self) -> None:
        self._items.clear()


class LocalStorage:
    """
    File-backed storage.

    Every write rewrites the whole file atomically (tmp + os.replace), so a
    crash mid-write leaves the previous content intact. A missing or corrupt
    file reads as empty.
    """

    def __init__(self, path: str | Path, *, quota_bytes: int | None = None) -> None:
        self._path = Path(path)
        self._quota_bytes = quota_bytes
        self._path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("LocalStorage ready path=%s quota=%s", self._path, quota_bytes)

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read local storage %s; treating as empty.", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Local storage %s is not a JSON object; treating as empty.", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, items: dict[str, str]) -> None:
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(json.dumps(items, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
        except (OSError, ValueError) as e:
            # ValueError: text the codec refuses (e.g. lone surrogates).
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise StorageError(f"cannot write {self._path}: {e}") from e
        with contextlib.suppress(OSError):
            # Best-effort: keep the file private on disk.
            os.chmod(self._path, 0o600)
        logger.debug("Local storage written path=%s keys=%d", self._path, len(items))

    # ---- public API ----

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read_all()
        items[key] = str(value)
        _check_quota(items, self._quota_bytes, key)
        self._write_all(items)

    def remove_item(self, key: str) -> None:
        items = self._read_all()
        if key not in items:
            return
        del items[key]
        self._write_all(items)

    def keys(self) -> list[str]:
        return list(self._read_all())

    def clear(self) -> None:
        self._write_all({})


class StorageSlot:
    """PersistenceAdapter over a single key of a KeyValueStorage."""

    def __init__(self, storage: KeyValueStorage, key: str = "tasks") -> None:
        self._storage = storage
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> str | None:
        return self._storage.get_item(self._key)

    def save(self, blob: str) -> None:
        self._storage.set_item(self._key, blob)
