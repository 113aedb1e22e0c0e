# src/taskflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKFLOW"

DEFAULT_STORAGE_QUOTA_BYTES = 5 * 1024 * 1024


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path

    # ---- Persistence ----
    persist: bool
    storage_key: str
    storage_quota_bytes: int | None

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "TaskFlow").strip() or "TaskFlow"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskflow"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "local_storage.json")

        persist = _env_bool(_k("PERSIST"), True)
        storage_key = _env(_k("STORAGE_KEY"), "tasks").strip() or "tasks"

        # 0 (or negative) disables the quota.
        quota = _env_int(_k("STORAGE_QUOTA_BYTES"), DEFAULT_STORAGE_QUOTA_BYTES)
        storage_quota_bytes = quota if quota > 0 else None

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_path=storage_path,
            persist=persist,
            storage_key=storage_key,
            storage_quota_bytes=storage_quota_bytes,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
