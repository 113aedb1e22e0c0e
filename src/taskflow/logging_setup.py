# src/taskflow/logging_setup.py

"""
Logging for the console tracker.

The terminal is the task board, so the console handler only lets warnings
through; the rotating log file under <data_dir> gets everything at
settings.log_level.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "taskflow.log"
LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUPS = 3


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """'debug' / 'WARNING' / '10' -> logging level; unknown names fall back to default."""
    if not name:
        return default
    raw = name.strip().upper()
    if raw.isdecimal():
        return int(raw)
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else default


class _BoardNoiseFilter(logging.Filter):
    """
    Keep log lines from interleaving with the board:
    - taskflow records pass (the handler level already limits them)
    - per-write storage chatter stays in the file unless it is a problem
    - everything else (py.warnings, third-party) only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("taskflow.storage."):
            return record.levelno >= logging.WARNING
        if name.startswith("taskflow."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(settings, *, console_level: int = logging.WARNING) -> Path:
    """
    Configure root logging from settings (data_dir, log_level).

    Call this ONCE, very early. Returns the log file path.
    """
    log_dir = Path(getattr(settings, "data_dir", ".local/taskflow"))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME
    file_level = level_from_name(getattr(settings, "log_level", None))

    root = logging.getLogger()
    root.setLevel(min(file_level, console_level))

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_BoardNoiseFilter())
    root.addHandler(ch)

    fh = RotatingFileHandler(
        str(log_file), maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
