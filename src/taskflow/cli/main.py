# src/taskflow/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console task tracker
in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    # The console doubles as the task board, so only warnings reach it.
    log_file = setup_logging(settings)

    logger.info("Starting %s (log=%s)...", getattr(settings, "app_name", "TaskFlow"), log_file)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    try:
        run_console_loop(state)
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
