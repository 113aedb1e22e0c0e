# src/taskflow/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import registry as command_registry
from ..cli.commands import render_tasks
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

PROMPT = "What needs to be done today? > "


def run_console_loop(
    state: AppState,
    *,
    read_line: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """
    Interactive task tracker.

    Plain lines add tasks; /commands do everything else. The board is
    redrawn whenever the store reports a change.
    """
    store = state.task_store
    app_name = str(getattr(state.settings, "app_name", "TaskFlow"))
    changed = False

    def on_change(_store: TaskStore) -> None:
        nonlocal changed
        changed = True

    store.subscribe(on_change)
    logger.info("Console connector started (tasks=%d).", len(store.tasks))

    write(render_tasks(store, app_name))
    write("\nType a task and press Enter to add it. Use /help for commands, /exit to quit.\n")

    try:
        while True:
            try:
                line = read_line(PROMPT).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                write("")
                break

            if not line:
                continue

            if line.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            changed = False
            try:
                reply = command_registry.handle(state, line)
                if reply is None:
                    store.add_task(line)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if changed:
                write(render_tasks(store, app_name))
            if reply:
                write(reply)
    finally:
        store.unsubscribe(on_change)

    logger.info("Console connector finished.")
