# src/taskflow/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.task_models import Task, TaskFilter
from ..tasks.task_store import TaskStore

# (state, args, text) -> reply; `text` is the raw remainder after the command name.
CommandHandler = Callable[[AppState, list[str], str], str]

logger = logging.getLogger(__name__)

_FILTER_LABELS = {
    TaskFilter.ALL: "All Tasks",
    TaskFilter.PENDING: "Pending",
    TaskFilter.COMPLETED: "Completed",
}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        body = line[1:]
        parts = body.split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]
        text = body.strip()[len(parts[0]) :].strip()

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args, text)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit (alias: /quit).")
        lines.append("Anything not starting with / is added as a new task.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def format_created(task: Task) -> str:
    """Creation date in local time, e.g. 'Oct 19, 2026'."""
    try:
        local = task.created_at.astimezone()
    except (ValueError, OverflowError, OSError):
        # Near datetime.min/max the local offset can overflow; show the stored UTC date.
        local = task.created_at
    return f"{local:%b} {local.day}, {local.year}"


def render_tasks(store: TaskStore, app_name: str = "TaskFlow") -> str:
    counts = store.counts()
    tabs = " ".join(
        f"[{label}]" if f is store.filter else label for f, label in _FILTER_LABELS.items()
    )
    lines = [
        f"{app_name} | Total: {counts.total}  Completed: {counts.completed}  Pending: {counts.pending}",
        f"Filter: {tabs}",
        "",
    ]

    visible = store.visible_tasks()
    if not visible:
        lines.append("  No tasks yet")
        lines.append("  Add your first task to get started!")
        return "\n".join(lines)

    for n, task in enumerate(visible, start=1):
        if task.id == store.editing_id:
            lines.append(f"  {n:>2}. [~] editing: {store.edit_draft!r}  (/save or /cancel)")
            continue
        box = "[x]" if task.completed else "[ ]"
        lines.append(f"  {n:>2}. {box} {task.text}  ({format_created(task)})")
    return "\n".join(lines)


# ---- helpers ----


def resolve_task(store: TaskStore, token: str) -> Task | None:
    """
    '3'    -> third task of the current view (1-based)
    '#id'  -> task with that id, regardless of filter
    """
    token = token.strip().rstrip(".")
    if token.startswith("#"):
        raw_id = token[1:]
        return store.get_task(int(raw_id)) if raw_id.isdecimal() else None

    if not token.isdecimal():
        return None
    idx = int(token) - 1
    visible = store.visible_tasks()
    if idx < 0 or idx >= len(visible):
        return None
    return visible[idx]


def _no_task(token: str) -> str:
    return f"No task {token} in this view. Use /list to see task numbers."


# ---- handlers ----


def cmd_help(state: AppState, args: list[str], text: str) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str], text: str) -> str:
    app_name = str(getattr(state.settings, "app_name", "TaskFlow"))
    return render_tasks(state.task_store, app_name)


def cmd_stats(state: AppState, args: list[str], text: str) -> str:
    c = state.task_store.counts()
    return f"Total: {c.total}\nCompleted: {c.completed}\nPending: {c.pending}"


def cmd_add(state: AppState, args: list[str], text: str) -> str:
    # Blank text is silently ignored, like pressing Enter on an empty input.
    state.task_store.add_task(text)
    return ""


def cmd_toggle(state: AppState, args: list[str], text: str) -> str:
    if len(args) != 1:
        return "Usage: /done <n>"
    task = resolve_task(state.task_store, args[0])
    if task is None:
        return _no_task(args[0])
    state.task_store.toggle_complete(task.id)
    return ""


def cmd_delete(state: AppState, args: list[str], text: str) -> str:
    if len(args) != 1:
        return "Usage: /rm <n>"
    task = resolve_task(state.task_store, args[0])
    if task is None:
        return _no_task(args[0])
    state.task_store.delete_task(task.id)
    return f'Task "{task.text}" removed.'


def cmd_edit(state: AppState, args: list[str], text: str) -> str:
    """
    /edit <n>          -> open the editor with the current text as draft
    /edit <n> <text>   -> open, replace draft and save in one step
    """
    if not args:
        return "Usage: /edit <n> [new text]"

    store = state.task_store
    task = resolve_task(store, args[0])
    if task is None:
        return _no_task(args[0])

    store.start_edit(task.id)
    new_text = text[len(args[0]) :].strip()
    if not new_text:
        return f"Editing: {task.text!r}. Use /draft <text>, then /save or /cancel."

    store.update_draft(new_text)
    if store.save_edit() is None:
        store.cancel_edit()
        return "Task text cannot be empty."
    return ""


def cmd_draft(state: AppState, args: list[str], text: str) -> str:
    store = state.task_store
    if store.editing_id is None:
        return "Nothing is being edited. Use /edit <n> first."
    store.update_draft(text)
    return ""


def cmd_save(state: AppState, args: list[str], text: str) -> str:
    store = state.task_store
    if store.editing_id is None:
        return "Nothing is being edited."
    if store.save_edit() is None:
        # Blank draft: the edit stays open.
        return "Task text cannot be empty. Use /draft <text> or /cancel."
    return ""


def cmd_cancel(state: AppState, args: list[str], text: str) -> str:
    state.task_store.cancel_edit()
    return ""


def cmd_filter(state: AppState, args: list[str], text: str) -> str:
    """
    /filter                          -> show current filter
    /filter all|pending|completed    -> switch the view
    """
    store = state.task_store
    if not args:
        return f"Current filter: {store.filter.value}. Use /filter all|pending|completed."

    chosen = TaskFilter.parse(args[0])
    if chosen is None:
        return "Usage: /filter all|pending|completed"
    store.set_filter(chosen)
    return ""


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the task list.", aliases=["ls"])
registry.register("stats", cmd_stats, help_text="Show total / completed / pending counts.")
registry.register("add", cmd_add, help_text="Add a task: /add <text>.")
registry.register(
    "done", cmd_toggle, help_text="Toggle completion: /done <n> (or #id).", aliases=["toggle"]
)
registry.register("rm", cmd_delete, help_text="Delete a task: /rm <n>.", aliases=["del", "delete"])
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <n> [new text].")
registry.register("draft", cmd_draft, help_text="Replace the edit draft: /draft <text>.")
registry.register("save", cmd_save, help_text="Save the task under edit.")
registry.register("cancel", cmd_cancel, help_text="Discard the edit draft.")
registry.register(
    "filter", cmd_filter, help_text="Filter the view: /filter all | pending | completed."
)
