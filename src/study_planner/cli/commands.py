# src/study_planner/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from datetime import date
from pathlib import Path
from typing import cast

from ..core.exceptions import PersistenceError, TaskNotFoundError
from ..core.state import AppState
from ..tasks.export import export_tasks
from .bootstrap import start_reminder, stop_reminder
from .forms import FORM_USAGE, FormError, format_task_form, parse_task_form
from .views import format_stats, format_task_line, format_task_list, format_timeline

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

CONFIRM_FLAG = "-y"
NOT_SAVED = "Warning: the change was NOT saved"

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._raw: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        raw_args: bool = False,
    ) -> None:
        """raw_args handlers get the untouched rest of the line as a single argument."""
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler
            if raw_args:
                self._raw.add(alias.lower())
        if raw_args:
            self._raw.add(key)

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if name in self._raw:
            rest = line[1:].split(maxsplit=1)[1:]
            args = [rest[0].strip()] if rest and rest[0].strip() else []

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_id(args: list[str]) -> int | None:
    if not args:
        return None
    raw = args[0].lstrip("#")
    return int(raw) if raw.isdigit() else None


def _with_list(state: AppState, message: str) -> str:
    """Reply text followed by the refreshed (filtered) list view."""
    return f"{message}\n\n{format_task_list(state.store.filtered(), state.store.filter)}"


def _not_saved(state: AppState, message: str, err: PersistenceError) -> str:
    logger.warning("Persistence failure: %s", err)
    return _with_list(state, f"{message}\n{NOT_SAVED}: {err}")


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    reminder = "ON" if state.reminder is not None and state.reminder.is_running() else "OFF"
    at = getattr(settings, "reminder_time", None)
    at_s = at.strftime("%H:%M") if at is not None else "?"
    return (
        "Status:\n"
        f"  Storage: {getattr(settings, 'storage_backend', '?')} ({getattr(settings, 'storage_path', '?')})\n"
        f"  Tasks: {len(state.store.tasks)}\n"
        f"  Reminder: {reminder} at {at_s} via {getattr(settings, 'notifier', 'console')}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    return format_task_list(state.store.filtered(), state.store.filter)


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add title | due | priority | hours [| description]
    """
    if not args:
        return f"Usage: /add {FORM_USAGE}"
    try:
        form = parse_task_form(args[0], state.store.today())
    except FormError as e:
        return f"{e}\nUsage: /add {FORM_USAGE}"

    try:
        task = state.store.add(
            form.title,
            form.description,
            form.due_date,
            form.priority,
            form.estimated_time,
        )
    except PersistenceError as e:
        return _not_saved(state, f"Added: {form.title}", e)
    return _with_list(state, f"Added #{task.id}: {task.title}")


def cmd_show(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /show <id>"
    task = state.store.get(task_id)
    if task is None:
        return f"No task #{task_id}."
    return (
        f"{format_task_line(task)}\n"
        f"  created: {task.created_at.isoformat(timespec='seconds')}\n"
        f"  edit with: /edit {task.id} {format_task_form(task)}"
    )


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <id> title | due | priority | hours [| description]
    """
    parts = args[0].split(maxsplit=1) if args else []
    task_id = _parse_id(parts)
    if task_id is None or len(parts) < 2:
        return f"Usage: /edit <id> {FORM_USAGE}"
    try:
        form = parse_task_form(parts[1], state.store.today())
    except FormError as e:
        return f"{e}\nUsage: /edit <id> {FORM_USAGE}"

    try:
        task = state.store.update(
            task_id,
            title=form.title,
            description=form.description,
            due_date=form.due_date,
            priority=form.priority,
            estimated_time=form.estimated_time,
        )
    except TaskNotFoundError:
        return f"No task #{task_id}."
    except PersistenceError as e:
        return _not_saved(state, f"Updated #{task_id}", e)
    return _with_list(state, f"Updated #{task.id}: {task.title}")


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /done <id>"
    try:
        task = state.store.toggle_complete(task_id)
    except PersistenceError as e:
        return _not_saved(state, f"Toggled #{task_id}", e)
    if task is None:
        return f"No task #{task_id}."
    word = "completed" if task.completed else "reopened"
    return _with_list(state, f"#{task.id} {word}.")


def cmd_rm(state: AppState, args: list[str]) -> str:
    task_id = _parse_id(args)
    if task_id is None:
        return "Usage: /rm <id> -y"
    if CONFIRM_FLAG not in args[1:]:
        task = state.store.get(task_id)
        if task is None:
            return f"No task #{task_id}."
        return f"Delete #{task_id} ({task.title})? Repeat with: /rm {task_id} {CONFIRM_FLAG}"
    try:
        removed = state.store.remove(task_id)
    except PersistenceError as e:
        return _not_saved(state, f"Deleted #{task_id}", e)
    if not removed:
        return f"No task #{task_id}."
    return _with_list(state, f"Deleted #{task_id}.")


def cmd_clear(state: AppState, args: list[str]) -> str:
    if CONFIRM_FLAG not in args:
        n = state.store.stats().completed
        return f"Clear {n} completed task(s)? Repeat with: /clear {CONFIRM_FLAG}"
    try:
        removed = state.store.clear_completed()
    except PersistenceError as e:
        return _not_saved(state, "Cleared completed tasks", e)
    return _with_list(state, f"Cleared {removed} completed task(s).")


def cmd_filter(state: AppState, args: list[str]) -> str:
    """
    /filter                   -> show current filter
    /filter priority <value>  -> all | low | medium | high
    /filter status <value>    -> all | completed | pending | overdue
    /filter reset             -> all / all
    """
    if not args:
        f = state.store.filter
        return f"Filter: priority={f.priority.value}, status={f.status.value}"

    sub = args[0].lower()
    if sub == "reset":
        state.store.reset_filter()
        return format_task_list(state.store.filtered(), state.store.filter)

    if sub in ("priority", "status") and len(args) >= 2:
        try:
            state.store.set_filter(sub, args[1])
        except ValueError:
            return f"Invalid {sub} filter: {args[1]!r}."
        return format_task_list(state.store.filtered(), state.store.filter)

    return (
        "Usage:\n"
        "  /filter priority all|low|medium|high\n"
        "  /filter status all|completed|pending|overdue\n"
        "  /filter reset"
    )


def cmd_timeline(state: AppState, args: list[str]) -> str:
    center: date | None = None
    if args:
        try:
            center = date.fromisoformat(args[0])
        except ValueError:
            return "Usage: /timeline [YYYY-MM-DD]"
    return format_timeline(state.store.timeline_buckets(center))


def cmd_stats(state: AppState, args: list[str]) -> str:
    return format_stats(state.store.stats())


def cmd_export(state: AppState, args: list[str]) -> str:
    directory = Path(args[0]).expanduser() if args else Path(getattr(state.settings, "export_dir", "."))
    try:
        path = export_tasks(state.store, directory)
    except PersistenceError as e:
        return f"Export failed: {e}"
    return f"Exported {len(state.store.tasks)} task(s) to {path}"


def cmd_remind(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /remind      -> request notification permission and start the daily reminder
    /remind off  -> stop it
    """
    at = state.settings.reminder_time.strftime("%H:%M")

    if args and args[0].lower() in ("off", "stop", "0", "false", "no"):
        if stop_reminder(state):
            return "Daily reminder stopped."
        return "Daily reminder is not running."

    if state.reminder is not None and state.reminder.is_running():
        return f"Daily reminder is already set for {at}."

    if emit:
        with contextlib.suppress(Exception):
            emit("[REMINDER] Requesting notification permission...")

    if not start_reminder(state):
        return "Could not start the reminder thread (see log)."
    return f"Daily reminder set for {at}! (if permission is denied it stops; check /status)"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show storage and reminder status.")
registry.register("list", cmd_list, help_text="List tasks matching the current filter.", aliases=["ls"])
registry.register("add", cmd_add, help_text=f"Add a task: /add {FORM_USAGE}.", raw_args=True)
registry.register("show", cmd_show, help_text="Show one task: /show <id>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <same fields as /add>.", raw_args=True)
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["toggle"])
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id> -y.", aliases=["delete"])
registry.register("clear", cmd_clear, help_text="Delete all completed tasks: /clear -y.")
registry.register(
    "filter", cmd_filter, help_text="Filter: /filter priority <v> | /filter status <v> | /filter reset."
)
registry.register("timeline", cmd_timeline, help_text="7-day timeline: /timeline [YYYY-MM-DD].")
registry.register("stats", cmd_stats, help_text="Show completion statistics.")
registry.register("export", cmd_export, help_text="Export tasks to study-tasks.json: /export [dir].")
registry.register("remind", cmd_remind, help_text="Daily reminder: /remind | /remind off.")
