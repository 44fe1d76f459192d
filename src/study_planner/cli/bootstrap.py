# src/study_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the storage backend, task store and notifier into AppState,
- starts/stops the daily reminder thread.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console_notifier import ConsoleNotifier
from ..core.ports import Notifier
from ..core.state import AppState
from ..tasks.reminder import start_reminder_in_background
from ..tasks.storage import open_storage
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def build_notifier(settings) -> Notifier:
    if getattr(settings, "notifier", "console") == "matrix":
        # Imported lazily: nio is only needed when the Matrix channel is selected.
        from ..connectors.matrix_notifier import MatrixNotifier

        return MatrixNotifier(settings)
    return ConsoleNotifier()


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings and load saved tasks.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    storage = open_storage(settings.storage_backend, settings.storage_path)
    store = TaskStore(storage, key=settings.storage_key)
    store.load()

    return AppState(settings=settings, store=store, notifier=build_notifier(settings))


def start_reminder(state: AppState) -> bool:
    """Start the daily reminder thread unless one is already running."""
    if state.reminder is not None and state.reminder.is_running():
        return False

    runner = start_reminder_in_background(
        state.count_pending,
        state.notifier,
        at=state.settings.reminder_time,
    )
    state.reminder = runner
    return runner is not None


def stop_reminder(state: AppState, timeout: float = 5.0) -> bool:
    runner = state.reminder
    if runner is None:
        return False
    runner.stop()
    runner.join(timeout=timeout)
    state.reminder = None
    return True
