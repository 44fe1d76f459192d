# tests/conftest.py

from __future__ import annotations

from datetime import time
from pathlib import Path
from types import SimpleNamespace

import pytest

from study_planner.core.state import AppState
from study_planner.tasks.task_store import TaskStore

from .fakes import FakeNotifier, FakeStorage, FixedClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="study-planner-test",
        data_dir=tmp_path,
        storage_backend="sqlite",
        storage_path=tmp_path / "planner.sqlite3",
        storage_key="studyTasks",
        export_dir=tmp_path / "export",
        reminder_enabled=False,
        reminder_time=time(8, 0),
        notifier="console",
    )


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture()
def store(storage: FakeStorage, clock: FixedClock) -> TaskStore:
    return TaskStore(storage, clock=clock)


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def state(settings: SimpleNamespace, store: TaskStore, notifier: FakeNotifier) -> AppState:
    """AppState wired with an in-memory store and a fake notifier."""
    return AppState(settings=settings, store=store, notifier=notifier)
