# tests/test_config.py

from __future__ import annotations

from datetime import time
from pathlib import Path

from study_planner.config import Settings

_VARS = (
    "DATA_DIR",
    "STORAGE_BACKEND",
    "STORAGE_PATH",
    "STORAGE_KEY",
    "REMINDER_ENABLED",
    "REMINDER_TIME",
    "NOTIFIER",
    "MATRIX_ROOM_ID",
    "MATRIX_STORE_PATH",
)


def _clear(monkeypatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(f"PLANNER_{name}", raising=False)


def test_defaults(monkeypatch) -> None:
    _clear(monkeypatch)
    s = Settings.from_env()

    assert s.data_dir == Path(".local/study_planner")
    assert s.storage_backend == "sqlite"
    assert s.storage_path == Path(".local/study_planner/planner.sqlite3")
    assert s.storage_key == "studyTasks"
    assert s.reminder_enabled is False
    assert s.reminder_time == time(8, 0)
    assert s.notifier == "console"


def test_overrides(monkeypatch, tmp_path: Path) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("PLANNER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PLANNER_STORAGE_BACKEND", "FILE")
    monkeypatch.setenv("PLANNER_REMINDER_ENABLED", "yes")
    monkeypatch.setenv("PLANNER_REMINDER_TIME", "19:45")
    monkeypatch.setenv("PLANNER_NOTIFIER", "matrix")
    monkeypatch.setenv("PLANNER_MATRIX_ROOM_ID", " !room:example.org ")

    s = Settings.from_env()
    assert s.storage_backend == "file"
    assert s.storage_path == tmp_path / "storage"
    assert s.reminder_enabled is True
    assert s.reminder_time == time(19, 45)
    assert s.notifier == "matrix"
    assert s.matrix_room_id == "!room:example.org"
    assert s.matrix_store_path == tmp_path / "matrix_store"


def test_invalid_values_fall_back(monkeypatch) -> None:
    _clear(monkeypatch)
    monkeypatch.setenv("PLANNER_STORAGE_BACKEND", "postgres")
    monkeypatch.setenv("PLANNER_REMINDER_TIME", "25:99")
    monkeypatch.setenv("PLANNER_NOTIFIER", "pager")

    s = Settings.from_env()
    assert s.storage_backend == "sqlite"
    assert s.reminder_time == time(8, 0)
    assert s.notifier == "console"
