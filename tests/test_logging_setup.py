# tests/test_logging_setup.py

from __future__ import annotations

import logging
from types import SimpleNamespace

import pytest

from study_planner.logging_setup import REMINDER_THREAD_NAME, _PromptSafeFilter, setup_logging


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    nio_level = logging.getLogger("nio").level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved_handlers:
        root.addHandler(h)
    root.setLevel(saved_level)
    logging.getLogger("nio").setLevel(nio_level)
    logging.captureWarnings(False)


def _record(name: str, level: int, thread: str = "MainThread") -> logging.LogRecord:
    record = logging.LogRecord(name, level, __file__, 1, "msg", None, None)
    record.threadName = thread
    return record


def test_filter_keeps_reminder_thread_off_the_prompt() -> None:
    f = _PromptSafeFilter()

    assert f.filter(_record("study_planner.tasks.store", logging.INFO)) is True
    assert f.filter(_record("study_planner.tasks.reminder", logging.INFO, REMINDER_THREAD_NAME)) is False
    assert f.filter(_record("study_planner.tasks.reminder", logging.WARNING, REMINDER_THREAD_NAME)) is True
    assert f.filter(_record("nio.client", logging.WARNING)) is False
    assert f.filter(_record("nio.client", logging.ERROR)) is True


def test_setup_logging_uses_settings(tmp_path, restore_root_logging) -> None:
    settings = SimpleNamespace(data_dir=tmp_path / "data", log_level="info")

    log_file = setup_logging(settings)

    assert log_file == tmp_path / "data" / "study_planner.log"
    root = logging.getLogger()
    console, file_handler = root.handlers
    assert console.level == logging.INFO
    assert file_handler.level == logging.DEBUG
    assert logging.getLogger("nio").level == logging.WARNING

    logging.getLogger("study_planner.test").debug("hello file")
    file_handler.flush()
    assert "hello file" in log_file.read_text(encoding="utf-8")


def test_unknown_log_level_falls_back_to_warning(tmp_path, restore_root_logging) -> None:
    setup_logging(SimpleNamespace(data_dir=tmp_path, log_level="chatty"))
    assert logging.getLogger().handlers[0].level == logging.WARNING
