# src/study_planner/logging_setup.py

"""
Logging for the planner.

The console is shared with the REPL prompt, so only this package's own
records reach it at the configured level. The reminder runs in its own
thread and would print over the prompt, so its routine records go to the
log file only. Everything lands in <data_dir>/study_planner.log.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILENAME = "study_planner.log"
REMINDER_THREAD_NAME = "study-reminder"

# Chatty libraries pulled in by the Matrix notifier.
_QUIET_LOGGERS = ("nio", "aiohttp", "asyncio")


class _PromptSafeFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        if record.threadName == REMINDER_THREAD_NAME:
            return record.levelno >= logging.WARNING
        if record.name.startswith("study_planner."):
            return True
        return record.levelno >= logging.ERROR


def _level(name: object, default: int = logging.WARNING) -> int:
    value = logging.getLevelName(str(name or "").upper())
    return value if isinstance(value, int) else default


def setup_logging(settings) -> Path:
    """Install console and file handlers from Settings. Returns the log file path."""
    log_dir = Path(settings.data_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILENAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(_level(getattr(settings, "log_level", None)))
    console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    console.addFilter(_PromptSafeFilter())
    root.addHandler(console)

    fh = logging.FileHandler(log_file, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(fh)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    return log_file
