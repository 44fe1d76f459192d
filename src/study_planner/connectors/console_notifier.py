# src/study_planner/connectors/console_notifier.py

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import TextIO

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsoleNotifier:
    """Prints reminders to the terminal (with a bell). Permission is always granted."""

    def __init__(self, stream: TextIO | None = None, *, bell: bool = True) -> None:
        self._stream = stream
        self._bell = bell

    async def request_permission(self) -> bool:
        return True

    async def notify(self, *, title: str, body: str) -> None:
        out = self._stream or sys.stdout
        bell = "\a" if self._bell and out.isatty() else ""
        out.write(f"\n[{_ts_local()}] {bell}[{title}] {body}\n")
        out.flush()
        logger.debug("Console notification shown: %s", body)
