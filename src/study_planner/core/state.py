# src/study_planner/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..tasks.reminder import ReminderRunner
from ..tasks.task_store import TaskStore
from .ports import Notifier


@dataclass
class AppState:
    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: Any

    store: TaskStore
    notifier: Notifier

    reminder: ReminderRunner | None = None

    # Serializes command handling (main thread) and reminder reads (background thread).
    lock: threading.RLock = field(default_factory=threading.RLock)

    def count_pending(self) -> int:
        with self.lock:
            return self.store.stats().pending
