# src/study_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store and the reminder depend on Protocols instead of concrete
implementations, so storage backends and notification channels stay
swappable and easy to fake in tests.
"""

from typing import Awaitable, Protocol


class KeyValueStorage(Protocol):
    """
    A named-slot string store (the local counterpart of browser localStorage).

    get() returns None for a missing key. Implementations raise their native
    errors (OSError, sqlite3.Error, ...) on failure; callers decide policy.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class Notifier(Protocol):
    """
    Notification channel used by the daily reminder.

    Two steps: request_permission() once, then notify() on every fire.
    """

    def request_permission(self) -> Awaitable[bool]: ...

    def notify(self, *, title: str, body: str) -> Awaitable[None]: ...
