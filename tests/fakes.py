# tests/fakes.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta


class FakeStorage:
    """
    In-memory KeyValueStorage.

    - fail_writes / fail_reads simulate quota errors and unreadable slots
    - writes counts set() calls for "persists after every mutation" assertions
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.fail_writes = False
        self.fail_reads = False
        self.writes = 0

    def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise OSError("storage unavailable")
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("quota exceeded")
        self.writes += 1
        self.data[key] = value


class FixedClock:
    """Callable clock returning a controllable aware datetime."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 10, 19, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@dataclass(slots=True)
class SentNotification:
    title: str
    body: str


@dataclass(slots=True)
class FakeNotifier:
    """Fake Notifier used by reminder tests."""

    granted: bool = True
    fail: bool = False
    permission_requests: int = 0
    sent: list[SentNotification] = field(default_factory=list)

    async def request_permission(self) -> bool:
        self.permission_requests += 1
        return self.granted

    async def notify(self, *, title: str, body: str) -> None:
        self.sent.append(SentNotification(title=title, body=body))
        if self.fail:
            raise RuntimeError("delivery failed")


class FakeSleeper:
    """
    Replaces asyncio.sleep: records delays and advances the clock instead of waiting.

    Raises CancelledError once max_calls is exceeded, which ends the reminder loop.
    """

    def __init__(self, clock: FixedClock, max_calls: int) -> None:
        self.clock = clock
        self.max_calls = max_calls
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        if len(self.delays) >= self.max_calls:
            raise asyncio.CancelledError
        self.delays.append(delay)
        self.clock.advance(seconds=delay)
