# tests/test_reminder.py

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, time

import pytest

from study_planner.tasks.reminder import (
    REMINDER_TITLE,
    build_reminder_text,
    next_fire_time,
    run_daily_reminder,
    start_reminder,
    start_reminder_in_background,
)

from .fakes import FakeNotifier, FakeSleeper, FixedClock

EIGHT = time(8, 0)


def test_next_fire_time_same_day_and_next_day() -> None:
    early = datetime(2026, 10, 19, 7, 30, tzinfo=UTC)
    late = datetime(2026, 10, 19, 9, 0, tzinfo=UTC)
    exact = datetime(2026, 10, 19, 8, 0, tzinfo=UTC)

    assert next_fire_time(early, EIGHT) == datetime(2026, 10, 19, 8, 0, tzinfo=UTC)
    assert next_fire_time(late, EIGHT) == datetime(2026, 10, 20, 8, 0, tzinfo=UTC)
    assert next_fire_time(exact, EIGHT) == exact


def test_build_reminder_text() -> None:
    assert build_reminder_text(0) is None
    assert build_reminder_text(3) == "You have 3 pending study tasks today!"


@pytest.mark.asyncio
async def test_reminder_fires_daily_and_reads_count_at_fire_time() -> None:
    clock = FixedClock(datetime(2026, 10, 19, 7, 0, tzinfo=UTC))
    sleeper = FakeSleeper(clock, max_calls=4)
    notifier = FakeNotifier()
    counts = iter([2, 5])

    with pytest.raises(asyncio.CancelledError):
        await run_daily_reminder(lambda: next(counts), notifier, at=EIGHT, clock=clock, sleep=sleeper)

    # 07:00 -> 08:00, nudge past the fire time, then a full day minus the nudge.
    assert sleeper.delays == [3600.0, 1.0, 86399.0, 1.0]
    assert [n.body for n in notifier.sent] == [
        "You have 2 pending study tasks today!",
        "You have 5 pending study tasks today!",
    ]
    assert all(n.title == REMINDER_TITLE for n in notifier.sent)


@pytest.mark.asyncio
async def test_reminder_skips_notification_when_nothing_pending() -> None:
    clock = FixedClock(datetime(2026, 10, 19, 9, 0, tzinfo=UTC))
    sleeper = FakeSleeper(clock, max_calls=2)
    notifier = FakeNotifier()

    with pytest.raises(asyncio.CancelledError):
        await run_daily_reminder(lambda: 0, notifier, at=EIGHT, clock=clock, sleep=sleeper)

    assert sleeper.delays[0] == 23 * 3600.0
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_reminder_keeps_running_after_send_failure() -> None:
    clock = FixedClock(datetime(2026, 10, 19, 7, 0, tzinfo=UTC))
    sleeper = FakeSleeper(clock, max_calls=4)
    notifier = FakeNotifier(fail=True)

    with pytest.raises(asyncio.CancelledError):
        await run_daily_reminder(lambda: 1, notifier, at=EIGHT, clock=clock, sleep=sleeper)

    assert len(notifier.sent) == 2


@pytest.mark.asyncio
async def test_start_reminder_denied_schedules_nothing() -> None:
    clock = FixedClock()
    sleeper = FakeSleeper(clock, max_calls=0)
    notifier = FakeNotifier(granted=False)

    assert await start_reminder(lambda: 1, notifier, clock=clock, sleep=sleeper) is False
    assert notifier.permission_requests == 1
    assert sleeper.delays == []
    assert notifier.sent == []


@pytest.mark.asyncio
async def test_start_reminder_granted_runs_loop() -> None:
    clock = FixedClock(datetime(2026, 10, 19, 7, 59, tzinfo=UTC))
    sleeper = FakeSleeper(clock, max_calls=2)
    notifier = FakeNotifier()

    with pytest.raises(asyncio.CancelledError):
        await start_reminder(lambda: 4, notifier, at=EIGHT, clock=clock, sleep=sleeper)

    assert notifier.permission_requests == 1
    assert [n.body for n in notifier.sent] == ["You have 4 pending study tasks today!"]


def test_background_runner_can_be_stopped() -> None:
    notifier = FakeNotifier()
    runner = start_reminder_in_background(lambda: 1, notifier, at=EIGHT)
    assert runner is not None

    runner.stop()
    runner.join(timeout=5.0)

    assert not runner.thread.is_alive()
    assert not runner.is_running()
    assert notifier.sent == []
