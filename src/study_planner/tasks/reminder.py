# src/study_planner/tasks/reminder.py

from __future__ import annotations

"""
Daily study reminder.

A small sleep-until-next-fire loop that:
- waits until the configured local time of day,
- reads the number of pending tasks,
- sends a notification via an injected notifier port when anything is pending,
- reschedules itself for the next day.

The reminder only reads the store. Delivery (console, Matrix, ...) belongs to the notifier.
"""

import asyncio
import contextlib
import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, time, timedelta

from ..core.ports import Notifier
from ..logging_setup import REMINDER_THREAD_NAME

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Study Planner Reminder"
DEFAULT_REMINDER_AT = time(8, 0)

Sleep = Callable[[float], Awaitable[None]]


def _local_now() -> datetime:
    return datetime.now().astimezone()


def next_fire_time(now: datetime, at: time) -> datetime:
    """Today at `at`, or the same time tomorrow if `now` is already past it."""
    target = now.replace(hour=at.hour, minute=at.minute, second=0, microsecond=0)
    if now > target:
        target += timedelta(days=1)
    return target


def build_reminder_text(pending: int) -> str | None:
    if pending <= 0:
        return None
    return f"You have {pending} pending study tasks today!"


async def run_daily_reminder(
        count_pending: Callable[[], int],
        notifier: Notifier,
        *,
        at: time = DEFAULT_REMINDER_AT,
        clock: Callable[[], datetime] = _local_now,
        sleep: Sleep = asyncio.sleep,
) -> None:
    """
    Fire once per day at `at` (local time).

    On each fire:
    - count_pending() is read at fire time (not at schedule time)
    - nothing is sent when the count is zero
    - a failed send is logged; the next day is still scheduled

    To stop the reminder, cancel the coroutine/task.
    """
    while True:
        now = clock()
        fire_at = next_fire_time(now, at)
        delay = max(0.0, (fire_at - now).total_seconds())
        logger.debug("Next reminder at %s (in %.0fs)", fire_at.isoformat(), delay)

        await sleep(delay)

        try:
            pending = int(count_pending())
        except Exception:
            logger.exception("Reminder failed to read pending count")
            pending = 0

        text = build_reminder_text(pending)
        if text is None:
            logger.info("Reminder fired: nothing pending, no notification sent")
        else:
            try:
                await notifier.notify(title=REMINDER_TITLE, body=text)
                logger.info("Reminder sent (pending=%d)", pending)
            except Exception:
                logger.exception("Reminder notification failed (pending=%d)", pending)

        # Fire time passed; make sure the next iteration targets tomorrow even with a fast sleep.
        if clock() <= fire_at:
            await sleep(1.0)


async def start_reminder(
        count_pending: Callable[[], int],
        notifier: Notifier,
        *,
        at: time = DEFAULT_REMINDER_AT,
        clock: Callable[[], datetime] = _local_now,
        sleep: Sleep = asyncio.sleep,
) -> bool:
    """
    Two-step protocol: ask the notifier for permission, then run the daily loop.

    Returns False (without scheduling anything) if permission is denied.
    Otherwise runs until cancelled.
    """
    try:
        granted = await notifier.request_permission()
    except Exception:
        logger.exception("Notification permission request failed")
        granted = False

    if not granted:
        logger.warning("Notification permission denied; daily reminder not scheduled")
        return False

    logger.info("Daily reminder set for %s", at.strftime("%H:%M"))
    await run_daily_reminder(count_pending, notifier, at=at, clock=clock, sleep=sleep)
    return True


@dataclass
class ReminderRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    task: asyncio.Task

    def is_running(self) -> bool:
        return self.thread.is_alive() and not self.task.done()

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.task.cancel)
        except Exception:
            logger.debug("Failed to signal reminder stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_reminder_in_background(
        count_pending: Callable[[], int],
        notifier: Notifier,
        *,
        at: time = DEFAULT_REMINDER_AT,
) -> ReminderRunner | None:
    """
    Start the reminder in a background thread (so the console REPL can run in parallel).

    The console REPL is blocking (input()); the reminder is async and gets its own event loop.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        task = loop.create_task(start_reminder(count_pending, notifier, at=at))

        holder["loop"] = loop
        holder["task"] = task
        ready.set()

        try:
            with contextlib.suppress(asyncio.CancelledError):
                loop.run_until_complete(task)
        except Exception:
            logger.exception("Reminder thread crashed.")
        finally:
            close = getattr(notifier, "close", None)
            if close is not None:
                try:
                    loop.run_until_complete(close())
                except Exception:
                    logger.debug("Notifier close failed.", exc_info=True)
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name=REMINDER_THREAD_NAME, daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    task = holder.get("task")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(task, asyncio.Task):
        logger.error("Reminder thread did not initialize properly.")
        return None

    logger.info("Reminder background thread started.")
    return ReminderRunner(thread=t, loop=loop, task=task)
