# src/study_planner/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import math
import time
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta
from typing import Any

from ..core.exceptions import PersistenceError, TaskNotFoundError
from ..core.ports import KeyValueStorage
from .task_models import (
    DayLabel,
    Priority,
    PriorityFilter,
    StatusFilter,
    Task,
    TaskFilter,
    TaskStats,
    TimelineBucket,
)

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "studyTasks"

Clock = Callable[[], datetime]


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class TaskStore:
    """
    In-memory task list mirrored to a single key-value slot.

    Every mutation rewrites the whole slot. The store owns the list; callers
    get Task objects back but should treat them as read-only snapshots and
    go through update()/toggle_complete() to change anything.

    "today" for status filters and stats is the clock's local date, read at
    query time.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        clock: Clock | None = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock: Clock = clock or _local_now
        self._tasks: list[Task] = []
        self._filter = TaskFilter()
        self._last_id = 0

    # ---- serialization ----

    @staticmethod
    def _task_to_record(task: Task) -> dict[str, Any]:
        created = task.created_at.astimezone(UTC).isoformat(timespec="milliseconds")
        return {
            "id": task.id,
            "title": task.title,
            "description": task.description,
            "dueDate": task.due_date.isoformat(),
            "priority": task.priority.value,
            "estimatedTime": task.estimated_time,
            "completed": task.completed,
            "createdAt": created.replace("+00:00", "Z"),
        }

    @staticmethod
    def _record_to_task(raw: dict[str, Any]) -> Task:
        tid = raw.get("id")
        if isinstance(tid, bool) or not isinstance(tid, int | float) or not math.isfinite(tid):
            raise ValueError(f"bad id {tid!r}")
        title = raw.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError("missing title")

        # Older records may hold a full timestamp here; only the date matters.
        due_date = date.fromisoformat(str(raw.get("dueDate", ""))[:10])

        created_raw = raw.get("createdAt")
        try:
            created_at = datetime.fromisoformat(str(created_raw))
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=UTC)
        except ValueError:
            created_at = datetime.fromtimestamp(0, UTC)

        try:
            estimated = max(0.0, float(raw.get("estimatedTime") or 0.0))
        except (TypeError, ValueError):
            estimated = 0.0
        if not math.isfinite(estimated):
            estimated = 0.0

        return Task(
            id=int(tid),
            title=title,
            description=str(raw.get("description") or ""),
            due_date=due_date,
            priority=Priority.from_record(raw.get("priority")),
            estimated_time=estimated,
            created_at=created_at,
            completed=raw.get("completed") is True,
        )

    def to_json(self, indent: int | None = 2) -> str:
        return json.dumps(
            [self._task_to_record(t) for t in self._tasks],
            ensure_ascii=False,
            indent=indent,
        )

    # ---- persistence ----

    def load(self) -> list[Task]:
        """
        Restore tasks from storage.

        Never raises: an unreadable or malformed slot yields an empty list and
        the raw payload is copied aside to "<key>.corrupt" before anything
        overwrites it.
        """
        try:
            raw = self._storage.get(self._key)
        except Exception:
            logger.exception("Failed to read task slot %r; starting empty.", self._key)
            self._replace_tasks([])
            return []

        if raw is None:
            self._replace_tasks([])
            logger.info("No saved tasks under %r; starting empty.", self._key)
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        except (ValueError, RecursionError) as e:
            logger.warning("Saved tasks under %r are corrupt (%s); starting empty.", self._key, e)
            with contextlib.suppress(Exception):
                self._storage.set(f"{self._key}.corrupt", raw)
            self._replace_tasks([])
            return []

        tasks: list[Task] = []
        seen: set[int] = set()
        for item in data:
            if not isinstance(item, dict):
                logger.warning("Skipping non-object task record: %r", item)
                continue
            try:
                task = self._record_to_task(item)
            except (TypeError, ValueError, OverflowError) as e:
                logger.warning("Skipping malformed task record %r: %s", item.get("id"), e)
                continue
            if task.id in seen:
                logger.warning("Skipping duplicate task id=%s", task.id)
                continue
            seen.add(task.id)
            tasks.append(task)

        self._replace_tasks(tasks)
        logger.info("Loaded %d tasks from %r", len(tasks), self._key)
        return list(tasks)

    def save(self) -> None:
        payload = self.to_json(indent=None)
        try:
            self._storage.set(self._key, payload)
        except Exception as e:
            logger.error("Failed to save %d tasks to %r: %r", len(self._tasks), self._key, e)
            raise PersistenceError(f"Could not save tasks: {e}") from e
        logger.debug("Saved %d tasks to %r", len(self._tasks), self._key)

    def _replace_tasks(self, tasks: list[Task]) -> None:
        self._tasks = tasks
        self._last_id = max((t.id for t in tasks), default=0)

    def _next_id(self) -> int:
        candidate = int(time.time() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    # ---- reads ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    def today(self) -> date:
        return self._clock().date()

    def get(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # ---- mutations ----

    def add(
        self,
        title: str,
        description: str,
        due_date: date,
        priority: Priority,
        estimated_time: float,
    ) -> Task:
        task = Task(
            id=self._next_id(),
            title=title,
            description=description,
            due_date=due_date,
            priority=Priority(priority),
            estimated_time=float(estimated_time),
            created_at=self._clock().astimezone(UTC),
        )
        self._tasks.append(task)
        logger.debug("Task added id=%s due=%s priority=%s", task.id, task.due_date, task.priority.value)
        self.save()
        return task

    def update(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        due_date: date | None = None,
        priority: Priority | None = None,
        estimated_time: float | None = None,
    ) -> Task:
        task = self.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)

        # A bad value must leave the task unchanged.
        new_priority = Priority(priority) if priority is not None else task.priority
        new_estimate = float(estimated_time) if estimated_time is not None else task.estimated_time

        if title is not None:
            task.title = title
        if description is not None:
            task.description = description
        if due_date is not None:
            task.due_date = due_date
        task.priority = new_priority
        task.estimated_time = new_estimate

        logger.debug("Task updated id=%s", task_id)
        self.save()
        return task

    def remove(self, task_id: int) -> bool:
        kept = [t for t in self._tasks if t.id != task_id]
        if len(kept) == len(self._tasks):
            return False
        self._tasks = kept
        logger.debug("Task removed id=%s", task_id)
        self.save()
        return True

    def toggle_complete(self, task_id: int) -> Task | None:
        task = self.get(task_id)
        if task is None:
            return None
        task.completed = not task.completed
        logger.debug("Task id=%s completed=%s", task_id, task.completed)
        self.save()
        return task

    def clear_completed(self) -> int:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if not t.completed]
        removed = before - len(self._tasks)
        logger.debug("Cleared %d completed tasks", removed)
        self.save()
        return removed

    # ---- filter ----

    def set_filter(self, dimension: str, value: str) -> TaskFilter:
        dim = (dimension or "").strip().lower()
        val = (value or "").strip().lower()

        if dim == "priority":
            self._filter = TaskFilter(priority=PriorityFilter(val), status=self._filter.status)
        elif dim == "status":
            self._filter = TaskFilter(priority=self._filter.priority, status=StatusFilter(val))
        else:
            raise ValueError(f"Unknown filter dimension: {dimension!r}")
        return self._filter

    def reset_filter(self) -> TaskFilter:
        self._filter = TaskFilter()
        return self._filter

    # ---- derived views ----

    def filtered(self) -> list[Task]:
        today = self.today()
        return [t for t in self._tasks if self._filter.matches(t, today)]

    def timeline_buckets(
        self,
        center_date: date | None = None,
        days_before: int = 3,
        days_after: int = 3,
    ) -> list[TimelineBucket]:
        """
        One bucket per calendar day in [center - days_before, center + days_after].

        Buckets ignore the current filter and always use the full task list.
        """
        today = self.today()
        center = center_date or today

        buckets: list[TimelineBucket] = []
        for offset in range(-int(days_before), int(days_after) + 1):
            day = center + timedelta(days=offset)
            day_tasks = tuple(t for t in self._tasks if t.due_date == day)
            buckets.append(
                TimelineBucket(
                    day=day,
                    tasks=day_tasks,
                    label=_day_label(day_tasks),
                    is_today=(day == today),
                )
            )
        return buckets

    def stats(self) -> TaskStats:
        today = self.today()
        total = len(self._tasks)
        completed = sum(1 for t in self._tasks if t.completed)
        pending = sum(1 for t in self._tasks if t.is_pending(today))
        overdue = sum(1 for t in self._tasks if t.is_overdue(today))
        rate = _round_half_up(100 * completed / total) if total > 0 else 0
        return TaskStats(
            total=total,
            completed=completed,
            pending=pending,
            overdue=overdue,
            completion_rate=rate,
        )


def _day_label(tasks: tuple[Task, ...]) -> DayLabel:
    priorities = {t.priority for t in tasks}
    if Priority.HIGH in priorities:
        return DayLabel.HIGH
    if Priority.MEDIUM in priorities:
        return DayLabel.MEDIUM
    if Priority.LOW in priorities:
        return DayLabel.LOW
    return DayLabel.NONE
