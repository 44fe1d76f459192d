# src/study_planner/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_record(cls, raw: str | None) -> Priority:
        """Lenient parse for persisted data: unknown values become MEDIUM."""
        if not raw:
            return cls.MEDIUM
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.MEDIUM


class PriorityFilter(StrEnum):
    ALL = "all"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class StatusFilter(StrEnum):
    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"
    OVERDUE = "overdue"


class DayLabel(StrEnum):
    """Timeline label for a single day; highest priority present wins."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


@dataclass(slots=True)
class Task:
    id: int
    title: str
    description: str
    due_date: date
    priority: Priority
    estimated_time: float
    created_at: datetime
    completed: bool = False

    def is_pending(self, today: date) -> bool:
        return not self.completed and self.due_date >= today

    def is_overdue(self, today: date) -> bool:
        return not self.completed and self.due_date < today


@dataclass(slots=True, frozen=True)
class TaskFilter:
    priority: PriorityFilter = PriorityFilter.ALL
    status: StatusFilter = StatusFilter.ALL

    def matches(self, task: Task, today: date) -> bool:
        if self.priority != PriorityFilter.ALL and task.priority.value != self.priority.value:
            return False

        if self.status == StatusFilter.COMPLETED:
            return task.completed
        if self.status == StatusFilter.PENDING:
            return task.is_pending(today)
        if self.status == StatusFilter.OVERDUE:
            return task.is_overdue(today)
        return True


@dataclass(slots=True, frozen=True)
class TimelineBucket:
    day: date
    tasks: tuple[Task, ...]
    label: DayLabel
    is_today: bool = False


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    overdue: int
    completion_rate: int
