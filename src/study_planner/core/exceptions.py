# src/study_planner/core/exceptions.py

from __future__ import annotations


class StudyPlannerError(Exception):
    """Base class for errors raised by the planner core."""


class TaskNotFoundError(StudyPlannerError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class PersistenceError(StudyPlannerError):
    """A change could not be written to storage (it stays in memory only)."""
