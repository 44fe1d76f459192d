# src/study_planner/cli/forms.py

"""
Task form parsing for the console.

The store trusts its callers, so required fields and numeric ranges are
checked here before anything reaches TaskStore.add()/update().

Form syntax (fields separated by "|"):
    title | due | priority | hours [| description]
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta

from ..tasks.task_models import Priority, Task

FIELD_SEP = "|"
FORM_USAGE = "title | due (YYYY-MM-DD, today, tomorrow, +N) | low/medium/high | hours [| description]"


class FormError(ValueError):
    """User input that cannot become a task."""


@dataclass(slots=True, frozen=True)
class TaskForm:
    title: str
    due_date: date
    priority: Priority
    estimated_time: float
    description: str = ""


def parse_due_date(raw: str, today: date) -> date:
    text = raw.strip().lower()
    if text in ("", "today"):
        return today
    if text == "tomorrow":
        return today + timedelta(days=1)
    if text.startswith("+") and text[1:].isdigit():
        return today + timedelta(days=int(text[1:]))
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise FormError(f"Invalid due date: {raw.strip()!r} (use YYYY-MM-DD, today, tomorrow or +N)") from None


def parse_priority(raw: str) -> Priority:
    try:
        return Priority(raw.strip().lower())
    except ValueError:
        raise FormError(f"Invalid priority: {raw.strip()!r} (use low, medium or high)") from None


def parse_hours(raw: str) -> float:
    try:
        hours = float(raw.strip().replace(",", "."))
    except ValueError:
        raise FormError(f"Invalid estimated time: {raw.strip()!r}") from None
    if hours < 0 or not math.isfinite(hours):
        raise FormError("Estimated time must be a non-negative number of hours")
    return hours


def parse_task_form(text: str, today: date) -> TaskForm:
    parts = [p.strip() for p in text.split(FIELD_SEP, 4)]
    if len(parts) < 4:
        raise FormError(f"Expected: {FORM_USAGE}")

    title = parts[0]
    if not title:
        raise FormError("Title is required")

    return TaskForm(
        title=title,
        due_date=parse_due_date(parts[1], today),
        priority=parse_priority(parts[2]),
        estimated_time=parse_hours(parts[3]),
        # The description may itself contain "|".
        description=parts[4] if len(parts) > 4 else "",
    )


def format_task_form(task: Task) -> str:
    """Render a task in form syntax, so /show output can be pasted into /edit."""
    hours = f"{task.estimated_time:g}"
    fields = [task.title, task.due_date.isoformat(), task.priority.value, hours]
    if task.description:
        fields.append(task.description)
    return f" {FIELD_SEP} ".join(fields)
