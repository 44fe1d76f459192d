# src/study_planner/cli/views.py

"""Plain-text renderings of the store's read queries (list, timeline, stats)."""

from __future__ import annotations

from collections.abc import Iterable

from ..tasks.task_models import DayLabel, Task, TaskFilter, TaskStats, TimelineBucket

EMPTY_LIST_TEXT = "No tasks found. Add a new task to get started!"
PROGRESS_WIDTH = 20

_LABEL_MARK = {
    DayLabel.HIGH: "!!!",
    DayLabel.MEDIUM: "!!",
    DayLabel.LOW: "!",
    DayLabel.NONE: "",
}


def format_task_line(task: Task) -> str:
    box = "[x]" if task.completed else "[ ]"
    line = (
        f"{box} #{task.id} {task.title}"
        f"  (due {task.due_date.isoformat()}, {task.estimated_time:g}h, {task.priority.value})"
    )
    if task.description:
        line += f"\n      {task.description}"
    return line


def format_task_list(tasks: Iterable[Task], task_filter: TaskFilter | None = None) -> str:
    lines = [format_task_line(t) for t in tasks]
    header = ""
    if task_filter is not None:
        header = f"Tasks (priority={task_filter.priority.value}, status={task_filter.status.value}):\n"
    if not lines:
        return header + EMPTY_LIST_TEXT
    return header + "\n".join(lines)


def format_timeline(buckets: Iterable[TimelineBucket]) -> str:
    lines: list[str] = []
    for bucket in buckets:
        marker = ">" if bucket.is_today else " "
        mark = _LABEL_MARK[bucket.label]
        day = bucket.day.strftime("%a %b %d")
        lines.append(f"{marker} {day} {mark}".rstrip())
        if not bucket.tasks:
            lines.append("      No tasks")
            continue
        for t in bucket.tasks:
            done = " (done)" if t.completed else ""
            lines.append(f"      {t.title} ({t.priority.value}){done}")
    return "\n".join(lines)


def format_progress_bar(rate: int, width: int = PROGRESS_WIDTH) -> str:
    filled = round(width * max(0, min(100, rate)) / 100)
    return "[" + "#" * filled + "-" * (width - filled) + f"] {rate}%"


def format_stats(stats: TaskStats) -> str:
    return (
        "Stats:\n"
        f"  Total: {stats.total}\n"
        f"  Completed: {stats.completed}\n"
        f"  Pending: {stats.pending}\n"
        f"  Overdue: {stats.overdue}\n"
        f"  Progress: {format_progress_bar(stats.completion_rate)}"
    )
