# src/study_planner/tasks/export.py

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..core.exceptions import PersistenceError
from .task_store import TaskStore

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "study-tasks.json"


def export_tasks(store: TaskStore, directory: str | Path) -> Path:
    """Write the full task list as pretty-printed JSON to <directory>/study-tasks.json."""
    path = Path(directory) / EXPORT_FILENAME
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(store.to_json(indent=2), "utf-8")
        os.replace(tmp, path)
    except OSError as e:
        logger.exception("Failed to export tasks to %s", path)
        raise PersistenceError(f"Could not export tasks to {path}: {e}") from e

    logger.info("Exported %d tasks to %s", len(store.tasks), path)
    return path
