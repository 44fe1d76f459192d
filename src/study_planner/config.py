# src/study_planner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Invalid values fall back to defaults instead of failing startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import time
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "PLANNER"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_choice(name: str, choices: set[str], default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip().lower() not in choices:
        return default
    return raw.strip().lower()


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_time(name: str, default: time) -> time:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        hh, mm = raw.strip().split(":", 1)
        return time(int(hh), int(mm))
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_backend: str
    storage_path: Path
    storage_key: str
    export_dir: Path

    # ---- Reminder ----
    reminder_enabled: bool
    reminder_time: time
    notifier: str

    # ---- Matrix ----
    matrix_homeserver: str
    matrix_user_id: str
    matrix_password: str
    matrix_room_id: str
    matrix_store_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "study-planner")
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/study_planner"))
        storage_backend = _env_choice(_k("STORAGE_BACKEND"), {"sqlite", "file"}, "sqlite")
        default_storage = data_dir / ("planner.sqlite3" if storage_backend == "sqlite" else "storage")
        storage_path = _env_path(_k("STORAGE_PATH"), default_storage)
        storage_key = _env(_k("STORAGE_KEY"), "studyTasks").strip() or "studyTasks"
        export_dir = _env_path(_k("EXPORT_DIR"), Path("."))

        reminder_enabled = _env_bool(_k("REMINDER_ENABLED"), False)
        reminder_time = _env_time(_k("REMINDER_TIME"), time(8, 0))
        notifier = _env_choice(_k("NOTIFIER"), {"console", "matrix"}, "console")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_backend=storage_backend,
            storage_path=storage_path,
            storage_key=storage_key,
            export_dir=export_dir,
            reminder_enabled=reminder_enabled,
            reminder_time=reminder_time,
            notifier=notifier,
            matrix_homeserver=_env(_k("MATRIX_HOMESERVER")).strip(),
            matrix_user_id=_env(_k("MATRIX_USER_ID")).strip(),
            matrix_password=_env(_k("MATRIX_PASSWORD")).strip(),
            matrix_room_id=_env(_k("MATRIX_ROOM_ID")).strip(),
            matrix_store_path=_env_path(_k("MATRIX_STORE_PATH"), data_dir / "matrix_store"),
        )


def get_settings() -> Settings:
    return Settings.from_env()
