# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored) for the Matrix password.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "PLANNER_APP_NAME": "App display name (default: study-planner).",
    "PLANNER_LOG_LEVEL": "Console logging level (default: WARNING; the log file always gets DEBUG).",
    # Storage (gitignored)
    "PLANNER_DATA_DIR": "Local data directory (default: .local/study_planner).",
    "PLANNER_STORAGE_BACKEND": "sqlite | file (default: sqlite).",
    "PLANNER_STORAGE_PATH": (
        "SQLite file or slot directory (default: <data_dir>/planner.sqlite3 or <data_dir>/storage)."
    ),
    "PLANNER_STORAGE_KEY": "Slot name holding the task list (default: studyTasks).",
    "PLANNER_EXPORT_DIR": "Default directory for /export (default: current directory).",
    # Reminder
    "PLANNER_REMINDER_ENABLED": "Start the daily reminder at launch (true/false, default: false).",
    "PLANNER_REMINDER_TIME": "Local time of day for the reminder, HH:MM (default: 08:00).",
    "PLANNER_NOTIFIER": "console | matrix (default: console).",
    # Matrix notifier
    "PLANNER_MATRIX_HOMESERVER": "Matrix homeserver URL.",
    "PLANNER_MATRIX_USER_ID": "Matrix user ID used to send reminders.",
    "PLANNER_MATRIX_PASSWORD": "Password for first login (session stored locally).",
    "PLANNER_MATRIX_ROOM_ID": "Room that receives reminders.",
    "PLANNER_MATRIX_STORE_PATH": "Matrix session directory (default: <data_dir>/matrix_store).",
}
