# src/study_planner/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, optionally starts the daily reminder
in a background thread, then runs the console REPL in the main thread.
"""

from __future__ import annotations

import logging

from ..cli.bootstrap import create_initial_state, start_reminder, stop_reminder
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(settings)

    logger.info("Starting %s (log: %s)", settings.app_name, log_file)

    state = create_initial_state(settings=settings)

    if settings.reminder_enabled:
        start_reminder(state)

    try:
        run_console_loop(state)
    finally:
        stop_reminder(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
