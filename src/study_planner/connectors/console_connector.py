# src/study_planner/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.views import format_stats, format_task_list
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.store.tasks))
    app_name = str(getattr(state.settings, "app_name", "study-planner"))

    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")
    with state.lock:
        print(format_task_list(state.store.filtered(), state.store.filter))
        print(format_stats(state.store.stats()))

    def emit(text: str) -> None:
        # Immediate user-visible feedback for slower operations.
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input("\n>>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a shortcut for /add.
            user_input = f"/add {user_input}"

        try:
            with state.lock:
                response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            print(response)

    logger.info("Console connector finished.")
