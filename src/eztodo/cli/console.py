# src/eztodo/cli/console.py

from __future__ import annotations

import logging
import shlex
from datetime import datetime

from ..core.state import AppState
from .commands import registry as command_registry

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_console_loop(state: AppState) -> None:
    logger.info("Console started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate feedback for longer operations.
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input("eztodo> ").strip()
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
            # Bare text is shorthand for /add.
            user_input = f"/add {shlex.quote(user_input)}"

        try:
            reply = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            _print_ts(reply)

    logger.info("Console finished.")
