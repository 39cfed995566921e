# src/eztodo/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the plan refresher in a background thread (optional),
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..items.refresher import RefresherBackgroundRunner, start_refresher_in_background
from ..logging_setup import setup_logging
from .console import run_console_loop

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    refresher: RefresherBackgroundRunner | None = None
    if settings.refresher_enabled:
        refresher = start_refresher_in_background(
            state,
            interval_seconds=settings.refresh_interval_seconds,
            spawn_todos=settings.spawn_plan_todos,
        )

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError):
        # Not in the main thread, or the platform lacks SIGTERM.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        else:
            logger.info("Console disabled. Running the plan refresher only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        if refresher is not None:
            refresher.stop()
            refresher.join(timeout=10.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
