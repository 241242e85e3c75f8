# src/todays_focus/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the reminder delivery loop in a background thread,
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop, start_notifications_in_background
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=getattr(settings, "data_dir", ".local/focus"), console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "todays-focus"))

    state = create_initial_state(settings=settings)
    runner = start_notifications_in_background(state)

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        if settings.console_enabled:
            # input() turns Ctrl+C into KeyboardInterrupt, handled by the loop.
            run_console_loop(state)
            stop_main.set()
        else:
            try:
                signal.signal(signal.SIGINT, _handle_signal)
                signal.signal(signal.SIGTERM, _handle_signal)
            except (ValueError, OSError):
                logger.debug("Signal handlers not installed.", exc_info=True)
            logger.info("Console disabled. Delivering reminders only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        if runner is not None:
            runner.stop()
            runner.join(timeout=5.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
