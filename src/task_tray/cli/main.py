# src/task_tray/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then:
- starts the console menu (event producer) in a background thread,
- runs the UI dispatcher loop on the main thread until quit.
"""

from __future__ import annotations

import logging
import signal
import sys

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import start_menu_thread
from ..errors import TaskTrayError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    try:
        setup_logging(settings)
    except OSError as e:
        print(f"Cannot create log directory {settings.log_dir}: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info("Starting %s (data_dir=%s)...", settings.app_name, settings.data_dir)

    try:
        state = create_initial_state(settings=settings)
    except (OSError, TaskTrayError):
        # No further operation could be made durable.
        logger.critical("Cannot open the data directory %s.", settings.data_dir, exc_info=True)
        sys.exit(1)

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        state.dispatcher.close()

    try:
        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)
    except (ValueError, OSError):
        # Some platforms may not support SIGTERM, etc.
        pass

    start_menu_thread(state)
    state.dispatcher.run()
    logger.info("Bye.")


if __name__ == "__main__":
    main()
