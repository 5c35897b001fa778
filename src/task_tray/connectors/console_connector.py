# src/task_tray/connectors/console_connector.py

"""
Console menu connector.

Stands in for the tray icon: reads menu item names from stdin on a background
thread and submits the matching handler to the dispatcher. It waits for each
operation to finish before reading the next line, so the terminal is never read
by two threads at once.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime

from ..cli.commands import MenuRegistry, queue_status
from ..cli.commands import registry as menu_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def run_menu_loop(state: AppState, registry: MenuRegistry = menu_registry) -> None:
    """Producer loop: menu lines in, dispatcher submissions out."""
    app_name = str(getattr(state.settings, "app_name", "Task Tray"))
    logger.info("Console menu started.")
    _print_ts(f"[{app_name}] Type a menu item (help for the list). {queue_status(state)}")

    while not state.dispatcher.closed:
        try:
            line = input("menu> ").strip()
        except (EOFError, KeyboardInterrupt):
            logger.info("Console input closed, exiting.")
            break

        if not line:
            continue
        found = registry.lookup(line)
        if found is None:
            _print_ts(registry.handle(state, line) or "")
            continue

        handler, args = found
        fut = state.dispatcher.submit(lambda h=handler, a=args: h(state, a))
        if fut is None:
            break
        try:
            reply = fut.result()
        except Exception:
            # Already logged by the dispatcher.
            _print_ts("Internal error while handling the menu item.")
            continue
        if reply:
            _print_ts(reply)

    state.dispatcher.close()
    logger.info("Console menu finished.")


def start_menu_thread(state: AppState) -> threading.Thread:
    t = threading.Thread(target=run_menu_loop, args=(state,), name="menu-events", daemon=True)
    t.start()
    return t
