# src/task_tray/connectors/console_dialogs.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

logger = logging.getLogger(__name__)

CANCEL_WORDS = frozenset({"/cancel", "/c"})


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsoleDialogs:
    """
    Terminal stand-in for the native dialog provider.

    Blocks on stdin. "/cancel" or EOF cancels a prompt.
    """

    def __init__(
        self,
        read: Callable[[str], str] = input,
        write: Callable[[str], None] = print,
    ) -> None:
        self._read = read
        self._write = write

    def _ask(self, prompt: str) -> str | None:
        try:
            return self._read(prompt)
        except EOFError:
            logger.debug("EOF while prompting; treating as cancel.")
            return None

    def prompt_text(self, message: str, default: str = "") -> str | None:
        self._write(message)
        if default:
            self._write(f"[current: {default}]  (empty keeps it, /cancel to abort)")
        raw = self._ask("> ")
        if raw is None or raw.strip().lower() in CANCEL_WORDS:
            return None
        if not raw.strip() and default:
            return default
        return raw

    def confirm(self, message: str) -> bool:
        self._write(message)
        raw = self._ask("[y/N] ")
        return raw is not None and raw.strip().lower() in {"y", "yes"}

    def pick_file(self, filters: Sequence[str]) -> str | None:
        self._write(f"File path ({', '.join(filters)}), empty to cancel:")
        raw = self._ask("> ")
        if raw is None or not raw.strip() or raw.strip().lower() in CANCEL_WORDS:
            return None
        return raw.strip().strip('"').strip("'")

    def notify(self, message: str, *, error: bool = False) -> None:
        prefix = "[ERROR] " if error else ""
        self._write(f"[{_ts_local()}] {prefix}{message}")
