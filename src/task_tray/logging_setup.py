# src/task_tray/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

APP_LOGGER = "task_tray"
LOG_FILE_NAME = "task-tray.log"

# The tray app runs for weeks; keep the log bounded.
_LOG_MAX_BYTES = 1_000_000
_LOG_BACKUPS = 3

_FORMAT = logging.Formatter(
    fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


class _MenuConsoleFilter(logging.Filter):
    """
    The console is shared with the menu prompt, so only task_tray records reach
    it. Everything else (third-party, captured py.warnings) needs ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == APP_LOGGER or record.name.startswith(APP_LOGGER + "."):
            return True
        return record.levelno >= logging.ERROR


def parse_level(name: str | None, default: int = logging.INFO) -> int:
    """Map "debug"/"INFO"/... to a logging level; unknown names give `default`."""
    level = logging.getLevelName(str(name or "").strip().upper())
    return level if isinstance(level, int) else default


def setup_logging(settings) -> Path:
    """
    Configure root logging from Settings (log_dir, log_level, console_log):
    - rotating file handler at DEBUG under log_dir
    - stderr handler at log_level, filtered for the menu console (optional)

    Replaces existing root handlers. Returns the log file path.
    Raises OSError when the log directory cannot be created.
    """
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fh = RotatingFileHandler(log_file, maxBytes=_LOG_MAX_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(_FORMAT)
    root.addHandler(fh)

    if getattr(settings, "console_log", True):
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(parse_level(getattr(settings, "log_level", None)))
        ch.setFormatter(_FORMAT)
        ch.addFilter(_MenuConsoleFilter())
        root.addHandler(ch)

    # warnings.warn(...) -> 'py.warnings' logger
    logging.captureWarnings(True)
    return log_file
