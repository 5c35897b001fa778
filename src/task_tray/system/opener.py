# src/task_tray/system/opener.py

from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


class DefaultAppOpener:
    """Open a file or folder with the OS default application (fire-and-forget)."""

    def __init__(self, platform: str | None = None) -> None:
        self._platform = platform or sys.platform

    def open_with_default_app(self, path: str | Path) -> bool:
        target = str(path)
        try:
            if self._platform.startswith("win"):
                os.startfile(target)  # type: ignore[attr-defined]
            elif self._platform == "darwin":
                subprocess.Popen(["open", target], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
            else:
                subprocess.Popen(["xdg-open", target], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError:
            logger.exception("Failed to open %s with the default application.", target)
            return False
        logger.debug("Opened %s", target)
        return True
