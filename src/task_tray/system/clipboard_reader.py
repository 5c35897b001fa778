# src/task_tray/system/clipboard_reader.py

from __future__ import annotations

import logging
import shutil
import subprocess
import sys

logger = logging.getLogger(__name__)

_TIMEOUT_SECONDS = 5.0

# PowerShell writes in the console code page unless told otherwise.
_PS_GET_CLIPBOARD = "[Console]::OutputEncoding = [System.Text.Encoding]::UTF8; Get-Clipboard -Raw"


def _run(cmd: list[str]) -> bytes | None:
    """Run a clipboard helper; None if it is missing, fails or prints nothing."""
    if shutil.which(cmd[0]) is None:
        return None
    try:
        res = subprocess.run(cmd, capture_output=True, timeout=_TIMEOUT_SECONDS)
    except (OSError, subprocess.TimeoutExpired):
        logger.debug("Clipboard helper %s failed.", cmd[0], exc_info=True)
        return None
    if res.returncode != 0 or not res.stdout:
        return None
    return res.stdout


class SystemClipboard:
    """
    Clipboard access through the platform's command-line helpers.

    Image extraction is best-effort: pngpaste on macOS, wl-paste/xclip on Linux.
    Missing helpers are skipped silently.
    """

    def __init__(self, platform: str | None = None) -> None:
        self._platform = platform or sys.platform

    def read_image(self) -> bytes | None:
        if self._platform == "darwin":
            return _run(["pngpaste", "-"])
        if self._platform.startswith("linux"):
            return _run(["wl-paste", "--no-newline", "--type", "image/png"]) or _run(
                ["xclip", "-selection", "clipboard", "-target", "image/png", "-out"]
            )
        return None

    def read_text(self) -> str | None:
        if self._platform == "darwin":
            candidates = [["pbpaste"]]
        elif self._platform.startswith("win"):
            candidates = [["powershell", "-NoProfile", "-Command", _PS_GET_CLIPBOARD]]
        else:
            candidates = [
                ["wl-paste", "--no-newline"],
                ["xclip", "-selection", "clipboard", "-out"],
                ["xsel", "--clipboard", "--output"],
            ]
        for cmd in candidates:
            out = _run(cmd)
            if out is not None:
                return out.decode("utf-8", errors="replace")
        return None
