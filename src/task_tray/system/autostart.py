# src/task_tray/system/autostart.py

"""
Run-at-login registration.

- Linux: XDG autostart entry (~/.config/autostart/<name>.desktop)
- macOS: LaunchAgent plist (~/Library/LaunchAgents/<label>.plist)
- Windows: HKCU\\Software\\Microsoft\\Windows\\CurrentVersion\\Run value (via reg.exe)
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import sys
from pathlib import Path
from xml.sax.saxutils import escape

logger = logging.getLogger(__name__)

_RUN_KEY = r"HKCU\Software\Microsoft\Windows\CurrentVersion\Run"


def launch_command() -> list[str]:
    """Command that starts this application."""
    exe = shutil.which("task-tray")
    if exe:
        return [exe]
    return [sys.executable, "-m", "task_tray"]


def _xdg_config_home() -> Path:
    raw = os.getenv("XDG_CONFIG_HOME")
    return Path(raw) if raw else Path.home() / ".config"


class AutostartRegistrar:
    def __init__(
        self,
        name: str = "task-tray",
        *,
        platform: str | None = None,
        home: Path | None = None,
        command: list[str] | None = None,
    ) -> None:
        self._name = name
        self._platform = platform or sys.platform
        self._home = home
        self._command = command or launch_command()

    @property
    def label(self) -> str:
        return f"com.example.{self._name}"

    def entry_path(self) -> Path | None:
        """File that marks autostart as enabled (None on Windows)."""
        if self._platform.startswith("win"):
            return None
        if self._platform == "darwin":
            home = self._home or Path.home()
            return home / "Library" / "LaunchAgents" / f"{self.label}.plist"
        base = self._home / ".config" if self._home else _xdg_config_home()
        return base / "autostart" / f"{self._name}.desktop"

    def _plist(self) -> str:
        args = "".join(f"<string>{escape(a)}</string>" for a in self._command)
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<!DOCTYPE plist PUBLIC "-//Apple//DTD PLIST 1.0//EN" '
            '"http://www.apple.com/DTDs/PropertyList-1.0.dtd">\n'
            '<plist version="1.0"><dict>\n'
            f"\t<key>Label</key><string>{escape(self.label)}</string>\n"
            f"\t<key>ProgramArguments</key><array>{args}</array>\n"
            "\t<key>RunAtLoad</key><true/>\n"
            "\t<key>KeepAlive</key><false/>\n"
            "</dict></plist>\n"
        )

    def _desktop_entry(self) -> str:
        return (
            "[Desktop Entry]\n"
            "Type=Application\n"
            f"Name={self._name}\n"
            f"Exec={shlex.join(self._command)}\n"
            "X-GNOME-Autostart-enabled=true\n"
        )

    def set_enabled(self, enabled: bool) -> bool:
        path = self.entry_path()
        try:
            if path is None:
                self._set_windows(enabled)
            elif enabled:
                path.parent.mkdir(parents=True, exist_ok=True)
                body = self._plist() if self._platform == "darwin" else self._desktop_entry()
                path.write_text(body, "utf-8")
            else:
                path.unlink(missing_ok=True)
        except (OSError, subprocess.CalledProcessError):
            logger.exception("Failed to %s run-at-login.", "enable" if enabled else "disable")
            return False
        logger.info("Run-at-login %s.", "enabled" if enabled else "disabled")
        return True

    def _set_windows(self, enabled: bool) -> None:
        if enabled:
            cmd = ["reg", "add", _RUN_KEY, "/v", self._name, "/t", "REG_SZ",
                   "/d", subprocess.list2cmdline(self._command), "/f"]
        else:
            cmd = ["reg", "delete", _RUN_KEY, "/v", self._name, "/f"]
        subprocess.run(cmd, check=True, capture_output=True)

    def is_enabled(self) -> bool:
        if self._platform.startswith("win"):
            try:
                out = subprocess.run(
                    ["reg", "query", _RUN_KEY, "/v", self._name],
                    capture_output=True,
                    text=True,
                )
            except OSError:
                return False
            return out.returncode == 0 and self._name.lower() in out.stdout.lower()
        path = self.entry_path()
        return path is not None and path.exists()
