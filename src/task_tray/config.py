# src/task_tray/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every path derives from data_dir unless overridden explicitly.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKTRAY"

# Directory name under the per-user config dir; matches existing installs.
DATA_DIR_NAME = "systray-queue-app"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def user_config_dir() -> Path:
    """Per-user configuration root for the current platform."""
    if sys.platform.startswith("win"):
        appdata = os.getenv("APPDATA")
        if appdata:
            return Path(appdata)
        return Path.home() / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.getenv("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else Path.home() / ".config"


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    console_log: bool

    # ---- Local data paths ----
    data_dir: Path
    queue_path: Path
    attachments_dir: Path
    previews_dir: Path
    log_dir: Path

    # ---- OS integration ----
    autostart_name: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "Task Tray") or "Task Tray"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        console_log = _env_bool(_k("CONSOLE_LOG"), True)

        data_dir = _env_path(_k("DATA_DIR"), user_config_dir() / DATA_DIR_NAME)
        queue_path = _env_path(_k("QUEUE_PATH"), data_dir / "queue.json")
        attachments_dir = _env_path(_k("ATTACHMENTS_DIR"), data_dir / "attachments")
        previews_dir = _env_path(_k("PREVIEWS_DIR"), data_dir / "previews")
        log_dir = _env_path(_k("LOG_DIR"), data_dir / "logs")

        autostart_name = _env(_k("AUTOSTART_NAME"), "task-tray") or "task-tray"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_log=console_log,
            data_dir=data_dir,
            queue_path=queue_path,
            attachments_dir=attachments_dir,
            previews_dir=previews_dir,
            log_dir=log_dir,
            autostart_name=autostart_name,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
