# src/task_tray/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
Dialogs, rendering, OS integration and clipboard access stay swappable,
and tests drive the handlers with fakes.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol


class DialogProvider(Protocol):
    """
    Blocking user interaction. Must only be called on the dispatch thread.

    Cancellation is None, not an exception.
    """

    def prompt_text(self, message: str, default: str = "") -> str | None: ...

    def confirm(self, message: str) -> bool: ...

    def pick_file(self, filters: Sequence[str]) -> str | None: ...

    def notify(self, message: str, *, error: bool = False) -> None: ...


class Renderer(Protocol):
    """Turns task text (+ optional audio) into a document the OS can open."""

    def render(
        self, task_text: str, audio_path: str | None = None, *, image_path: str | None = None
    ) -> Path: ...


class SystemOpener(Protocol):
    def open_with_default_app(self, path: str | Path) -> bool: ...


class AutostartRegistrar(Protocol):
    def set_enabled(self, enabled: bool) -> bool: ...

    def is_enabled(self) -> bool: ...


class ClipboardReader(Protocol):
    """
    Raw clipboard access.

    read_image() returns PNG bytes when the platform can extract an image,
    otherwise None.
    """

    def read_image(self) -> bytes | None: ...

    def read_text(self) -> str | None: ...
