# src/task_tray/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- ensures the data directories exist,
- loads the queue,
- wires concrete implementations of the ports into AppState.
"""

from __future__ import annotations

import logging

from ..attachments.clipboard import ClipboardResolver
from ..attachments.ingest import AttachmentIngestor
from ..config import get_settings
from ..connectors.console_dialogs import ConsoleDialogs
from ..core.dispatcher import UIDispatcher
from ..core.ports import DialogProvider
from ..core.state import AppState
from ..system.autostart import AutostartRegistrar
from ..system.clipboard_reader import SystemClipboard
from ..system.opener import DefaultAppOpener
from ..system.renderer import HtmlPreviewRenderer
from ..tasks.task_store import QueueStore

logger = logging.getLogger(__name__)


def ensure_data_dirs(settings) -> None:
    """Create the local data layout. Raises OSError; callers treat that as fatal."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.queue_path.parent.mkdir(parents=True, exist_ok=True)
    settings.attachments_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, dialogs: DialogProvider | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    Store errors (StorageError/FormatError) propagate: without a readable queue
    nothing can be made durable.
    """
    if settings is None:
        settings = get_settings()

    ensure_data_dirs(settings)

    store = QueueStore(settings.queue_path)
    ingestor = AttachmentIngestor(settings.attachments_dir)

    return AppState(
        settings=settings,
        store=store,
        ingestor=ingestor,
        resolver=ClipboardResolver(ingestor),
        dispatcher=UIDispatcher(),
        dialogs=dialogs or ConsoleDialogs(),
        clipboard=SystemClipboard(),
        renderer=HtmlPreviewRenderer(settings.previews_dir, title=settings.app_name),
        opener=DefaultAppOpener(),
        autostart=AutostartRegistrar(settings.autostart_name),
    )
