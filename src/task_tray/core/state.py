# src/task_tray/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..attachments.clipboard import ClipboardResolver
from ..attachments.ingest import AttachmentIngestor
from ..tasks.task_store import QueueStore
from .dispatcher import UIDispatcher
from .ports import AutostartRegistrar, ClipboardReader, DialogProvider, Renderer, SystemOpener


@dataclass
class AppState:
    # Settings (or a test stand-in) for paths and names.
    settings: object

    store: QueueStore
    ingestor: AttachmentIngestor
    resolver: ClipboardResolver
    dispatcher: UIDispatcher

    dialogs: DialogProvider
    clipboard: ClipboardReader
    renderer: Renderer
    opener: SystemOpener
    autostart: AutostartRegistrar
