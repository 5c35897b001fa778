# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_tray.attachments.clipboard import ClipboardResolver
from task_tray.attachments.ingest import AttachmentIngestor
from task_tray.core.dispatcher import UIDispatcher
from task_tray.core.state import AppState
from task_tray.tasks.task_store import QueueStore

from .fakes import FakeAutostart, FakeClipboard, FakeDialogs, FakeOpener, FakeRenderer


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the handlers.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return SimpleNamespace(
        app_name="Task Tray (test)",
        data_dir=data_dir,
        queue_path=data_dir / "queue.json",
        attachments_dir=data_dir / "attachments",
        previews_dir=data_dir / "previews",
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> QueueStore:
    return QueueStore(settings.queue_path)


@pytest.fixture()
def ingestor(settings: SimpleNamespace) -> AttachmentIngestor:
    return AttachmentIngestor(settings.attachments_dir)


@pytest.fixture()
def dialogs() -> FakeDialogs:
    return FakeDialogs()


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    store: QueueStore,
    ingestor: AttachmentIngestor,
    dialogs: FakeDialogs,
    tmp_path: Path,
) -> AppState:
    """
    AppState wired with deterministic fakes.

    NOTE: the store and ingestor are real: their on-disk behaviour is part of
    what we want to test.
    """
    previews = tmp_path / "previews"
    previews.mkdir()
    return AppState(
        settings=settings,
        store=store,
        ingestor=ingestor,
        resolver=ClipboardResolver(ingestor, platform="linux"),
        dispatcher=UIDispatcher(),
        dialogs=dialogs,
        clipboard=FakeClipboard(),
        renderer=FakeRenderer(previews),
        opener=FakeOpener(),
        autostart=FakeAutostart(),
    )
