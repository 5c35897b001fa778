# src/task_tray/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from ..errors import AttachmentError, EmptyQueueError, FormatError, IndexOutOfRangeError, StorageError
from .task_models import Task

logger = logging.getLogger(__name__)


def load_tasks(path: str | Path) -> list[Task]:
    """
    Read the persisted queue document.

    A missing file is an empty queue. Anything unreadable is an error:
    FormatError for malformed content, StorageError for other read failures.
    """
    path = Path(path)
    try:
        raw = path.read_text("utf-8")
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"cannot read {path}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise FormatError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise FormatError(f"{path}: top-level value must be an object")
    items = data.get("tasks")
    if items is None:
        return []
    if not isinstance(items, list):
        raise FormatError(f"{path}: 'tasks' must be an array")

    tasks = [Task.from_dict(item) for item in items]
    seen: set[str] = set()
    for t in tasks:
        if t.id in seen:
            raise FormatError(f"{path}: duplicate task id {t.id}")
        seen.add(t.id)
    return tasks


def _fsync_dir(directory: Path) -> None:
    """Persist the rename itself (POSIX only; Windows cannot open directories)."""
    if os.name == "nt":
        return
    try:
        dir_fd = os.open(directory, os.O_RDONLY)
    except OSError:
        logger.warning("Cannot open %s to fsync the rename.", directory, exc_info=True)
        return
    try:
        os.fsync(dir_fd)
    except OSError:
        # The new document is already in place; only its durability is uncertain.
        logger.warning("fsync of %s failed.", directory, exc_info=True)
    finally:
        os.close(dir_fd)


def save_tasks(path: str | Path, tasks: list[Task]) -> None:
    """
    Durably replace the queue document with `tasks`.

    The document is written to a temp file in the same directory, fsynced and
    renamed over the live file, so a crash leaves either the old or the new
    content. Raises StorageError.
    """
    path = Path(path)
    doc: dict[str, Any] = {"tasks": [t.to_dict() for t in tasks]}
    payload = json.dumps(doc, ensure_ascii=False, indent=2)

    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise StorageError(f"cannot write {path}: {e}") from e
    finally:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)

    _fsync_dir(path.parent)


class QueueStore:
    """
    Ordered, JSON-file backed task queue.

    Index 0 is the head (next task to serve).

    Thread-safety:
    - one lock per instance serializes every read and read-modify-write
    - mutations build the new sequence on a copy, persist it, and only then
      install it in memory, so a failed save leaves memory untouched
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._tasks: list[Task] = load_tasks(self._path)
        logger.info("QueueStore ready path=%s total=%s", self._path, len(self._tasks))

    @property
    def path(self) -> Path:
        return self._path

    # ---- low-level helpers ----

    def _commit(self, new_tasks: list[Task]) -> None:
        # Caller holds the lock.
        save_tasks(self._path, new_tasks)
        self._tasks = new_tasks

    # ---- public API ----

    def reload(self) -> None:
        """Replace memory with the on-disk document."""
        with self._lock:
            self._tasks = load_tasks(self._path)

    def get_all(self) -> list[Task]:
        with self._lock:
            return list(self._tasks)

    def count(self) -> int:
        with self._lock:
            return len(self._tasks)

    def enqueue(self, task: Task) -> None:
        """Append `task` to the tail and persist."""
        if task.has_attachment and not Path(task.attachment_path or "").is_file():
            raise AttachmentError(f"attachment is not a regular file: {task.attachment_path}")

        with self._lock:
            if any(t.id == task.id for t in self._tasks):
                raise ValueError(f"task id already queued: {task.id}")
            self._commit([*self._tasks, task])
        logger.debug("Task enqueued id=%s attachment=%s", task.id, task.attachment_type.value)

    def peek(self) -> tuple[Task | None, bool]:
        with self._lock:
            if not self._tasks:
                return None, False
            return self._tasks[0], True

    def skip(self) -> None:
        """Rotate the head to the tail. No-op (and no write) for 0 or 1 tasks."""
        with self._lock:
            if len(self._tasks) <= 1:
                return
            draft = self._tasks[1:] + self._tasks[:1]
            self._commit(draft)
            logger.debug("Task skipped id=%s", draft[-1].id)

    def complete(self) -> Task:
        """Remove and return the head."""
        with self._lock:
            if not self._tasks:
                raise EmptyQueueError("queue is empty")
            head = self._tasks[0]
            self._commit(self._tasks[1:])
        logger.debug("Task completed id=%s", head.id)
        return head

    def move(self, from_index: int, to_index: int) -> None:
        """
        Move the task at `from_index` so it ends up at `to_index`.

        Both indices are 0-based positions in the current sequence.
        """
        with self._lock:
            n = len(self._tasks)
            if not (0 <= from_index < n and 0 <= to_index < n):
                raise IndexOutOfRangeError(
                    f"indexes out of range: from={from_index} to={to_index} (queue length {n})"
                )
            if from_index == to_index:
                return
            draft = list(self._tasks)
            draft.insert(to_index, draft.pop(from_index))
            self._commit(draft)
        logger.debug("Task moved from=%s to=%s", from_index, to_index)
