# src/task_tray/errors.py

"""
Error taxonomy shared by the store, the ingestion pipelines and the menu handlers.

Core components raise these and never retry; handlers catch TaskTrayError,
report it to the user and keep the queue usable.
"""

from __future__ import annotations


class TaskTrayError(Exception):
    """Base class for every recoverable task-tray error."""


class StorageError(TaskTrayError):
    """Filesystem read/write failure while loading or saving the queue."""


class FormatError(TaskTrayError):
    """The persisted queue document cannot be parsed."""


class EmptyQueueError(TaskTrayError):
    """The queue has no head task."""


class IndexOutOfRangeError(TaskTrayError, IndexError):
    """A move index is outside [0, n)."""


class AttachmentError(TaskTrayError):
    """Copying or decoding an attachment failed."""


class ClipboardEmptyError(TaskTrayError):
    """The clipboard holds nothing usable."""
