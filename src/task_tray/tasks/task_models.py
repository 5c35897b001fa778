# src/task_tray/tasks/task_models.py

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..errors import FormatError


class AttachmentType(StrEnum):
    """Kind of file attached to a task."""

    NONE = "none"
    IMAGE = "image"
    AUDIO = "audio"

    @classmethod
    def from_raw(cls, raw: str | None) -> AttachmentType:
        if not raw:
            return cls.NONE
        try:
            return cls(raw)
        except ValueError:
            return cls.NONE


# Single lookup table used by both the file picker and the clipboard paths.
EXTENSION_TYPES: dict[str, AttachmentType] = {
    "png": AttachmentType.IMAGE,
    "jpg": AttachmentType.IMAGE,
    "jpeg": AttachmentType.IMAGE,
    "m4a": AttachmentType.AUDIO,
    "mp3": AttachmentType.AUDIO,
}


@dataclass(frozen=True, slots=True)
class Attachment:
    """A file inside managed storage plus its classified type."""

    path: str
    type: AttachmentType


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    text: str
    created_at: datetime
    attachment_path: str | None = None
    attachment_type: AttachmentType = AttachmentType.NONE

    def __post_init__(self) -> None:
        # attachment_path is present iff attachment_type is not NONE.
        if bool(self.attachment_path) != (self.attachment_type is not AttachmentType.NONE):
            raise ValueError(
                f"task {self.id}: attachment_path={self.attachment_path!r} "
                f"does not match attachment_type={self.attachment_type.value}"
            )

    @property
    def has_attachment(self) -> bool:
        return self.attachment_type is not AttachmentType.NONE

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "created_at": self.created_at.isoformat(),
        }
        if self.has_attachment:
            data["attachment_path"] = self.attachment_path
            data["attachment_type"] = self.attachment_type.value
        return data

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        """
        Build a Task from one element of the persisted "tasks" array.

        Missing or unknown attachment fields load as "no attachment".
        Raises FormatError when required fields are missing or mistyped.
        """
        if not isinstance(raw, dict):
            raise FormatError(f"task entry must be an object, got {type(raw).__name__}")

        task_id = raw.get("id")
        text = raw.get("text")
        created_raw = raw.get("created_at")
        if not isinstance(task_id, str) or not task_id:
            raise FormatError("task entry is missing a string 'id'")
        if not isinstance(text, str):
            raise FormatError(f"task {task_id}: 'text' must be a string")
        if not isinstance(created_raw, str):
            raise FormatError(f"task {task_id}: 'created_at' must be an RFC3339 string")
        try:
            created_at = datetime.fromisoformat(created_raw)
        except ValueError as e:
            raise FormatError(f"task {task_id}: bad 'created_at' {created_raw!r}") from e

        path = raw.get("attachment_path")
        att_type = AttachmentType.from_raw(raw.get("attachment_type"))
        if not isinstance(path, str) or not path or att_type is AttachmentType.NONE:
            path = None
            att_type = AttachmentType.NONE

        return cls(
            id=task_id,
            text=text,
            created_at=created_at,
            attachment_path=path,
            attachment_type=att_type,
        )


_id_lock = threading.Lock()
_last_id_ns = 0


def new_task_id() -> str:
    """Return "tsk_<ns>", strictly increasing within the process even on coarse clocks."""
    global _last_id_ns
    with _id_lock:
        ns = max(time.time_ns(), _last_id_ns + 1)
        _last_id_ns = ns
    return f"tsk_{ns}"


def new_task(text: str, attachment: Attachment | None = None) -> Task:
    """Create a fresh task stamped with the current local time."""
    if attachment is None or attachment.type is AttachmentType.NONE:
        return Task(id=new_task_id(), text=text, created_at=datetime.now().astimezone())
    return Task(
        id=new_task_id(),
        text=text,
        created_at=datetime.now().astimezone(),
        attachment_path=attachment.path,
        attachment_type=attachment.type,
    )
