# src/task_tray/tasks/task_api.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..attachments.clipboard import ClipboardEmpty, PrefillText
from ..core.state import AppState
from ..errors import ClipboardEmptyError
from .task_models import Attachment, AttachmentType, Task, new_task

logger = logging.getLogger(__name__)

SUMMARY_MAX_CHARS = 60


def add_task(state: AppState, text: str, attachment: Attachment | None = None) -> Task:
    """
    Create a task and append it to the queue.
    Raises ValueError for empty text; store errors propagate.
    """
    text = text.strip()
    if not text:
        raise ValueError("task text is required")
    task = new_task(text, attachment)
    state.store.enqueue(task)
    logger.info("Task added id=%s attachment=%s", task.id, task.attachment_type.value)
    return task


def paste_from_clipboard(state: AppState) -> Attachment | PrefillText:
    """Resolve the current clipboard; raises ClipboardEmptyError when nothing is usable."""
    result = state.resolver.resolve(state.clipboard)
    if isinstance(result, ClipboardEmpty):
        raise ClipboardEmptyError("clipboard has no image, file or text")
    return result


def summarize_task(task: Task) -> str:
    marker = {AttachmentType.IMAGE: " [img]", AttachmentType.AUDIO: " [audio]"}.get(
        task.attachment_type, ""
    )
    text = " ".join(task.text.split())
    if len(text) > SUMMARY_MAX_CHARS:
        text = text[: SUMMARY_MAX_CHARS - 3] + "…"
    return f"{task.created_at.strftime('%Y-%m-%d %H:%M')} {text}{marker}"


def render_queue_list(tasks: Iterable[Task]) -> str:
    lines = [f"{i:2d}. {summarize_task(t)}" for i, t in enumerate(tasks, start=1)]
    return "\n".join(lines) if lines else "(empty)"


def parse_move(raw: str) -> tuple[int, int]:
    """
    Parse "5 1" or "5->1" into 1-based (from, to).
    Raises ValueError on anything else.
    """
    fields = raw.replace("->", " ").split()
    if len(fields) != 2:
        raise ValueError(f"expected two positions, got {raw!r}")
    src, dst = int(fields[0]), int(fields[1])
    if src <= 0 or dst <= 0:
        raise ValueError("positions start at 1")
    return src, dst
