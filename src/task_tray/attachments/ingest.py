# src/task_tray/attachments/ingest.py

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import time
from pathlib import Path

from ..errors import AttachmentError
from ..tasks.task_models import EXTENSION_TYPES, Attachment, AttachmentType

logger = logging.getLogger(__name__)

# Attempts at finding a free name before giving up (each uses a fresh timestamp).
_MAX_NAME_ATTEMPTS = 16


def classify(path: str | Path) -> AttachmentType:
    """Attachment type from the file extension (case-insensitive)."""
    ext = Path(path).suffix.lower().lstrip(".")
    return EXTENSION_TYPES.get(ext, AttachmentType.NONE)


class AttachmentIngestor:
    """
    Copies files into the managed attachments directory.

    Every stored file is a new, independently owned file named
    "<time_ns>_<basename>" (or "<time_ns>_clipboard.<ext>" for raw bytes).
    Files are opened with exclusive-create, so two ingestions never share a name.
    """

    def __init__(self, attachments_dir: str | Path) -> None:
        self._dir = Path(attachments_dir)
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def attachments_dir(self) -> Path:
        return self._dir

    def _open_new(self, suffix: str):
        for _ in range(_MAX_NAME_ATTEMPTS):
            dst = self._dir / f"{time.time_ns()}_{suffix}"
            try:
                return dst, open(dst, "xb")
            except FileExistsError:
                continue
        raise AttachmentError(f"could not allocate a unique name for {suffix!r} in {self._dir}")

    def copy_into_store(self, source_path: str | Path) -> Attachment:
        """Copy `source_path` byte-for-byte into managed storage and classify it."""
        src = Path(source_path).expanduser()
        try:
            src_f = open(src, "rb")
        except OSError as e:
            raise AttachmentError(f"cannot read {src}: {e}") from e

        with src_f:
            try:
                dst, dst_f = self._open_new(src.name)
            except OSError as e:
                raise AttachmentError(f"cannot create attachment in {self._dir}: {e}") from e
            try:
                with dst_f:
                    shutil.copyfileobj(src_f, dst_f)
            except OSError as e:
                with contextlib.suppress(OSError):
                    os.unlink(dst)
                raise AttachmentError(f"cannot copy {src} to {dst}: {e}") from e

        att = Attachment(path=str(dst.resolve()), type=classify(dst))
        logger.info("Attachment stored src=%s dst=%s type=%s", src, att.path, att.type.value)
        return att

    def store_bytes(self, data: bytes, extension: str) -> Attachment:
        """Write raw bytes (clipboard content) as "<time_ns>_clipboard.<extension>"."""
        try:
            dst, dst_f = self._open_new(f"clipboard.{extension}")
        except OSError as e:
            raise AttachmentError(f"cannot create attachment in {self._dir}: {e}") from e
        try:
            with dst_f:
                dst_f.write(data)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(dst)
            raise AttachmentError(f"cannot write {dst}: {e}") from e

        att = Attachment(path=str(dst.resolve()), type=classify(dst))
        logger.info("Clipboard attachment stored dst=%s bytes=%d type=%s", att.path, len(data), att.type.value)
        return att
