# src/task_tray/attachments/clipboard.py

"""
Clipboard resolution.

Turns whatever the clipboard holds into one of:
- Attachment: an image/audio file copied into managed storage,
- PrefillText: text to pre-fill the task entry field,
- ClipboardEmpty: nothing usable.

Each step is best-effort: a failing step falls back to treating the original
text as PrefillText instead of failing the whole resolution.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from ..core.ports import ClipboardReader
from ..errors import AttachmentError
from ..tasks.task_models import Attachment
from .ingest import AttachmentIngestor

logger = logging.getLogger(__name__)

# media type prefix -> stored file extension
DATA_URI_MEDIA_TYPES: tuple[tuple[str, str], ...] = (
    ("image/png", "png"),
    ("image/jpeg", "jpg"),
    ("audio/mpeg", "mp3"),
    ("audio/mp4", "m4a"),
    ("audio/x-m4a", "m4a"),
)


@dataclass(frozen=True, slots=True)
class PrefillText:
    text: str


@dataclass(frozen=True, slots=True)
class ClipboardEmpty:
    pass


ClipboardResult = Attachment | PrefillText | ClipboardEmpty


def looks_like_path(text: str, *, platform: str | None = None) -> bool:
    """Cheap syntactic check; does not touch the filesystem."""
    platform = platform or sys.platform
    if platform.startswith("win"):
        drive = len(text) > 2 and text[0].isalpha() and text[1] == ":" and text[2] in "\\/"
        return drive or text.startswith("\\\\")
    return text.startswith(("/", "./", "../", "~"))


def _existing_file(text: str) -> Path | None:
    p = Path(os.path.expanduser(text)) if text.startswith("~") else Path(text)
    try:
        return p if p.is_file() else None
    except OSError:
        return None


def parse_data_uri(text: str) -> tuple[str, bytes] | None:
    """
    Split a base64 "data:" URI into (media_type, payload).

    Returns None for anything that is not a non-empty base64 data URI.
    """
    if text[:5].lower() != "data:":
        return None
    meta, sep, raw = text.partition(",")
    if not sep or ";base64" not in meta.lower():
        return None
    try:
        # MIME-wrapped payloads carry line breaks.
        payload = base64.b64decode("".join(raw.split()), validate=True)
    except (binascii.Error, ValueError):
        return None
    if not payload:
        return None
    media_type = meta[5:].split(";", 1)[0].strip().lower()
    return media_type, payload


def _extension_for_media_type(media_type: str) -> str | None:
    for prefix, ext in DATA_URI_MEDIA_TYPES:
        if media_type.startswith(prefix):
            return ext
    return None


class ClipboardResolver:
    def __init__(self, ingestor: AttachmentIngestor, *, platform: str | None = None) -> None:
        self._ingestor = ingestor
        self._platform = platform or sys.platform

    def resolve(self, clipboard: ClipboardReader) -> ClipboardResult:
        image = self._read_image(clipboard)
        if image:
            try:
                return self._ingestor.store_bytes(image, "png")
            except AttachmentError:
                logger.warning("Failed to store clipboard image; falling back to text.", exc_info=True)

        try:
            raw_text = clipboard.read_text()
        except Exception:
            logger.warning("Clipboard text read failed.", exc_info=True)
            raw_text = None
        text = (raw_text or "").strip()
        if not text:
            return ClipboardEmpty()

        if text[:5].lower() == "data:":
            return self._from_data_uri(text)

        if looks_like_path(text, platform=self._platform):
            src = _existing_file(text)
            if src is not None:
                try:
                    return self._ingestor.copy_into_store(src)
                except AttachmentError:
                    logger.warning("Failed to copy clipboard path %s; using it as text.", src, exc_info=True)
                    return PrefillText(text)

        return PrefillText(text)

    @staticmethod
    def _read_image(clipboard: ClipboardReader) -> bytes | None:
        # Best-effort: readers without image support simply return None.
        try:
            return clipboard.read_image()
        except Exception:
            logger.debug("Clipboard image read failed.", exc_info=True)
            return None

    def _from_data_uri(self, text: str) -> ClipboardResult:
        parsed = parse_data_uri(text)
        if parsed is None:
            return PrefillText(text)
        media_type, payload = parsed
        ext = _extension_for_media_type(media_type)
        if ext is None:
            logger.info("Clipboard data URI with unsupported media type %s; using it as text.", media_type)
            return PrefillText(text)
        try:
            return self._ingestor.store_bytes(payload, ext)
        except AttachmentError:
            logger.warning("Failed to store decoded data URI; using it as text.", exc_info=True)
            return PrefillText(text)
