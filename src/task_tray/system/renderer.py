# src/task_tray/system/renderer.py

from __future__ import annotations

import html
import logging
import time
from pathlib import Path

import markdown

logger = logging.getLogger(__name__)

# Raw HTML in the task text passes through (e.g. a hand-written <audio> tag).
MARKDOWN_EXTENSIONS = ["tables", "fenced_code", "sane_lists"]

_PAGE = """<!doctype html>
<html><head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width,initial-scale=1">
<title>{title}</title>
<style>
 body{{font-family:-apple-system,Segoe UI,Roboto,Arial,sans-serif;line-height:1.5;padding:16px;max-width:800px;margin:0 auto}}
 img{{max-width:100%;height:auto;border-radius:8px;border:1px solid #ddd}}
 audio{{width:100%;margin:8px 0}}
 pre{{background:#f6f8fa;padding:12px;border-radius:6px;overflow:auto}}
 table{{border-collapse:collapse}} td,th{{border:1px solid #ddd;padding:4px 8px}}
</style>
</head><body>
<div class="text">{body}</div>
{media}
</body></html>
"""


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS, output_format="html")


class HtmlPreviewRenderer:
    """
    Writes a standalone HTML preview of a task.

    The task text is rendered as Markdown. An audio player or image is
    appended when the attachment is not already referenced in the text.
    """

    def __init__(self, out_dir: str | Path, title: str = "Task") -> None:
        self._out_dir = Path(out_dir)
        self._title = title

    def render(self, task_text: str, audio_path: str | None = None, *, image_path: str | None = None) -> Path:
        media: list[str] = []
        if audio_path and audio_path not in task_text:
            src = html.escape(Path(audio_path).resolve().as_uri(), quote=True)
            media.append(f'<audio controls src="{src}"></audio>')
        if image_path and image_path not in task_text:
            src = html.escape(Path(image_path).resolve().as_uri(), quote=True)
            media.append(f'<img alt="attachment" src="{src}">')

        doc = _PAGE.format(
            title=html.escape(self._title),
            body=render_markdown(task_text),
            media="\n".join(media),
        )
        self._out_dir.mkdir(parents=True, exist_ok=True)
        out = self._out_dir / f"task_{time.time_ns()}.html"
        out.write_text(doc, "utf-8")
        logger.debug("Rendered task preview %s", out)
        return out
