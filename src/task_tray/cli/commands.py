# src/task_tray/cli/commands.py

"""
Menu operations (the tray menu surface).

Every handler runs on the dispatch thread: it may block on dialogs and calls
the store directly. Handlers report failures through the dialog provider and
return a short status line for the connector to print.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ..attachments.clipboard import PrefillText
from ..core.state import AppState
from ..errors import AttachmentError, ClipboardEmptyError, TaskTrayError
from ..tasks.task_api import add_task, parse_move, paste_from_clipboard, render_queue_list, summarize_task
from ..tasks.task_models import EXTENSION_TYPES, Attachment, AttachmentType

MenuHandler = Callable[[AppState, list[str]], str | None]

logger = logging.getLogger(__name__)

PASTE_KEYWORD = "/paste"
FILE_KEYWORD = "/file"
FILE_FILTERS = [f"*.{ext}" for ext in EXTENSION_TYPES]

ADD_PROMPT = (
    "Task text:\n"
    f"  {PASTE_KEYWORD} - insert from clipboard (image, audio, file path or text)\n"
    f"  {FILE_KEYWORD}  - attach an image or audio file"
)


class MenuRegistry:
    """Name -> handler table for the menu items (add, show, skip, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, MenuHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: MenuHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def lookup(self, line: str) -> tuple[MenuHandler, list[str]] | None:
        """Find the handler for "name args..." (a leading "/" is optional)."""
        parts = line.strip().lstrip("/").split()
        if not parts:
            return None
        handler = self._handlers.get(parts[0].lower())
        if handler is None:
            return None
        return handler, parts[1:]

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Run the handler for `line` on the current thread.
        Returns the status line, or None for an empty line.
        """
        if not line.strip():
            return None
        found = self.lookup(line)
        if found is None:
            name = line.strip().lstrip("/").split()[0]
            return f"Unknown menu item: {name}. Type 'help' to list them."
        handler, args = found
        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Menu:"]
        for name, help_text in self._help.items():
            lines.append(f"  {name} - {help_text}")
        return "\n".join(lines)


registry = MenuRegistry()


def queue_status(state: AppState) -> str:
    """Tooltip equivalent: number of queued tasks."""
    return f"Queue: {state.store.count()} task(s)"


def _join_prefill(prefill: str, text: str) -> str:
    return text if not prefill else f"{prefill}\n{text}"


def _check_attachment(state: AppState, att: Attachment) -> Attachment | None:
    if att.type is AttachmentType.NONE:
        logger.warning("Ignoring unsupported attachment %s", att.path)
        state.dialogs.notify(
            f"Unsupported attachment type: {Path(att.path).name} (use {', '.join(FILE_FILTERS)})",
            error=True,
        )
        return None
    return att


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    dialogs = state.dialogs
    prefill = " ".join(args)
    attachment: Attachment | None = None

    while True:
        text = dialogs.prompt_text(ADD_PROMPT, prefill)
        if text is None:
            return "Canceled."
        entered = text.strip()

        if entered == PASTE_KEYWORD:
            try:
                pasted = paste_from_clipboard(state)
            except ClipboardEmptyError:
                dialogs.notify("The clipboard has no usable image, file or text.", error=True)
                continue
            if isinstance(pasted, PrefillText):
                prefill = _join_prefill(prefill, pasted.text)
            elif _check_attachment(state, pasted) is not None:
                attachment = pasted
                dialogs.notify(f"Attached {pasted.type.value}: {Path(pasted.path).name}")
            continue

        if entered == FILE_KEYWORD:
            picked = dialogs.pick_file(FILE_FILTERS)
            if picked is None:
                continue
            try:
                copied = state.ingestor.copy_into_store(picked)
            except AttachmentError as e:
                logger.warning("File attachment failed: %s", e)
                dialogs.notify(f"Could not attach the file: {e}", error=True)
                continue
            if _check_attachment(state, copied) is not None:
                attachment = copied
                dialogs.notify(f"Attached {copied.type.value}: {Path(copied.path).name}")
            continue

        if not entered:
            dialogs.notify("Task text cannot be empty.", error=True)
            continue

        try:
            add_task(state, entered, attachment)
        except TaskTrayError as e:
            logger.error("Add task failed: %s", e)
            dialogs.notify(f"Could not add the task: {e}", error=True)
            return queue_status(state)
        dialogs.notify("Task added.")
        return queue_status(state)


def cmd_show(state: AppState, args: list[str]) -> str:
    task, ok = state.store.peek()
    if not ok or task is None:
        state.dialogs.notify("The queue is empty.")
        return queue_status(state)

    audio = task.attachment_path if task.attachment_type is AttachmentType.AUDIO else None
    image = task.attachment_path if task.attachment_type is AttachmentType.IMAGE else None
    try:
        preview = state.renderer.render(task.text, audio, image_path=image)
    except OSError as e:
        logger.exception("Task preview rendering failed.")
        state.dialogs.notify(f"Could not render the task: {e}", error=True)
        return queue_status(state)
    state.opener.open_with_default_app(preview)
    return summarize_task(task)


def cmd_skip(state: AppState, args: list[str]) -> str:
    try:
        state.store.skip()
    except TaskTrayError as e:
        logger.error("Skip failed: %s", e)
        state.dialogs.notify(str(e), error=True)
    return queue_status(state)


def cmd_done(state: AppState, args: list[str]) -> str:
    try:
        done = state.store.complete()
    except TaskTrayError as e:
        logger.info("Complete failed: %s", e)
        state.dialogs.notify(str(e), error=True)
        return queue_status(state)
    return f"Completed: {summarize_task(done)}\n{queue_status(state)}"


def reorder_tasks(state: AppState) -> None:
    """Prompt for "from to" moves until the user enters nothing or cancels."""
    dialogs = state.dialogs
    while True:
        listing = render_queue_list(state.store.get_all())
        raw = dialogs.prompt_text(
            f"Current order:\n\n{listing}\n\n"
            'Move as "from to" (e.g. 5 1 or 5->1). Empty or cancel to finish.'
        )
        if raw is None or not raw.strip():
            return
        try:
            src, dst = parse_move(raw)
        except ValueError:
            dialogs.notify('Format: "5 1" or "5->1"', error=True)
            continue
        try:
            state.store.move(src - 1, dst - 1)
        except TaskTrayError as e:
            dialogs.notify(str(e), error=True)


def cmd_list(state: AppState, args: list[str]) -> str:
    listing = render_queue_list(state.store.get_all())
    if state.dialogs.confirm(f"{listing}\n\nEdit the order?"):
        reorder_tasks(state)
    return queue_status(state)


def cmd_autostart(state: AppState, args: list[str]) -> str:
    want = not state.autostart.is_enabled()
    if not state.autostart.set_enabled(want):
        state.dialogs.notify("Could not change run-at-login.", error=True)
        return "Run at login unchanged."
    return f"Run at login: {'on' if want else 'off'}"


def cmd_config(state: AppState, args: list[str]) -> str:
    data_dir = getattr(state.settings, "data_dir", state.store.path.parent)
    if not state.opener.open_with_default_app(data_dir):
        state.dialogs.notify(f"Could not open {data_dir}", error=True)
    return str(data_dir)


def cmd_quit(state: AppState, args: list[str]) -> str:
    state.dispatcher.close()
    return "Bye."


registry.register("help", cmd_help, "show this menu", aliases=["?"])
registry.register("add", cmd_add, "add a task (optionally: add <text>)", aliases=["a"])
registry.register("show", cmd_show, "open the first task", aliases=["s"])
registry.register("skip", cmd_skip, "move the first task to the end")
registry.register("done", cmd_done, "complete (remove) the first task", aliases=["complete", "d"])
registry.register("list", cmd_list, "list all tasks and edit their order", aliases=["ls", "l"])
registry.register("autostart", cmd_autostart, "toggle run at login")
registry.register("config", cmd_config, "open the data folder")
registry.register("quit", cmd_quit, "exit", aliases=["exit", "q"])
