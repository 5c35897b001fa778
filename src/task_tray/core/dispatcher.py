# src/task_tray/core/dispatcher.py

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

logger = logging.getLogger(__name__)

Operation = Callable[[], Any]

_CLOSE = object()


class UIDispatcher:
    """
    Single-consumer execution point for blocking UI work.

    Any thread may submit() zero-argument operations; exactly one thread calls
    run(), which executes them one at a time in submission order.

    Shutdown:
    - close() rejects new submissions (submit() returns None, never blocks)
    - run() returns after everything queued before close() has executed
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[tuple[Operation, Future] | object] = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False
        self._consumer: threading.Thread | None = None

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, fn: Operation) -> Future | None:
        """Queue `fn` for the dispatch thread. Returns None if the dispatcher is closed."""
        fut: Future = Future()
        with self._lock:
            if self._closed:
                logger.debug("Dispatcher closed; rejected %r", fn)
                return None
            self._queue.put((fn, fut))
        return fut

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            # Nothing can be queued after the marker.
            self._queue.put(_CLOSE)
        logger.info("Dispatcher closing.")

    def is_dispatch_thread(self) -> bool:
        return self._consumer is threading.current_thread()

    def run(self) -> None:
        """Drain operations on the calling thread until closed and drained."""
        self._consumer = threading.current_thread()
        logger.info("Dispatcher loop started on thread %s.", self._consumer.name)
        while True:
            item = self._queue.get()
            if item is _CLOSE:
                break
            fn, fut = item  # type: ignore[misc]
            if not fut.set_running_or_notify_cancel():
                continue
            try:
                result = fn()
            except Exception as e:
                logger.exception("UI operation failed.")
                fut.set_exception(e)
            else:
                fut.set_result(result)
        logger.info("Dispatcher loop finished.")
