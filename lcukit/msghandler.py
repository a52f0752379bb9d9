"""A message queue drained by a background worker thread."""

from __future__ import annotations

import enum
import logging
import threading
import time
from collections.abc import Callable
from typing import Any

from lcukit.msgqueue import IncompleteMessageError, MessageQueue, QueueEmptyError

_logger = logging.getLogger(__name__)

_RETRY_DELAY = 0.001


class HandlerStatus(enum.Enum):
    """Life-cycle events reported by a :class:`MessageQueueHandler`."""

    READY_TO_GO = enum.auto()
    ABOUT_TO_STOP = enum.auto()


class MessageQueueHandler:
    """Queues byte messages and hands each one to ``handle_message`` on a worker thread.

    ``handle_message`` receives the message bytes. Returning ``None`` or ``0``
    keeps the worker running; any other value, or an exception, stops it.
    ``on_status_changed`` is called with a :class:`HandlerStatus` when the
    worker starts and when it is about to stop.
    """

    def __init__(
        self,
        buf_size: int,
        handle_message: Callable[[bytes], Any],
        on_status_changed: Callable[[HandlerStatus], Any] | None = None,
    ) -> None:
        if buf_size < 4:
            raise ValueError(f"buffer size {buf_size} must not be smaller than 4")
        if not callable(handle_message):
            raise TypeError("handle_message must be callable")
        self._handle_message = handle_message
        self._on_status_changed = on_status_changed
        self._queue = MessageQueue(buf_size)
        self._queue_lock = threading.Lock()
        self._semaphore = threading.Semaphore(0)
        self._stop = False
        self._closed = False
        self._thread = threading.Thread(
            target=self._run, name="msg-queue-handler", daemon=True
        )
        self._thread.start()

    def _notify(self, status: HandlerStatus) -> None:
        if self._on_status_changed is not None:
            self._on_status_changed(status)

    def _pop(self) -> bytes:
        with self._queue_lock:
            return self._queue.pop()

    def _process(self, message: bytes) -> bool:
        try:
            result = self._handle_message(message)
        except Exception:
            _logger.exception("error while handling message, worker stops")
            return False
        if result not in (None, 0):
            _logger.error("error(%r) on user process msg, worker stops", result)
            return False
        return True

    def _run(self) -> None:
        _logger.info("worker thread %d started", threading.get_ident())
        self._notify(HandlerStatus.READY_TO_GO)
        wait_first = True
        while True:
            if wait_first:
                self._semaphore.acquire()
            if self._stop:
                break
            try:
                message = self._pop()
            except QueueEmptyError:
                wait_first = True
                continue
            except IncompleteMessageError:
                wait_first = False
                time.sleep(_RETRY_DELAY)
                continue
            wait_first = True
            if not self._process(message):
                break
        self._stop = True
        _logger.info("worker thread %d exited", threading.get_ident())
        self._notify(HandlerStatus.ABOUT_TO_STOP)

    def push(self, message: bytes | bytearray | memoryview) -> None:
        """Queue ``message`` for the worker.

        Raises RuntimeError once the worker has stopped or the handler is
        closed, and QueueFullError when the message does not fit.
        """
        if self._closed or self._stop:
            raise RuntimeError("message handler is not running")
        with self._queue_lock:
            self._queue.push(message)
        self._semaphore.release()

    def available_push_bytes(self) -> int:
        """Free bytes in the queue, headers included."""
        with self._queue_lock:
            return self._queue.available_push_bytes()

    def available_pop_bytes(self) -> int:
        """Bytes waiting in the queue, headers included."""
        with self._queue_lock:
            return self._queue.available_pop_bytes()

    def close(self) -> None:
        """Stop the worker and wait for it to finish. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._stop = True
        self._semaphore.release()
        if self._thread is not threading.current_thread():
            self._thread.join()
        with self._queue_lock:
            self._queue.clear()

    def __enter__(self) -> MessageQueueHandler:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()