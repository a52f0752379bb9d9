"""A queue of variable-length binary messages, each stored behind a size header."""

from __future__ import annotations

import struct

from lcukit.ringbuffer import RingBuffer

_HEADER = struct.Struct("=I")
HEADER_SIZE = _HEADER.size
"""Bytes of the length header stored before every message."""


class QueueFullError(Exception):
    """The message and its header do not fit in the free space."""


class QueueEmptyError(Exception):
    """No message is waiting."""


class IncompleteMessageError(Exception):
    """A header is present but its message body has not fully arrived yet."""


class BufferTooSmallError(Exception):
    """The next message is larger than the caller allows."""

    def __init__(self, size: int) -> None:
        super().__init__(f"next message needs {size} bytes")
        self.size = size


class MessageQueue:
    """FIFO of byte messages over a ring buffer built from ``buf_size`` bytes."""

    def __init__(self, buf_size: int) -> None:
        if buf_size < HEADER_SIZE + 4:
            raise ValueError(f"buffer size {buf_size} is too small")
        self._ring = RingBuffer.with_memory(buf_size)

    def push(self, message: bytes | bytearray | memoryview) -> None:
        """Append ``message``; raise QueueFullError if it does not fit."""
        view = memoryview(message).cast("B")
        if len(view) == 0:
            raise ValueError("message must not be empty")
        if self._ring.available_write() < HEADER_SIZE + len(view):
            raise QueueFullError(f"no room for a {len(view)}-byte message")
        self._ring.write(_HEADER.pack(len(view)))
        self._ring.write(view)

    def next_message_size(self) -> int:
        """Size of the next message, or 0 if none is waiting."""
        if self._ring.available_read() < HEADER_SIZE + 1:
            return 0
        return _HEADER.unpack(self._ring.peek(HEADER_SIZE))[0]

    def pop(self, max_size: int | None = None) -> bytes:
        """Remove and return the next message.

        Raises QueueEmptyError when nothing waits, IncompleteMessageError when
        the body is not complete, and BufferTooSmallError when the message is
        longer than ``max_size``; the message stays queued in the last two cases.
        """
        available = self._ring.available_read()
        if available < HEADER_SIZE + 1:
            raise QueueEmptyError("queue is empty")
        (size,) = _HEADER.unpack(self._ring.peek(HEADER_SIZE))
        if available < HEADER_SIZE + size:
            raise IncompleteMessageError("message body not complete yet")
        if max_size is not None and size > max_size:
            raise BufferTooSmallError(size)
        self._ring.discard(HEADER_SIZE)
        return self._ring.read(size)

    def clear(self) -> None:
        """Drop every queued message."""
        self._ring.clear()

    def available_pop_bytes(self) -> int:
        """Bytes stored, headers included."""
        return self._ring.available_read()

    def available_push_bytes(self) -> int:
        """Free bytes, of which each message also needs room for its header."""
        return self._ring.available_write()