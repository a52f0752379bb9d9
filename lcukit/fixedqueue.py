"""A queue of fixed-size binary messages backed by a ring buffer."""

from __future__ import annotations

from lcukit.ringbuffer import RingBuffer


class FixedMessageQueue:
    """FIFO of messages that are all exactly ``message_size`` bytes long.

    The backing memory is ``message_size * max_messages`` bytes, laid out as
    a :class:`RingBuffer` built with :meth:`RingBuffer.with_memory`, so the
    usable number of messages may be smaller than ``max_messages``.
    """

    def __init__(self, message_size: int, max_messages: int) -> None:
        if message_size < 1 or max_messages < 1:
            raise ValueError("message_size and max_messages must be positive")
        self._message_size = message_size
        self._ring = RingBuffer.with_memory(message_size * max_messages)

    def push(self, message: bytes | bytearray | memoryview) -> bool:
        """Append ``message``; return False if the queue is full."""
        view = memoryview(message).cast("B")
        if len(view) != self._message_size:
            raise ValueError(
                f"message must be {self._message_size} bytes, got {len(view)}"
            )
        if self.is_full():
            return False
        return self._ring.write(view) == self._message_size

    def pop(self) -> bytes | None:
        """Remove and return the oldest message, or None if the queue is empty."""
        if self.is_empty():
            return None
        data = self._ring.read(self._message_size)
        return data if len(data) == self._message_size else None

    def clear(self) -> None:
        """Drop every queued message."""
        self._ring.clear()

    def available_pop(self) -> int:
        """Number of messages waiting."""
        return self._ring.available_read() // self._message_size

    def available_push(self) -> int:
        """Number of messages that still fit."""
        return self._ring.available_write() // self._message_size

    def is_empty(self) -> bool:
        return self.available_pop() == 0

    def is_full(self) -> bool:
        return self.available_push() == 0