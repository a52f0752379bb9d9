"""A buffer that overwrites its oldest data when full.

Readers address data by absolute position (taken modulo the capacity) and
learn whether that data is still present or has been overwritten.
"""

from __future__ import annotations

import contextlib
from typing import Any

from lcukit.ringbuffer import RingBuffer

_U32 = 0xFFFFFFFF


class DataCoveredError(Exception):
    """The data at the requested position has already been overwritten."""


class DataNotEnoughError(Exception):
    """Less data is stored from the requested position than was asked for."""


class AutoCoverBuffer:
    """Byte buffer whose writes discard the oldest data to make room.

    ``capacity`` is rounded up to a power of two. ``lock`` may be any
    context manager guarding reads and writes.
    """

    def __init__(self, capacity: int, lock: Any = None) -> None:
        self._ring = RingBuffer(capacity)
        self._size = self._ring.capacity()
        self._lock = lock

    def _guard(self) -> Any:
        return self._lock if self._lock is not None else contextlib.nullcontext()

    def _readable_from(self, read_pos: int) -> int:
        mask = self._size - 1
        offset = read_pos & mask
        available = self._ring.available_read()
        rd = self._ring.read_position() & mask
        wr = self._ring.write_position() & mask
        if (wr - rd) & _U32 == available:
            if rd <= offset < wr:
                return available - (offset - rd)
            raise DataCoveredError(f"data at position {read_pos} is covered")
        if wr < offset < rd:
            raise DataCoveredError(f"data at position {read_pos} is covered")
        if offset >= rd:
            return available - (offset - rd)
        return wr - offset

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Append ``data``, discarding the oldest bytes if needed; return its length."""
        view = memoryview(data).cast("B")
        if len(view) > self._size:
            raise ValueError(f"{len(view)} bytes exceed capacity {self._size}")
        with self._guard():
            space = self._ring.available_write()
            if len(view) > space:
                self._ring.discard(len(view) - space)
            written = self._ring.write(view)
        return written

    def available_read(self, read_pos: int) -> int:
        """Bytes readable starting at ``read_pos``; raise DataCoveredError if gone."""
        with self._guard():
            return self._readable_from(read_pos)

    def read(self, read_pos: int, size: int) -> bytes:
        """Read ``size`` bytes starting at ``read_pos``.

        Older data before ``read_pos`` is dropped. Raises DataCoveredError if
        the position was overwritten and DataNotEnoughError if fewer than
        ``size`` bytes are stored from there; nothing is consumed then.
        """
        if size <= 0:
            raise ValueError("size must be positive")
        with self._guard():
            readable = self._readable_from(read_pos)
            if readable < size:
                raise DataNotEnoughError(
                    f"only {readable} bytes available at position {read_pos}"
                )
            skip = self._ring.available_read() - readable
            if skip:
                self._ring.discard(skip)
            return self._ring.read(size)