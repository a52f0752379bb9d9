"""A byte ring buffer that keeps one slot free to tell full from empty."""

from __future__ import annotations


class ByteRing:
    """Byte FIFO of ``size`` slots holding at most ``size - 1`` bytes.

    Writes and reads are all-or-nothing: a write that does not fit, or a
    read asking for more than is stored, moves nothing.
    """

    def __init__(self, size: int) -> None:
        if size < 3:
            raise ValueError(f"ring size {size} is too small")
        self._size = size
        self._buf = bytearray(size)
        self._read = 0
        self._write = 0

    def available_read(self) -> int:
        """Bytes waiting to be read."""
        return (self._size + self._write - self._read) % self._size

    def available_write(self) -> int:
        """Free space in bytes."""
        return (self._size + self._read - self._write - 1) % self._size

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Store all of ``data`` and return its length, or 0 if it does not fit."""
        view = memoryview(data).cast("B")
        length = len(view)
        if length == 0 or length > self.available_write():
            return 0
        first = min(length, self._size - self._write)
        self._buf[self._write:self._write + first] = view[:first]
        rest = length - first
        if rest:
            self._buf[:rest] = view[first:]
            self._write = rest
        else:
            self._write = (self._write + first) % self._size
        return length

    def _take(self, size: int, consume: bool, copy: bool) -> tuple[bytes, int]:
        if size < 0:
            raise ValueError("size must not be negative")
        if size == 0 or size > self.available_read():
            return b"", 0
        first = min(size, self._size - self._read)
        rest = size - first
        data = b""
        if copy:
            data = bytes(self._buf[self._read:self._read + first]) + bytes(self._buf[:rest])
        if consume:
            self._read = rest if rest else (self._read + first) % self._size
        return data, size

    def read(self, size: int) -> bytes:
        """Remove and return exactly ``size`` bytes, or ``b""`` if fewer are stored."""
        return self._take(size, consume=True, copy=True)[0]

    def peek(self, size: int) -> bytes:
        """Return exactly ``size`` bytes without removing them, or ``b""``."""
        return self._take(size, consume=False, copy=True)[0]

    def discard(self, size: int) -> int:
        """Drop exactly ``size`` bytes; return ``size``, or 0 if fewer are stored."""
        return self._take(size, consume=True, copy=False)[1]

    def clear(self) -> None:
        """Drop all data."""
        self._read = 0
        self._write = 0