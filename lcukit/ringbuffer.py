"""A power-of-two ring buffer with free-running read and write positions."""

from __future__ import annotations

HEADER_SIZE = 24
"""Bytes of a memory block reserved for bookkeeping by :meth:`RingBuffer.with_memory`."""

_U32 = 0xFFFFFFFF


def _is_power_of_2(n: int) -> bool:
    return n > 1 and n & (n - 1) == 0


def _roundup_pow_of_two(n: int) -> int:
    if n == 0 or _is_power_of_2(n):
        return n
    return 1 << n.bit_length()


class RingBuffer:
    """Byte FIFO whose capacity is a power of two.

    Reads and writes move as much data as fits or is available.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 2:
            raise ValueError(f"invalid capacity: {capacity}")
        self._init_storage(_roundup_pow_of_two(capacity))

    def _init_storage(self, size: int) -> None:
        self._size = size
        self._buf = bytearray(size)
        self._in = 0
        self._out = 0

    @classmethod
    def with_memory(cls, memory_size: int) -> RingBuffer:
        """Build a buffer from a block of ``memory_size`` bytes.

        :data:`HEADER_SIZE` bytes go to bookkeeping and the rest is rounded
        down to a power of two.
        """
        if memory_size < HEADER_SIZE + 4:
            raise ValueError(f"invalid memory size: {memory_size}")
        size = memory_size - HEADER_SIZE
        if not _is_power_of_2(size):
            size = _roundup_pow_of_two(size) >> 1
        ring = cls.__new__(cls)
        ring._init_storage(size)
        return ring

    def available_read(self) -> int:
        """Bytes waiting to be read."""
        return (self._in - self._out) & _U32

    def available_write(self) -> int:
        """Free space in bytes."""
        return self._size - self.available_read()

    def is_empty(self) -> bool:
        return self.available_read() == 0

    def is_full(self) -> bool:
        return self.available_write() == 0

    def clear(self) -> None:
        """Drop all data and reset both positions."""
        self._in = 0
        self._out = 0

    def read_position(self) -> int:
        """Free-running reader position."""
        return self._out

    def write_position(self) -> int:
        """Free-running writer position."""
        return self._in

    def capacity(self) -> int:
        """Real capacity in bytes."""
        return self._size

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Write as much of ``data`` as fits; return the byte count written."""
        view = memoryview(data).cast("B")
        size = min(len(view), self.available_write())
        if size == 0:
            return 0
        start = self._in & (self._size - 1)
        first = min(size, self._size - start)
        self._buf[start:start + first] = view[:first]
        rest = size - first
        if rest:
            self._buf[:rest] = view[first:size]
        self._in = (self._in + size) & _U32
        return size

    def _take(self, size: int, consume: bool, copy: bool) -> tuple[bytes, int]:
        if size < 0:
            raise ValueError("size must not be negative")
        size = min(size, self.available_read())
        if size == 0:
            return b"", 0
        data = b""
        if copy:
            start = self._out & (self._size - 1)
            first = min(size, self._size - start)
            data = bytes(self._buf[start:start + first]) + bytes(self._buf[: size - first])
        if consume:
            self._out = (self._out + size) & _U32
        return data, size

    def read(self, size: int) -> bytes:
        """Remove and return up to ``size`` bytes."""
        return self._take(size, consume=True, copy=True)[0]

    def peek(self, size: int) -> bytes:
        """Return up to ``size`` bytes without removing them."""
        return self._take(size, consume=False, copy=True)[0]

    def discard(self, size: int) -> int:
        """Drop up to ``size`` bytes; return how many were dropped."""
        return self._take(size, consume=True, copy=False)[1]