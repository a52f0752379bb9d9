"""A buddy-system memory pool over a fixed block of bytes.

All allocation sizes are rounded up to a power of two times the atom size.
Adjacent free halves of a larger block are merged back together. New memory
comes from the first free block of a large enough size.
"""

from __future__ import annotations

import contextlib
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

LOGMAX = 30
"""Largest allocation is ``(1 << LOGMAX)`` atoms."""

MAX_ALLOC_SIZE = 0x40000000
"""Largest number of bytes a single allocation may request."""

_LINK_SIZE = 8
_CTRL_LOGSIZE = 0x1F
_CTRL_FREE = 0x20
_U32 = 0xFFFFFFFF


def _logarithm(value: int) -> int:
    """Ceiling of log2 of ``value``, capped at 31."""
    log = 0
    while log < 31 and (1 << log) < value:
        log += 1
    return log


@dataclass
class PoolStats:
    """Allocation statistics of a :class:`MemoryPool`."""

    n_alloc: int = 0
    total_alloc: int = 0
    total_excess: int = 0
    current_out: int = 0
    current_count: int = 0
    max_out: int = 0
    max_count: int = 0
    max_request: int = 0


class MemoryPool:
    """Allocates byte ranges from an internal buffer of ``size`` bytes.

    Allocations are identified by their byte offset into the pool. ``lock``
    may be any context manager (for example ``threading.Lock()``); it guards
    every operation that touches the free lists.
    """

    def __init__(self, size: int, min_alloc: int = 8, lock: Any = None) -> None:
        if size <= 0 or min_alloc <= 0:
            raise ValueError("size and min_alloc must be positive")
        self._lock = lock
        atom = 1 << _logarithm(min_alloc)
        while atom < _LINK_SIZE:
            atom <<= 1
        self._atom = atom
        self._nblock = size // (atom + 1)
        self._data = bytearray(self._nblock * atom)
        self._ctrl = bytearray(self._nblock)
        self._next = [-1] * self._nblock
        self._prev = [-1] * self._nblock
        self._freelist = [-1] * (LOGMAX + 1)
        self._stats = PoolStats()

        offset = 0
        for log in range(LOGMAX, -1, -1):
            count = 1 << log
            if offset + count <= self._nblock:
                self._ctrl[offset] = log | _CTRL_FREE
                self._link(offset, log)
                offset += count

    def _guard(self) -> Any:
        return self._lock if self._lock is not None else contextlib.nullcontext()

    # -- free-list bookkeeping -------------------------------------------

    def _link(self, block: int, log: int) -> None:
        head = self._freelist[log]
        self._next[block] = head
        self._prev[block] = -1
        if head >= 0:
            self._prev[head] = block
        self._freelist[log] = block

    def _unlink(self, block: int, log: int) -> None:
        nxt = self._next[block]
        prv = self._prev[block]
        if prv < 0:
            self._freelist[log] = nxt
        else:
            self._next[prv] = nxt
        if nxt >= 0:
            self._prev[nxt] = prv

    def _block_of(self, offset: int) -> int:
        if (
            not isinstance(offset, int)
            or offset < 0
            or offset % self._atom
            or offset // self._atom >= self._nblock
        ):
            raise ValueError(f"offset {offset!r} is not a block of this pool")
        block = offset // self._atom
        if self._ctrl[block] & _CTRL_FREE:
            raise ValueError(f"offset {offset} is not allocated")
        return block

    def _block_size(self, block: int) -> int:
        return self._atom * (1 << (self._ctrl[block] & _CTRL_LOGSIZE))

    # -- allocation core -------------------------------------------------

    def _malloc_unsafe(self, nbytes: int) -> int | None:
        if nbytes <= 0 or nbytes > MAX_ALLOC_SIZE:
            return None
        stats = self._stats
        if nbytes > stats.max_request:
            stats.max_request = nbytes

        full = self._atom
        log = 0
        while full < nbytes:
            full <<= 1
            log += 1

        bin_ = log
        while bin_ <= LOGMAX and self._freelist[bin_] < 0:
            bin_ += 1
        if bin_ > LOGMAX:
            return None

        block = self._freelist[bin_]
        self._unlink(block, bin_)
        while bin_ > log:
            bin_ -= 1
            buddy = block + (1 << bin_)
            self._ctrl[buddy] = _CTRL_FREE | bin_
            self._link(buddy, bin_)
        self._ctrl[block] = log

        stats.n_alloc += 1
        stats.total_alloc += full
        stats.total_excess += full - nbytes
        stats.current_count += 1
        stats.current_out += full
        stats.max_count = max(stats.max_count, stats.current_count)
        stats.max_out = max(stats.max_out, stats.current_out)
        return block * self._atom

    def _free_unsafe(self, block: int) -> None:
        log = self._ctrl[block] & _CTRL_LOGSIZE
        size = 1 << log
        stats = self._stats

        self._ctrl[block] |= _CTRL_FREE
        self._ctrl[block + size - 1] |= _CTRL_FREE
        stats.current_count -= 1
        stats.current_out -= size * self._atom

        self._ctrl[block] = _CTRL_FREE | log
        while log < LOGMAX:
            if (block >> log) & 1:
                buddy = block - size
            else:
                buddy = block + size
                if buddy >= self._nblock:
                    break
            if self._ctrl[buddy] != (_CTRL_FREE | log):
                break
            self._unlink(buddy, log)
            log += 1
            if buddy < block:
                self._ctrl[buddy] = _CTRL_FREE | log
                self._ctrl[block] = 0
                block = buddy
            else:
                self._ctrl[block] = _CTRL_FREE | log
                self._ctrl[buddy] = 0
            size <<= 1

        self._link(block, log)

    # -- public API ------------------------------------------------------

    def malloc(self, nbytes: int) -> int:
        """Allocate ``nbytes`` and return the offset of the block."""
        if nbytes <= 0:
            raise ValueError("nbytes must be positive")
        with self._guard():
            offset = self._malloc_unsafe(nbytes)
        if offset is None:
            raise MemoryError(f"cannot allocate {nbytes} bytes")
        return offset

    def calloc(self, nbytes: int) -> int:
        """Allocate ``nbytes`` and zero them."""
        offset = self.malloc(nbytes)
        self._data[offset:offset + nbytes] = bytes(nbytes)
        return offset

    def free(self, offset: int | None) -> None:
        """Return the block at ``offset`` to the pool; ``None`` is ignored."""
        if offset is None:
            return
        with self._guard():
            self._free_unsafe(self._block_of(offset))

    def realloc(self, offset: int, nbytes: int) -> int:
        """Grow the block at ``offset`` to ``nbytes``, a power of two.

        The same offset is returned when the block is already large enough.
        On failure the original block is left untouched.
        """
        if nbytes <= 0 or nbytes & (nbytes - 1):
            raise ValueError("nbytes must be a positive power of two")
        block = self._block_of(offset)
        old = self._block_size(block)
        if nbytes <= old:
            return offset
        with self._guard():
            new = self._malloc_unsafe(nbytes)
            if new is not None:
                self._data[new:new + old] = self._data[offset:offset + old]
                self._free_unsafe(block)
        if new is None:
            raise MemoryError(f"cannot allocate {nbytes} bytes")
        return new

    def resize(self, offset: int, nbytes: int) -> bool:
        """Report whether the block at ``offset`` already holds ``nbytes``."""
        if nbytes <= 0 or nbytes & (nbytes - 1):
            raise ValueError("nbytes must be a positive power of two")
        return nbytes <= self._block_size(self._block_of(offset))

    def roundup(self, n: int) -> int:
        """Round a request size up to the allocation size it would get."""
        if n < 1 or n > MAX_ALLOC_SIZE:
            raise ValueError(f"request size out of range: {n}")
        full = self._atom
        while full < n:
            full <<= 1
        return full

    def max_free_block(self) -> int:
        """Size in bytes of the largest free block, or 0."""
        with self._guard():
            for log in range(LOGMAX, -1, -1):
                if self._freelist[log] != -1:
                    return (1 << log) * self._atom
        return 0

    def free_memory(self) -> int:
        """Total free bytes over all free lists."""
        total = 0
        with self._guard():
            for log, head in enumerate(self._freelist):
                index = head
                while index != -1:
                    total += 1 << log
                    index = self._next[index]
        return total * self._atom

    def view(self, offset: int, length: int | None = None) -> memoryview:
        """A writable view of the allocated block at ``offset``."""
        size = self._block_size(self._block_of(offset))
        if length is None:
            length = size
        if length < 0 or length > size:
            raise ValueError(f"length {length} outside block of {size} bytes")
        return memoryview(self._data)[offset:offset + length]

    def stats(self) -> PoolStats:
        """A snapshot of the allocation statistics."""
        return replace(self._stats)

    def print_stats(self, puts: Callable[[str], Any]) -> None:
        """Pass one line per statistic to ``puts``."""
        s = self._stats
        lines = (
            f"Total number of calls to malloc: {s.n_alloc & _U32}",
            "Total of all malloc calls - includes internal fragmentation: "
            f"{s.total_alloc & _U32}",
            f"Total internal fragmentation: {s.total_excess & _U32}",
            f"Current checkout, including internal fragmentation: {s.current_out}",
            f"Current number of distinct checkouts: {s.current_count}",
            f"Maximum instantaneous currentOut: {s.max_out}",
            f"Maximum instantaneous currentCount: {s.max_count}",
            f"Largest allocation (exclusive of internal frag): {s.max_request}",
        )
        for line in lines:
            puts(line)