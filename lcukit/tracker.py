"""Bookkeeping for live allocations, with canaries that reveal buffer overruns."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

_logger = logging.getLogger(__name__)

CANARY = b"tinybird"
"""Guard bytes written on both sides of every tracked allocation."""

MAX_FILE_PATH_LEN = 128
MAX_FUNCTION_NAME_LEN = 32


class TrackingError(Exception):
    """An allocation was freed or queried in a way the tracker does not allow."""


class MemoryCorruptionError(Exception):
    """The guard bytes around an allocation have been overwritten."""


def _truncate(text: str | None, limit: int) -> str:
    return "" if text is None else text[: limit - 1]


@dataclass(eq=False)
class Allocation:
    """A block of ``size`` usable bytes surrounded by canaries.

    ``buffer`` holds the whole block, canaries included; ``data`` is a
    writable view of the usable region only.
    """

    allocator_id: int
    size: int
    file_path: str = ""
    func_name: str = ""
    file_line: int = -1
    freed: bool = False
    buffer: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.size < 0:
            raise ValueError("size must not be negative")
        self.file_path = _truncate(self.file_path, MAX_FILE_PATH_LEN)
        self.func_name = _truncate(self.func_name, MAX_FUNCTION_NAME_LEN)
        self.buffer = bytearray(CANARY) + bytearray(self.size) + bytearray(CANARY)

    @property
    def data(self) -> memoryview:
        """Writable view of the usable bytes."""
        return memoryview(self.buffer)[len(CANARY):len(CANARY) + self.size]

    def tobytes(self) -> bytes:
        """A copy of the usable bytes."""
        return bytes(self.data)

    def canaries_intact(self) -> bool:
        """True when both guard regions still hold the canary."""
        width = len(CANARY)
        return (
            self.buffer[:width] == CANARY
            and self.buffer[width + self.size:width * 2 + self.size] == CANARY
        )


def _check_corruption(allocation: Allocation) -> None:
    if not allocation.canaries_intact():
        _logger.critical(
            "detect corrupted memory at '%s' (%s:%d), size: %d bytes",
            allocation.func_name,
            allocation.file_path,
            allocation.file_line,
            allocation.size,
        )
        raise MemoryCorruptionError(
            f"corrupted memory at '{allocation.func_name}' "
            f"({allocation.file_path}:{allocation.file_line}), size {allocation.size}"
        )


class AllocationTracker:
    """Records every live allocation until it is freed. Thread safe."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._live: dict[Allocation, None] = {}

    def reset(self) -> None:
        """Forget every recorded allocation."""
        with self._lock:
            self._live.clear()

    def notify_alloc(
        self,
        allocator_id: int,
        size: int,
        file_path: str | None = None,
        func_name: str | None = None,
        file_line: int = -1,
    ) -> Allocation:
        """Create and record a new allocation of ``size`` bytes."""
        allocation = Allocation(
            allocator_id,
            size,
            _truncate(file_path, MAX_FILE_PATH_LEN),
            _truncate(func_name, MAX_FUNCTION_NAME_LEN),
            file_line,
        )
        with self._lock:
            self._live[allocation] = None
        return allocation

    def _lookup(self, allocator_id: int, allocation: Allocation) -> Allocation:
        if allocation not in self._live:
            raise TrackingError("allocation is not tracked (never allocated or already freed)")
        if allocation.allocator_id != allocator_id:
            raise TrackingError(
                f"allocation belongs to allocator {allocation.allocator_id}, not {allocator_id}"
            )
        return allocation

    def notify_free(self, allocator_id: int, allocation: Allocation | None) -> None:
        """Check and forget ``allocation``; ``None`` is ignored."""
        if allocation is None:
            return
        with self._lock:
            self._lookup(allocator_id, allocation)
            if allocation.freed:
                raise TrackingError("double free")
            _check_corruption(allocation)
            allocation.freed = True
            del self._live[allocation]

    def size_of(self, allocator_id: int, allocation: Allocation | None) -> int:
        """Requested size of a live allocation; 0 for ``None``."""
        if allocation is None:
            return 0
        with self._lock:
            return self._lookup(allocator_id, allocation).size

    def expect_no_allocations(
        self, report: Callable[[Allocation], Any] | None = None
    ) -> int:
        """Report every unfreed allocation and return their total size in bytes.

        ``report`` is called with each leak; without it leaks are logged.
        """
        with self._lock:
            leaks = [a for a in self._live if not a.freed]
        total = 0
        for allocation in leaks:
            total += allocation.size
            _check_corruption(allocation)
            if report is not None:
                report(allocation)
            else:
                _logger.critical(
                    "found unfreed memory at '%s' (%s:%d), size: %d bytes",
                    allocation.func_name,
                    allocation.file_path,
                    allocation.file_line,
                    allocation.size,
                )
        return total