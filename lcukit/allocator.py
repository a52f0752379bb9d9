"""Allocation helpers that record their blocks with an allocation tracker."""

from __future__ import annotations

from lcukit.tracker import Allocation, AllocationTracker

ALLOCATOR_ID = 99
REALLOC_SLACK = 2048
"""Extra bytes handed out on growth to cut down repeated reallocations."""


class Allocator:
    """malloc-style allocator producing :class:`Allocation` blocks.

    With a tracker every block is recorded and checked on free; with
    ``tracker=None`` blocks are handed out untracked.
    """

    def __init__(self, tracker: AllocationTracker | None = None) -> None:
        self.tracker = tracker

    def _new(
        self, size: int, file_path: str | None, func_name: str | None, file_line: int
    ) -> Allocation:
        if size < 0:
            raise ValueError("size must not be negative")
        if self.tracker is None:
            return Allocation(ALLOCATOR_ID, size, file_path or "", func_name or "", file_line)
        return self.tracker.notify_alloc(ALLOCATOR_ID, size, file_path, func_name, file_line)

    def malloc(
        self,
        size: int,
        file_path: str | None = None,
        func_name: str | None = None,
        file_line: int = -1,
    ) -> Allocation:
        """Allocate ``size`` bytes."""
        return self._new(size, file_path, func_name, file_line)

    def calloc(
        self,
        count: int,
        item_size: int,
        file_path: str | None = None,
        func_name: str | None = None,
        file_line: int = -1,
    ) -> Allocation:
        """Allocate ``count * item_size`` zeroed bytes."""
        if count < 0 or item_size < 0:
            raise ValueError("count and item_size must not be negative")
        allocation = self._new(count * item_size, file_path, func_name, file_line)
        allocation.data[:] = bytes(allocation.size)
        return allocation

    def _size_of(self, allocation: Allocation) -> int:
        if self.tracker is None:
            return allocation.size
        return self.tracker.size_of(ALLOCATOR_ID, allocation)

    def realloc(
        self,
        allocation: Allocation | None,
        size: int,
        file_path: str | None = None,
        func_name: str | None = None,
        file_line: int = -1,
    ) -> Allocation | None:
        """Grow ``allocation`` to hold ``size`` bytes.

        A size of 0 frees the block and returns None. A block already large
        enough is returned as is; otherwise a larger one is made, the old
        content copied over and the old block freed.
        """
        if size < 0:
            raise ValueError("size must not be negative")
        if size == 0:
            self.free(allocation)
            return None
        if allocation is None:
            return self._new(size + REALLOC_SLACK, file_path, func_name, file_line)
        current = self._size_of(allocation)
        if current and size <= current:
            return allocation
        new = self._new(size + REALLOC_SLACK, file_path, func_name, file_line)
        new.data[:current] = allocation.data[:current]
        self.free(allocation)
        return new

    def strdup(
        self,
        text: str,
        file_path: str | None = None,
        func_name: str | None = None,
        file_line: int = -1,
    ) -> Allocation:
        """Copy ``text`` as UTF-8 followed by a NUL terminator."""
        return self.strndup(text, None, file_path, func_name, file_line)

    def strndup(
        self,
        text: str,
        length: int | None,
        file_path: str | None = None,
        func_name: str | None = None,
        file_line: int = -1,
    ) -> Allocation:
        """Copy at most ``length`` bytes of ``text`` (UTF-8) plus a NUL terminator."""
        raw = text.encode("utf-8")
        if length is not None:
            if length < 0:
                raise ValueError("length must not be negative")
            raw = raw[:length]
        allocation = self._new(len(raw) + 1, file_path, func_name, file_line)
        allocation.data[:len(raw)] = raw
        allocation.data[len(raw)] = 0
        return allocation

    def free(self, allocation: Allocation | None) -> None:
        """Release ``allocation``; ``None`` is ignored."""
        if allocation is None:
            return
        if self.tracker is None:
            allocation.freed = True
            return
        self.tracker.notify_free(ALLOCATOR_ID, allocation)