"""A growable string builder with doubling capacity."""

from __future__ import annotations

DEFAULT_CAPACITY = 128


class StringBuilder:
    """Accumulates text; capacity doubles whenever more room is needed."""

    def __init__(self, initial_capacity: int = 0) -> None:
        if initial_capacity < 2:
            initial_capacity = DEFAULT_CAPACITY
        self._capacity = initial_capacity
        self._parts: list[str] = []
        self._length = 0

    def _ensure_space(self, extra: int) -> None:
        needed = self._length + extra + 1
        while self._capacity < needed:
            self._capacity <<= 1

    def _push(self, text: str) -> StringBuilder:
        self._ensure_space(len(text))
        self._parts.append(text)
        self._length += len(text)
        return self

    def append_char(self, char: str) -> StringBuilder:
        """Append a single character."""
        if len(char) != 1:
            raise ValueError("append_char expects exactly one character")
        return self._push(char)

    def append(self, text: str, length: int = 0) -> StringBuilder:
        """Append ``text``, or only its first ``length`` characters when non-zero."""
        if length < 0:
            raise ValueError("length must not be negative")
        if length:
            text = text[:length]
        if not text:
            raise ValueError("nothing to append")
        return self._push(text)

    def append_format(self, fmt: str, *args: object) -> StringBuilder:
        """Append the printf-style rendering of ``fmt`` with ``args``."""
        text = fmt % args if args else fmt
        if not text:
            raise ValueError("formatted text is empty")
        return self._push(text)

    def clear(self) -> None:
        """Drop the content; the capacity is kept."""
        self._parts.clear()
        self._length = 0

    def capacity(self) -> int:
        """Current buffer size, including room for a terminator."""
        return self._capacity

    def __len__(self) -> int:
        return self._length

    def __str__(self) -> str:
        if len(self._parts) > 1:
            self._parts = ["".join(self._parts)]
        return self._parts[0] if self._parts else ""