"""Small string helpers: replace, split, trim, UTF-8 length and hex dumps."""

from __future__ import annotations

from collections.abc import Iterator
from itertools import islice

_HEX_ENTRY_WIDTH = 3


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def str_replace(original: str, pattern: str, replacement: str) -> str:
    """Return ``original`` with every non-overlapping ``pattern`` replaced."""
    if not pattern:
        raise ValueError("pattern must not be empty")
    return original.replace(pattern, replacement)


def _tokens(text: str, delimiters: str) -> Iterator[str]:
    token: list[str] = []
    for ch in text:
        if ch in delimiters:
            if token:
                yield "".join(token)
                token = []
        else:
            token.append(ch)
    if token:
        yield "".join(token)


def str_split(text: str, delimiters: str, max_count: int | None = None) -> list[str]:
    """Split ``text`` on any character of ``delimiters``.

    Runs of delimiters count as one separator and empty tokens are dropped.
    At most ``max_count`` tokens are returned when it is given.
    """
    if max_count is not None and max_count < 0:
        raise ValueError("max_count must not be negative")
    return list(islice(_tokens(text, delimiters), max_count))


def str_trim(text: str, cset: str) -> str:
    """Remove characters found in ``cset`` from both ends of ``text``."""
    return text.strip(cset) if cset else text


def utf8_len(data: bytes | bytearray | memoryview | str, max_count: int | None = None) -> int:
    """Count UTF-8 code points, stopping at a NUL byte or after ``max_count`` bytes."""
    if max_count is not None and max_count < 0:
        raise ValueError("max_count must not be negative")
    count = 0
    for byte in islice(_as_bytes(data), max_count):
        if byte == 0:
            break
        if byte & 0xC0 != 0x80:
            count += 1
    return count


def hex_dump(data: bytes | bytearray | memoryview | str, capacity: int | None = None) -> str:
    """Render ``data`` as `` xx`` hex pairs.

    ``capacity`` is the size of the target buffer including its terminator.
    When the full dump would not fit, a ``hex truncated(N):`` prefix is written
    and only as many bytes as the buffer allows follow it.
    """
    raw = _as_bytes(data)
    if capacity is None:
        return "".join(f" {byte:02x}" for byte in raw)
    if capacity < _HEX_ENTRY_WIDTH:
        raise ValueError("capacity must be at least 3")
    prefix = ""
    shown = raw
    if len(raw) * _HEX_ENTRY_WIDTH >= capacity:
        prefix = f"hex truncated({len(raw)}):"
        shown = raw[: capacity // _HEX_ENTRY_WIDTH - 1]
    text = prefix + "".join(f" {byte:02x}" for byte in shown)
    return text[: capacity - 2]