"""Form-style URL encoding and decoding with bounded output."""

from __future__ import annotations

_HEX = "0123456789ABCDEF"
_UNRESERVED = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789.-*_"
)


class UrlCodecError(ValueError):
    """Raised when data cannot be encoded or decoded."""


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def url_encode(data: bytes | bytearray | memoryview | str, max_size: int | None = None) -> str:
    """Encode ``data``; space becomes ``+`` and other reserved bytes ``%XX``.

    ``max_size`` is the output buffer size including its terminator; the
    encoded text must fit in it entirely.
    """
    raw = _as_bytes(data)
    if not raw:
        raise UrlCodecError("nothing to encode")
    if max_size is not None and max_size < 2:
        raise UrlCodecError("output size must be at least 2")
    limit = None if max_size is None else max_size - 1
    out: list[str] = []
    length = 0
    for byte in raw:
        if limit is not None and length >= limit:
            raise UrlCodecError("encoded text does not fit")
        if byte in _UNRESERVED:
            out.append(chr(byte))
            length += 1
        elif byte == 0x20:
            out.append("+")
            length += 1
        else:
            if limit is not None and length + 3 > limit:
                raise UrlCodecError("no room for escape sequence")
            out.append("%" + _HEX[byte >> 4] + _HEX[byte & 0xF])
            length += 3
    return "".join(out)


def _hex_value(byte: int) -> int:
    ch = chr(byte)
    if ch in "0123456789abcdefABCDEF":
        return int(ch, 16)
    raise UrlCodecError(f"invalid hex digit {ch!r}")


def url_decode(
    data: bytes | bytearray | memoryview | str, max_size: int | None = None
) -> tuple[bytes, int]:
    """Decode ``data`` and return ``(decoded, consumed)``.

    Decoding stops early at an incomplete ``%`` escape or when ``max_size - 1``
    bytes have been produced; ``consumed`` is the number of input bytes used.
    """
    raw = _as_bytes(data)
    if not raw:
        raise UrlCodecError("nothing to decode")
    if max_size is not None and max_size < 2:
        raise UrlCodecError("output size must be at least 2")
    limit = None if max_size is None else max_size - 1
    out = bytearray()
    pos = 0
    while pos < len(raw) and (limit is None or len(out) < limit):
        byte = raw[pos]
        if byte == ord("+"):
            out.append(0x20)
            pos += 1
        elif byte == ord("%"):
            if pos + 3 > len(raw):
                break
            out.append((_hex_value(raw[pos + 1]) << 4) | _hex_value(raw[pos + 2]))
            pos += 3
        elif byte in _UNRESERVED:
            out.append(byte)
            pos += 1
        else:
            raise UrlCodecError(f"invalid character {chr(byte)!r}")
    return bytes(out), pos