"""Delimited ``key=value`` parameter strings."""

from __future__ import annotations

import logging
import re

_logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = ";"

_LONG_MIN = -(1 << 63)
_LONG_MAX = (1 << 63) - 1

_INT_RE = re.compile(
    r"\s*(?P<sign>[+-]?)(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<oct>0[0-7]*)|(?P<dec>[1-9][0-9]*))"
)
_FLOAT_RE = re.compile(
    r"\s*(?P<sign>[+-]?)(?:"
    r"(?P<hex>0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)(?:[pP][+-]?[0-9]+)?)"
    r"|(?P<dec>(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
    r"|(?P<inf>[iI][nN][fF](?:[iI][nN][iI][tT][yY])?)"
    r"|(?P<nan>[nN][aA][nN](?:\([0-9A-Za-z_]*\))?)"
    r")"
)


def _parse_long(text: str) -> int:
    """Parse like ``strtol`` with base 0, rejecting empty or trailing text."""
    match = _INT_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"not an integer: {text!r}")
    if match["hex"] is not None:
        value = int(match["hex"], 16)
    elif match["oct"] is not None:
        value = int(match["oct"], 8)
    else:
        value = int(match["dec"], 10)
    if match["sign"] == "-":
        value = -value
    return max(_LONG_MIN, min(_LONG_MAX, value))


def _parse_double(text: str) -> float:
    """Parse like ``strtod``, rejecting empty or trailing text."""
    match = _FLOAT_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"not a number: {text!r}")
    sign = match["sign"]
    if match["hex"] is not None:
        return float.fromhex(sign + match["hex"])
    if match["dec"] is not None:
        return float(sign + match["dec"])
    if match["inf"] is not None:
        return float(sign + "inf")
    return float("nan")


class StrParams:
    """A mapping of string keys to string values with a one-character delimiter."""

    def __init__(self, delimiter: str | None = None) -> None:
        if delimiter is None:
            delimiter = DEFAULT_DELIMITER
        self.delimiter = delimiter[:1]
        self._items: dict[str, str] = {}

    @classmethod
    def parse(cls, text: str, delimiter: str | None = None) -> StrParams:
        """Build parameters from ``text`` such as ``"a=1;b=2"``.

        Empty pairs and pairs starting with ``=`` are skipped; a pair with no
        ``=`` gets an empty value. A later pair replaces an earlier one.
        """
        params = cls(delimiter)
        pairs = text.split(params.delimiter) if params.delimiter else [text]
        for pair in pairs:
            if not pair or pair.startswith("="):
                continue
            key, _, value = pair.partition("=")
            params._items[key] = value
        return params

    def remove(self, key: str) -> None:
        """Delete ``key``; a missing key is ignored."""
        self._items.pop(key, None)

    def add_str(self, key: str, value: str) -> None:
        """Set ``key`` to ``value``, replacing any previous value."""
        self._items[key] = value

    def add_int(self, key: str, value: int) -> None:
        """Set ``key`` to the decimal form of ``value``."""
        if not _LONG_MIN <= value <= _LONG_MAX:
            raise OverflowError(f"integer out of range: {value}")
        self._items[key] = "%d" % value

    def add_float(self, key: str, value: float) -> None:
        """Set ``key`` to ``value`` written with ten decimal places."""
        self._items[key] = "%.10f" % value

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def get_str(self, key: str) -> str:
        """Return the value of ``key``; raise KeyError if it is absent."""
        return self._items[key]

    def get_int(self, key: str) -> int:
        """Return the value of ``key`` as an integer (``0x`` hex and ``0`` octal accepted)."""
        return _parse_long(self._items[key])

    def get_float(self, key: str) -> float:
        """Return the value of ``key`` as a float."""
        return _parse_double(self._items[key])

    def to_string(self) -> str:
        """Join all pairs as ``key=value`` with the delimiter."""
        return self.delimiter.join(f"{key}={value}" for key, value in self._items.items())

    def dump(self) -> None:
        """Log every pair at info level."""
        for key, value in self._items.items():
            _logger.info('key="%s", value="%s"', key, value)