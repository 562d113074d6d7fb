"""Decoding of backslash escapes inside quoted string literals."""

from __future__ import annotations

import string
from typing import Iterator

_HEX_DIGITS = frozenset(string.hexdigits)

_SIMPLE_ESCAPES = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


class UnescapeError(ValueError):
    """Raised when a string literal holds a malformed escape sequence."""


def _read_hex(chars: Iterator[str], count: int, shift: int) -> int:
    value = 0
    for _ in range(count):
        ch = next(chars, None)
        if ch is None or ch not in _HEX_DIGITS:
            raise UnescapeError("expected hexadecimal digit in escape sequence")
        value = (value << shift) | int(ch, 16)
    return value


def _decode_unicode(chars: Iterator[str]) -> str:
    high = _read_hex(chars, 4, 4)
    if 0xDC00 <= high <= 0xDFFF:
        raise UnescapeError("unpaired low surrogate in \\u escape")
    if not 0xD800 <= high <= 0xDBFF:
        return chr(high)
    if next(chars, None) != "\\" or next(chars, None) != "u":
        raise UnescapeError("high surrogate must be followed by a \\u escape")
    low = _read_hex(chars, 4, 4)
    if not 0xDC00 <= low <= 0xDFFF:
        raise UnescapeError("high surrogate must be followed by a low surrogate")
    return chr((((high - 0xD800) << 10) | (low - 0xDC00)) + 0x10000)


def unescape(text: str) -> str:
    """Return ``text`` with its escape sequences decoded."""
    chars = iter(text)
    out: list[str] = []
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        kind = next(chars, None)
        if kind is None:
            raise UnescapeError("dangling backslash at end of string")
        if kind in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[kind])
        elif kind == "u":
            out.append(_decode_unicode(chars))
        elif kind == "x":
            out.append(chr(_read_hex(chars, 2, 8)))
        else:
            raise UnescapeError(f"unknown escape sequence \\{kind}")
    return "".join(out)