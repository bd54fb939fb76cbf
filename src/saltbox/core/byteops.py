"""Byte buffer helpers used by the MAC, KDF and store code."""

import re
from typing import Optional

from .exceptions import InvalidParameterError, LengthMismatchError

_HEX_PAIRS = re.compile(r"(?:[0-9a-fA-F]{2})*")
_HEX_TOKEN = re.compile(r"[0-9a-fA-F]{1,2}")


def compare(a: Optional[bytes], b: Optional[bytes]) -> bool:
    """Return True when both buffers hold the same bytes.

    Two ``None`` values compare equal; ``None`` never equals a buffer.
    Lengths are checked before any indexing.
    """
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    if len(a) != len(b):
        return False
    for x, y in zip(a, b):
        if x != y:
            return False
    return True


def xor(a: bytearray, b: bytes) -> bytearray:
    """XOR every byte of ``b`` into ``a``. Modifies and returns ``a``."""
    if len(a) != len(b):
        raise LengthMismatchError(f"buffers differ in length ({len(a)} != {len(b)})")
    for i in range(len(a)):
        a[i] ^= b[i]
    return a


def concat(a: bytes, b: bytes, *more: bytes) -> bytes:
    """Return a new buffer holding the operands in order."""
    buf = bytearray(a)
    buf += b
    for part in more:
        buf += part
    return bytes(buf)


def reverse(a: bytearray) -> bytearray:
    """Reverse byte order in place and return the same buffer."""
    i, n = 0, len(a) - 1
    while i < n:
        a[i], a[n] = a[n], a[i]
        i += 1
        n -= 1
    return a


def hex_to_bytes(text: str, delim: Optional[str] = None) -> bytes:
    """
    Convert a hex string to bytes.

    Without ``delim`` the string must be contiguous hex digits of even length
    (``"0b0b0b"``). With ``delim`` every token between delimiters is one byte
    (``"0c 60 c8"`` with ``delim=" "``).
    """
    if delim is not None:
        tokens = text.split(delim)
        for tok in tokens:
            if not _HEX_TOKEN.fullmatch(tok):
                raise InvalidParameterError(f"invalid hex byte {tok!r} in {text!r}")
        return bytes(int(tok, 16) for tok in tokens)

    if len(text) % 2 != 0:
        raise InvalidParameterError("hex string length must be even")
    # bytes.fromhex would skip whitespace
    if not _HEX_PAIRS.fullmatch(text):
        raise InvalidParameterError(f"invalid hex string {text!r}")
    return bytes.fromhex(text)


def is_valid_hex(text: str, delim: Optional[str] = None) -> bool:
    try:
        hex_to_bytes(text, delim)
    except InvalidParameterError:
        return False
    return True
