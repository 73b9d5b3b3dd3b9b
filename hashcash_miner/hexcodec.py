"""
Hex encoding used on the command line.
"""

import re

from .exceptions import InputFormatError, SizeMismatchError

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def encode_hex(data: bytes) -> str:
    """Lowercase hex, two digits per byte, byte order preserved."""
    return data.hex()


def decode_hex(text: str) -> bytes:
    """
    Decode case-insensitive hex text into bytes.

    An odd-length string is treated as if it had a leading "0" nibble,
    so "abc" decodes to b"\\x0a\\xbc".
    """
    if not _HEX_RE.fullmatch(text):
        raise InputFormatError(f"Invalid hex string: {text!r}")

    if len(text) % 2 != 0:
        text = "0" + text

    return bytes.fromhex(text)


def decode_fixed(text: str, size: int, name: str) -> bytes:
    """Decode hex text that must yield exactly `size` bytes."""
    data = decode_hex(text)
    if len(data) != size:
        raise SizeMismatchError(name, size, len(data))
    return data
