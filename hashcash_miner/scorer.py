"""
Digest and scoring primitives for hashcash1.
"""

import hashlib

from .exceptions import ComputationFailure

DIGEST_SIZE = 64


def digest(data: bytes) -> bytes:
    """SHA-512 of `data` (64 bytes)."""
    try:
        return hashlib.sha512(data).digest()
    except Exception as e:
        raise ComputationFailure(f"SHA-512 computation failed: {e}") from e


def leading_zero_bits(value: bytes) -> int:
    """
    Count zero bits from the most significant bit of `value[0]`.

    Returns 8 * len(value) (512 for a digest) when every bit is zero.
    """
    return len(value) * 8 - int.from_bytes(value, "big").bit_length()


def is_better(candidate: bytes, incumbent: bytes) -> bool:
    """
    True if `candidate` is strictly smaller as a big-endian unsigned integer.

    Both digests have the same length, so this is plain unsigned
    lexicographic byte order. Equal digests keep the incumbent.
    """
    return candidate < incumbent
