"""
Xorshift pseudo-random stream used to draw candidate prefixes.

The generator keeps 64 words of 64-bit state and a rotating index
(xorshift1024 with a multiplicative output scrambler). Production
instances are seeded from the OS CSPRNG; tests inject a fixed state to
reproduce a trace bit for bit.
"""

import secrets
import struct
from typing import Sequence

from .exceptions import SizeMismatchError

STATE_WORDS = 64
SEED_SIZE = STATE_WORDS * 8  # 512 bytes
PREFIX_SIZE = 64
PREFIX_WORDS = PREFIX_SIZE // 4

MULTIPLIER = 8372773778140471301

_MASK64 = 0xFFFFFFFFFFFFFFFF
_MASK32 = 0xFFFFFFFF

_SEED_STRUCT = struct.Struct(f"<{STATE_WORDS}Q")
_PREFIX_STRUCT = struct.Struct(f"<{PREFIX_WORDS}I")


class RandomStream:
    """Seedable 64-bit word generator. Not thread-safe; one per search."""

    __slots__ = ("_state", "_p")

    def __init__(self) -> None:
        self._load(_SEED_STRUCT.unpack(secrets.token_bytes(SEED_SIZE)))

    @classmethod
    def from_state(cls, words: Sequence[int]) -> "RandomStream":
        """Build a stream from 64 explicit state words (tests only)."""
        if len(words) != STATE_WORDS:
            raise SizeMismatchError("state", STATE_WORDS, len(words))

        stream = cls.__new__(cls)
        stream._load(words)
        return stream

    @classmethod
    def from_seed(cls, seed: bytes) -> "RandomStream":
        """Build a stream from 512 seed bytes laid out like the OS seed."""
        if len(seed) != SEED_SIZE:
            raise SizeMismatchError("seed", SEED_SIZE, len(seed))
        return cls.from_state(_SEED_STRUCT.unpack(seed))

    def _load(self, words: Sequence[int]) -> None:
        self._state = [w & _MASK64 for w in words]
        self._p = 0

    def next(self) -> int:
        """Return the next 64-bit word."""
        s = self._state

        s0 = s[self._p]
        self._p = (self._p + 1) & (STATE_WORDS - 1)
        s1 = s[self._p]

        s1 ^= (s1 << 25) & _MASK64
        s1 ^= s1 >> 3
        s0 ^= s0 >> 49

        s[self._p] = s0 ^ s1
        return (s[self._p] * MULTIPLIER) & _MASK64

    def next_prefix(self) -> bytes:
        """
        Return a fresh 64-byte prefix.

        Each of 16 words contributes only its low 32 bits, written
        little-endian in call order.
        """
        return _PREFIX_STRUCT.pack(*[self.next() & _MASK32 for _ in range(PREFIX_WORDS)])
