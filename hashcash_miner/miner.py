"""
Payload stamping on top of hashcash1.

A Miner reduces an arbitrary payload to a 64-byte challenge (SHA-512 of
its bytes) and mines a Cash for it. Anyone holding the payload can then
score the Cash with `Miner.verify`.
"""

import hashlib
import secrets
from enum import Enum
from typing import Any, BinaryIO, Optional, Union

import structlog
from pydantic import BaseModel, field_serializer, field_validator

from . import hashcash1
from .hexcodec import decode_hex, encode_hex

logger = structlog.get_logger()

Payload = Union[bytes, BinaryIO]

_CHUNK_SIZE = 64 * 1024


class CashAlgorithm(str, Enum):
    """Proof-of-work algorithms a Cash can carry."""

    VERSION1 = "Version1"


class Cash(BaseModel):
    """A mined key tagged with the algorithm that produced it."""

    model_config = {"frozen": True}

    algorithm: CashAlgorithm = CashAlgorithm.VERSION1
    key: bytes

    @field_validator("key", mode="before")
    @classmethod
    def parse_key(cls, value: Any) -> Any:
        """Accept the key as hex text or raw bytes of the right length."""
        if isinstance(value, str):
            value = decode_hex(value)
        if isinstance(value, (bytes, bytearray)) and len(value) != hashcash1.KEY_SIZE:
            raise ValueError(f"key must be {hashcash1.KEY_SIZE} bytes, got {len(value)}")
        return value

    @field_serializer("key")
    def serialize_key(self, key: bytes) -> str:
        return encode_hex(key)


def payload_challenge(payload: Payload) -> bytes:
    """SHA-512 of the payload bytes, read in chunks for streams."""
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return hashlib.sha512(payload).digest()

    hasher = hashlib.sha512()
    for chunk in iter(lambda: payload.read(_CHUNK_SIZE), b""):
        hasher.update(chunk)
    return hasher.digest()


class Miner:
    """Mines Cash for payloads with a fixed algorithm, limit and time budget."""

    def __init__(
        self,
        algorithm: CashAlgorithm = CashAlgorithm.VERSION1,
        limit: int = -1,
        computation_time: float = 10,
    ):
        self.algorithm = algorithm
        self.limit = limit
        self.computation_time = computation_time

    def create(self, payload: Payload) -> Optional[Cash]:
        """
        Mine a Cash for `payload`.

        Returns None when mining is disabled (limit 0 or no time budget).
        """
        if self.limit == 0 or self.computation_time <= 0:
            logger.info("mining_disabled", limit=self.limit, computation_time=self.computation_time)
            return None

        challenge = payload_challenge(payload)
        key = hashcash1.create(challenge, self.computation_time, self.limit)
        cash = Cash(algorithm=self.algorithm, key=key)

        logger.info(
            "cash_created",
            algorithm=cash.algorithm.value,
            computation_time=self.computation_time,
            key=encode_hex(key),
        )

        return cash

    @staticmethod
    def verify(cash: Optional[Cash], payload: Payload) -> int:
        """Score `cash` against `payload`. A missing Cash scores 0."""
        if cash is None:
            return 0

        return hashcash1.verify(cash.key, payload_challenge(payload))


def sample(computation_time: float) -> int:
    """Mine a random 32-byte payload and return the score reached."""
    miner = Miner(CashAlgorithm.VERSION1, -1, computation_time)
    payload = secrets.token_bytes(32)

    return Miner.verify(miner.create(payload), payload)
