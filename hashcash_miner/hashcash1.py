"""
hashcash1 proof-of-work: timed best-prefix search and verification.

A key is a 64-byte prefix; its score against a 64-byte challenge is the
number of leading zero bits of SHA-512(key || challenge). `create` keeps
the smallest digest it finds before the deadline, `verify` recomputes the
score of a claimed key.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import structlog

from .exceptions import SizeMismatchError
from .scorer import digest, is_better, leading_zero_bits
from .xorshift import PREFIX_SIZE, RandomStream

logger = structlog.get_logger()

KEY_SIZE = PREFIX_SIZE
CHALLENGE_SIZE = 64


class PrefixSource(Protocol):
    """Anything that can hand out 64-byte candidate prefixes."""

    def next_prefix(self) -> bytes: ...


@dataclass
class SearchResult:
    """Outcome of one search."""

    key: bytes  # Best prefix found
    digest: bytes  # SHA-512(key || challenge)
    candidates: int  # Candidates evaluated, including the first
    improvements: int  # Times the incumbent was replaced
    elapsed: float  # Seconds spent searching

    @property
    def bits(self) -> int:
        """Leading zero bits of the best digest."""
        return leading_zero_bits(self.digest)


def _require_size(data: bytes, size: int, name: str) -> None:
    if len(data) != size:
        raise SizeMismatchError(name, size, len(data))


class ProofSearch:
    """
    Search for the prefix whose digest with `challenge` is smallest.

    The deadline is polled once per candidate, so a search overshoots its
    budget by at most one hash.
    """

    def __init__(
        self,
        challenge: bytes,
        timeout_seconds: float,
        source: Optional[PrefixSource] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        _require_size(challenge, CHALLENGE_SIZE, "challenge")

        self.challenge = bytes(challenge)
        self.timeout_seconds = max(timeout_seconds, 0)
        self.source = source if source is not None else RandomStream()
        self.clock = clock

    def _evaluate(self) -> tuple[bytes, bytes]:
        prefix = self.source.next_prefix()
        _require_size(prefix, KEY_SIZE, "prefix")
        return prefix, digest(prefix + self.challenge)

    def run(self) -> SearchResult:
        """Run until the deadline and return the best candidate seen."""
        best_prefix, best_digest = self._evaluate()
        candidates = 1
        improvements = 0

        start = self.clock()
        deadline = start + self.timeout_seconds

        while self.clock() < deadline:
            prefix, candidate_digest = self._evaluate()
            candidates += 1

            if is_better(candidate_digest, best_digest):
                best_prefix, best_digest = prefix, candidate_digest
                improvements += 1

        result = SearchResult(
            key=best_prefix,
            digest=best_digest,
            candidates=candidates,
            improvements=improvements,
            elapsed=self.clock() - start,
        )

        logger.debug(
            "search_completed",
            candidates=result.candidates,
            improvements=result.improvements,
            elapsed=round(result.elapsed, 3),
            bits=result.bits,
        )

        return result


def create(
    challenge: bytes,
    timeout_seconds: float,
    limit: int = -1,
    source: Optional[PrefixSource] = None,
) -> bytes:
    """
    Return the best 64-byte key found for `challenge` within the budget.

    `limit` is the caller's target difficulty. It is accepted for
    compatibility with existing callers and does not stop the search early.
    """
    return ProofSearch(challenge, timeout_seconds, source=source).run().key


def verify(key: bytes, challenge: bytes) -> int:
    """Leading zero bits of SHA-512(key || challenge)."""
    _require_size(key, KEY_SIZE, "key")
    _require_size(challenge, CHALLENGE_SIZE, "challenge")

    return leading_zero_bits(digest(key + challenge))
