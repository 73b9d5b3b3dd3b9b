"""
hashcash-miner

Hashcash-style proof of work over SHA-512. `create` spends a time budget
looking for the 64-byte key whose digest with a 64-byte challenge is
smallest; `verify` reports how many leading zero bits that digest has.

Usage:
    # Search for 10 seconds (the limit argument is accepted and ignored)
    hashcash-miner hashcash1 create <challenge-hex> -1 10

    # Score a key
    hashcash-miner hashcash1 verify <key-hex> <challenge-hex>

    # Stamp a file and check the stamp later
    hashcash-miner mine payload.bin > cash.json
    hashcash-miner check payload.bin "$(cat cash.json)"
"""

__version__ = "0.1.0"

from .exceptions import (
    ComputationFailure,
    HashcashError,
    InputFormatError,
    SizeMismatchError,
)
from .hashcash1 import ProofSearch, SearchResult, create, verify
from .miner import Cash, CashAlgorithm, Miner, sample
from .xorshift import RandomStream

__all__ = [
    "__version__",
    "ComputationFailure",
    "HashcashError",
    "InputFormatError",
    "SizeMismatchError",
    "ProofSearch",
    "SearchResult",
    "create",
    "verify",
    "Cash",
    "CashAlgorithm",
    "Miner",
    "sample",
    "RandomStream",
]
