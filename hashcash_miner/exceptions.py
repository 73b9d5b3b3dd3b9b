"""
Error types raised by hashcash-miner.
"""


class HashcashError(Exception):
    """Base class for all hashcash-miner errors."""


class InputFormatError(HashcashError, ValueError):
    """Hex text contains characters outside [0-9a-fA-F]."""


class SizeMismatchError(HashcashError, ValueError):
    """A buffer does not have the length the protocol requires."""

    def __init__(self, name: str, expected: int, actual: int):
        super().__init__(f"{name} must be {expected} bytes, got {actual}")
        self.name = name
        self.expected = expected
        self.actual = actual


class ComputationFailure(HashcashError, RuntimeError):
    """The digest computation itself failed."""
