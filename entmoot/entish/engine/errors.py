"""Exceptions raised by the Entish engine."""


class EngineError(Exception):
    """Raised for malformed facts, type mismatches and unbound variables."""


class UnsupportedFunctionError(EngineError):
    """Raised when a function is reserved but not implemented, or unknown."""


class ClaimFailure(EngineError):
    """Raised by a strict interpreter when a claim cannot be verified."""

    def __init__(self, claim):
        super().__init__(f"unable to verify {claim!r}")
        self.claim = claim


class SourceError(EngineError):
    """Raised when rule text cannot be read from a file."""
