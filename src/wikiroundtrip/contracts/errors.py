"""Exception hierarchy shared across subsystem boundaries.

Every error raised deliberately by wikiroundtrip derives from RoundTripError,
so callers at the CLI boundary can separate expected failures from bugs.
"""

from typing import Any


class RoundTripError(Exception):
    """Base class for all wikiroundtrip errors."""


class MalformedTokenError(RoundTripError):
    """Raised when a payload cannot be decoded into a token.

    Attributes:
        payload: The decoded JSON value that was rejected
        reason: Human-readable description of what was wrong
    """

    def __init__(self, payload: Any, reason: str) -> None:
        self.payload = payload
        self.reason = reason
        super().__init__(f"Malformed token ({reason}): {payload!r}")


class TransformerStateError(RoundTripError):
    """Raised when a transformer is used before its state was initialized."""

    def __init__(self, transformer_name: str, message: str) -> None:
        self.transformer_name = transformer_name
        super().__init__(f"{transformer_name}: {message}")


class UnknownTransformerError(RoundTripError):
    """Raised when a transformer name is not in the registered catalogue."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(f"Unknown transformer '{name}'. Available: {', '.join(sorted(available))}")


class TranscriptError(RoundTripError):
    """Raised when a transcript file cannot be read."""


class SiteConfigError(RoundTripError):
    """Raised when site configuration is invalid or cannot be loaded."""
