"""Centralized internal error hierarchy.

Protocol-level tolerance never raises: malformed inbound lines degrade to
empty fields or are dropped. Only the failures below reach callers.

Classes:
  RelayChatError           – Base for all client errors.
  TransportError           – Connection refused, reset or I/O failure.
  InvalidOperationError    – Lifecycle misuse, e.g. sending while disconnected.
  InvalidIntentError       – Outbound intent field that cannot be put on the wire.
  LineBufferOverflowError  – Unterminated inbound data exceeded the buffer cap.
  ConfigError              – Configuration file or values could not be used.
"""

from __future__ import annotations

from collections.abc import Mapping


class RelayChatError(Exception):
    """Base class for all client errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class TransportError(RelayChatError):
    """Exception raised for network or transport layer errors.

    Surfaced to subscribers as a ``ConnectionFailure`` event; the core never
    retries, callers decide.
    """


class InvalidOperationError(RelayChatError):
    """Exception raised when an operation is not valid in the current state.

    Issuing an outbound intent while not connected is a caller logic error, so
    it is rejected locally before anything touches the wire.
    """


class InvalidIntentError(RelayChatError, ValueError):
    """Exception raised when an intent field cannot be serialized safely."""


class LineBufferOverflowError(RelayChatError):
    """Exception raised when the line reassembly buffer exceeds its cap."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"Line buffer overflow: {size} bytes without terminator (limit {limit})",
            data={"size": size, "limit": limit},
        )


class ConfigError(RelayChatError):
    """Exception raised for unreadable or invalid configuration."""


__all__ = [
    "RelayChatError",
    "TransportError",
    "InvalidOperationError",
    "InvalidIntentError",
    "LineBufferOverflowError",
    "ConfigError",
]
