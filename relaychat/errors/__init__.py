"""Error hierarchy and handling helpers."""

from .internal import (  # noqa: F401
    ConfigError,
    InvalidIntentError,
    InvalidOperationError,
    LineBufferOverflowError,
    RelayChatError,
    TransportError,
)

__all__ = [
    "RelayChatError",
    "TransportError",
    "InvalidOperationError",
    "InvalidIntentError",
    "LineBufferOverflowError",
    "ConfigError",
]
