"""
Configuration constants for the relaychat IRC client

This module contains the tunable constants used throughout the client.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Same contract as ``_get_env_int`` for floating point values.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Server defaults
DEFAULT_HOST = os.getenv("RELAYCHAT_DEFAULT_HOST", "irc.libera.chat")
DEFAULT_PORT = _get_env_int("RELAYCHAT_DEFAULT_PORT", 6667)  # Cleartext IRC
DEFAULT_NICKNAME = os.getenv("RELAYCHAT_DEFAULT_NICK", "RelayChatUser")
DEFAULT_QUIT_MESSAGE = os.getenv("RELAYCHAT_QUIT_MESSAGE", "Leaving")

# Network constants
CONNECT_TIMEOUT_SECONDS = _get_env_float(
    "CONNECT_TIMEOUT_SECONDS", 15.0
)  # Upper bound for opening the TCP stream
READ_CHUNK_SIZE = _get_env_int("READ_CHUNK_SIZE", 4096)  # Bytes per transport read
MAX_LINE_BUFFER_BYTES = _get_env_int(
    "MAX_LINE_BUFFER_BYTES", 65536
)  # Unterminated bytes tolerated before the stream is dropped (0 disables)

# Event delivery
EVENT_QUEUE_SIZE = _get_env_int(
    "EVENT_QUEUE_SIZE", 1000
)  # Per-subscriber queue bound; a full queue stalls the reader (0 = unbounded)

# Caller-side retry (front-end only, the core never retries)
CONNECT_RETRY_ATTEMPTS = _get_env_int("CONNECT_RETRY_ATTEMPTS", 1)
CONNECT_RETRY_MAX_BACKOFF_SECONDS = _get_env_int(
    "CONNECT_RETRY_MAX_BACKOFF_SECONDS", 30
)
