"""Shared IRC data models."""

from __future__ import annotations

from enum import Enum

# Channel membership markers servers prepend to nicknames in NAMES replies
# (owner, admin, operator, half-operator, voice).
MEMBERSHIP_PREFIXES = "~&@%+"


class ConnectionState(Enum):
    """Lifecycle of the single server connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
