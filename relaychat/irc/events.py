"""Domain events published by the connection.

Events are frozen dataclasses: once published they cannot be mutated, so every
subscriber receives a value nobody else can change under it.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Connected:
    host: str
    port: int


@dataclass(frozen=True, slots=True)
class Disconnected:
    pass


@dataclass(frozen=True, slots=True)
class ConnectionFailure:
    """Transport-level failure; the connection is already DISCONNECTED."""

    reason: str


@dataclass(frozen=True, slots=True)
class ChatMessage:
    sender: str
    target: str
    text: str


@dataclass(frozen=True, slots=True)
class Notice:
    sender: str
    text: str


@dataclass(frozen=True, slots=True)
class Joined:
    channel: str
    user: str


@dataclass(frozen=True, slots=True)
class Parted:
    channel: str
    user: str


@dataclass(frozen=True, slots=True)
class NickChanged:
    old_nick: str
    new_nick: str


@dataclass(frozen=True, slots=True)
class UserListReceived:
    """One NAMES reply.

    ``users`` holds unique nicknames in arrival order with membership markers
    removed; ``entries`` keeps the tokens exactly as the server sent them.
    """

    channel: str
    users: tuple[str, ...]
    entries: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TopicReceived:
    channel: str
    topic: str


@dataclass(frozen=True, slots=True)
class ServerText:
    """Free-form server text; ``code`` is the numeric it came from (0 if none)."""

    text: str
    code: int = 0


DomainEvent = (
    Connected
    | Disconnected
    | ConnectionFailure
    | ChatMessage
    | Notice
    | Joined
    | Parted
    | NickChanged
    | UserListReceived
    | TopicReceived
    | ServerText
)

__all__ = [
    "Connected",
    "Disconnected",
    "ConnectionFailure",
    "ChatMessage",
    "Notice",
    "Joined",
    "Parted",
    "NickChanged",
    "UserListReceived",
    "TopicReceived",
    "ServerText",
    "DomainEvent",
]
