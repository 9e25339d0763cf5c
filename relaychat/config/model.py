from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..constants import (
    CONNECT_TIMEOUT_SECONDS,
    DEFAULT_HOST,
    DEFAULT_NICKNAME,
    DEFAULT_PORT,
    DEFAULT_QUIT_MESSAGE,
    EVENT_QUEUE_SIZE,
    MAX_LINE_BUFFER_BYTES,
)

CHANNEL_PREFIXES = ("#", "&")


def normalize_channel(name: str) -> str:
    """Strip whitespace and add a leading ``#`` when no channel prefix is present."""
    stripped = name.strip()
    if stripped and not stripped.startswith(CHANNEL_PREFIXES):
        stripped = f"#{stripped}"
    return stripped


class ClientConfig(BaseModel):
    """Settings for one client connection.

    Attributes:
        host: Server host name.
        port: Server port (cleartext IRC, 6667 by default).
        nickname: Identity registered right after connecting.
        channels: Channels joined once the server welcomed us.
        quit_message: Reason sent with QUIT on disconnect.
        connect_timeout: Seconds allowed for opening the TCP stream.
        idle_timeout: Seconds without inbound data before the connection is
            treated as failed; ``None`` disables the check.
        max_line_buffer: Cap on unterminated inbound bytes; 0 disables it.
        event_queue_size: Per-subscriber event queue bound; 0 is unbounded.
    """

    host: str = Field(default=DEFAULT_HOST, min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    nickname: str = Field(default=DEFAULT_NICKNAME, min_length=1, max_length=64)
    channels: list[str] = Field(default_factory=list)
    quit_message: str = DEFAULT_QUIT_MESSAGE
    connect_timeout: float = Field(default=CONNECT_TIMEOUT_SECONDS, gt=0)
    idle_timeout: float | None = Field(default=None, gt=0)
    max_line_buffer: int = Field(default=MAX_LINE_BUFFER_BYTES, ge=0)
    event_queue_size: int = Field(default=EVENT_QUEUE_SIZE, ge=0)

    @field_validator("host", mode="before")
    @classmethod
    def validate_host(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("nickname")
    @classmethod
    def validate_nickname(cls, v: str) -> str:
        """Reject nicknames that would break the NICK/USER lines."""
        v = v.strip()
        if not v:
            raise ValueError("nickname must not be empty")
        if any(ch.isspace() or ch == "\0" for ch in v):
            raise ValueError("nickname must not contain whitespace")
        if v[0] in ":#&":
            raise ValueError("nickname must not start with ':', '#' or '&'")
        return v

    @field_validator("channels", mode="before")
    @classmethod
    def validate_channels(cls, v: Any) -> list[str]:
        """Normalize channels: add missing '#', drop blanks and duplicates, keep order."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.replace(",", " ").split()
        if not isinstance(v, list | tuple):
            raise ValueError("channels must be a list")
        validated: dict[str, None] = {}
        for c in v:
            if isinstance(c, str):
                name = normalize_channel(c)
                if name and " " not in name:
                    validated.setdefault(name, None)
        return list(validated)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ClientConfig:
        return cls.model_validate(dict(data))

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
