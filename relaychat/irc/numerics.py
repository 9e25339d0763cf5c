"""Translation of numeric server replies into domain events."""

from __future__ import annotations

from collections.abc import Sequence

from .events import DomainEvent, ServerText, TopicReceived, UserListReceived
from .models import MEMBERSHIP_PREFIXES

RPL_WELCOME = 1
RPL_TOPIC = 332
RPL_NAMREPLY = 353
RPL_ENDOFNAMES = 366


def _at(params: Sequence[str], index: int) -> str:
    return params[index] if index < len(params) else ""


def split_names(names: str) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Split a NAMES payload into ``(users, entries)``.

    ``entries`` are the raw tokens; ``users`` are unique nicknames in first-seen
    order with membership markers stripped.
    """
    entries = tuple(names.split())
    users: dict[str, None] = {}
    for entry in entries:
        nick = entry.lstrip(MEMBERSHIP_PREFIXES)
        if nick:
            users.setdefault(nick, None)
    return tuple(users), entries


def interpret_numeric(code: int, params: Sequence[str]) -> DomainEvent | None:
    """Map a numeric reply onto an event; ``None`` when the reply is absorbed.

    Replies with too few parameters degrade to empty-string fields.
    """
    if code == RPL_WELCOME:
        return ServerText(" ".join(params), code=code)
    if code == RPL_TOPIC:
        return TopicReceived(channel=_at(params, 1), topic=" ".join(params[2:]))
    if code == RPL_NAMREPLY:
        users, entries = split_names(" ".join(params[3:]))
        return UserListReceived(channel=_at(params, 2), users=users, entries=entries)
    if code == RPL_ENDOFNAMES:
        return None
    return ServerText(" ".join([str(code), *params]), code=code)
