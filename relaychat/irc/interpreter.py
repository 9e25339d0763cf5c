"""Inbound command handling: parsed lines to domain events."""

from __future__ import annotations

from .events import ChatMessage, DomainEvent, Joined, NickChanged, Notice, Parted
from .numerics import interpret_numeric
from .parser import ParsedMessage


def interpret_message(message: ParsedMessage) -> DomainEvent | None:
    """Translate one parsed line into the event it announces.

    Returns ``None`` for lines that produce no event: PING (answered by the
    connection itself), the end-of-names numeric, commands this client does
    not model, and PRIVMSG/PART lines missing their target.
    """
    if message.is_numeric:
        return interpret_numeric(int(message.command), message.arguments)

    nick = message.nick
    match message.command.upper():
        case "PRIVMSG":
            if not message.params:
                return None
            return ChatMessage(
                sender=nick, target=message.params[0], text=message.trailing or ""
            )
        case "NOTICE":
            return Notice(sender=nick, text=message.trailing or "")
        case "JOIN":
            return Joined(channel=message.trailing or message.param(0), user=nick)
        case "PART":
            if not message.params:
                return None
            return Parted(channel=message.params[0], user=nick)
        case "NICK":
            return NickChanged(
                old_nick=nick, new_nick=message.trailing or message.param(0)
            )
        case _:
            return None


def pong_token(message: ParsedMessage) -> str:
    """Token a PING must be answered with."""
    return message.trailing or " ".join(message.params)
