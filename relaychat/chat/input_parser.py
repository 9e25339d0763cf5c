"""Typed input lines to outbound intents.

Plain text goes to the current conversation. A leading ``/`` selects a
command; unknown commands are sent raw so any protocol command stays
reachable. ``//text`` sends text that starts with a slash.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..config.model import normalize_channel
from ..errors.internal import InvalidIntentError
from ..irc.commands import Join, OutboundIntent, Part, Raw, SendText


@dataclass(frozen=True, slots=True)
class QuitRequest:
    reason: str | None = None


InputResult = list[OutboundIntent] | QuitRequest


def parse_input(text: str, current_target: str | None = None) -> InputResult:
    """Turn one line of user input into intents.

    Raises:
        InvalidIntentError: plain text with no conversation selected, or a
            known command missing its arguments.
    """
    line = text.rstrip("\r\n")
    if not line.strip():
        return []

    if not line.startswith("/") or line.startswith("//"):
        body = line[1:] if line.startswith("//") else line
        if not current_target:
            raise InvalidIntentError("No conversation selected; use /join or /msg")
        return [SendText(current_target, body)]

    command, _, rest = line[1:].partition(" ")
    args = rest.split()
    name = command.upper()

    if name == "JOIN":
        if not args:
            raise InvalidIntentError("Usage: /join <channel> [channel ...]")
        return [Join(normalize_channel(arg)) for arg in args]
    if name in ("PART", "LEAVE"):
        channel = normalize_channel(args[0]) if args else current_target
        if not channel:
            raise InvalidIntentError("Usage: /part [channel]")
        return [Part(channel)]
    if name == "MSG":
        if len(args) < 2:
            raise InvalidIntentError("Usage: /msg <target> <text>")
        target, _, message = rest.strip().partition(" ")
        return [SendText(target, message.strip())]
    if name == "NICK":
        if len(args) != 1:
            raise InvalidIntentError("Usage: /nick <nickname>")
        return [Raw(f"NICK {args[0]}")]
    if name == "QUIT":
        return QuitRequest(rest.strip() or None)
    if name in ("RAW", "QUOTE"):
        if not rest.strip():
            raise InvalidIntentError("Usage: /raw <command>")
        return [Raw(rest.strip())]
    if not command:
        raise InvalidIntentError("Empty command")
    return [Raw(line[1:])]
