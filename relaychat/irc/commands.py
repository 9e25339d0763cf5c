"""Outbound intents and their wire serialization."""

from __future__ import annotations

from dataclasses import dataclass

from ..errors.internal import InvalidIntentError

LINE_TERMINATOR = "\r\n"
_FORBIDDEN_IN_WORD = (" ", "\r", "\n", "\0")


@dataclass(frozen=True, slots=True)
class SetIdentity:
    nick: str


@dataclass(frozen=True, slots=True)
class Join:
    channel: str


@dataclass(frozen=True, slots=True)
class Part:
    channel: str


@dataclass(frozen=True, slots=True)
class SendText:
    target: str
    text: str


@dataclass(frozen=True, slots=True)
class Raw:
    literal: str


@dataclass(frozen=True, slots=True)
class Quit:
    reason: str


@dataclass(frozen=True, slots=True)
class Pong:
    token: str


OutboundIntent = SetIdentity | Join | Part | SendText | Raw | Quit | Pong


def _word(value: str, field: str) -> str:
    if not value:
        raise InvalidIntentError(f"{field} must not be empty", data={field: value})
    if any(ch in value for ch in _FORBIDDEN_IN_WORD):
        raise InvalidIntentError(
            f"{field} must not contain spaces or line breaks", data={field: value}
        )
    return value


def sanitize_text(text: str) -> str:
    """Cut ``text`` at its first CR or LF so it stays a single line."""
    for index, ch in enumerate(text):
        if ch in "\r\n":
            return text[:index]
    return text


def _terminate(line: str) -> str:
    return f"{line}{LINE_TERMINATOR}"


def build_lines(intent: OutboundIntent) -> list[str]:
    """Serialize an intent into CRLF-terminated wire lines.

    Raises:
        InvalidIntentError: a nickname, channel or target is empty or holds
            characters that would break the line structure.
    """
    match intent:
        case SetIdentity(nick=nick):
            nick = _word(nick, "nick")
            return [_terminate(f"NICK {nick}"), _terminate(f"USER {nick} 0 * :{nick}")]
        case Join(channel=channel):
            return [_terminate(f"JOIN {_word(channel, 'channel')}")]
        case Part(channel=channel):
            return [_terminate(f"PART {_word(channel, 'channel')}")]
        case SendText(target=target, text=text):
            return [_terminate(f"PRIVMSG {_word(target, 'target')} :{sanitize_text(text)}")]
        case Raw(literal=literal):
            # Passed through as-is; only avoid doubling an existing terminator.
            if literal.endswith("\n"):
                return [literal if literal.endswith(LINE_TERMINATOR) else _terminate(literal[:-1])]
            return [_terminate(literal)]
        case Quit(reason=reason):
            return [_terminate(f"QUIT :{sanitize_text(reason)}")]
        case Pong(token=token):
            return [_terminate(f"PONG {sanitize_text(token)}")]
        case _:
            raise InvalidIntentError(f"Unsupported intent: {intent!r}")


def encode_intent(intent: OutboundIntent, encoding: str = "utf-8") -> bytes:
    return "".join(build_lines(intent)).encode(encoding)


def describe(intent: OutboundIntent) -> str:
    return type(intent).__name__
