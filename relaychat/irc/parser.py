"""IRC message parsing utilities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParsedMessage:
    raw: str
    prefix: str | None
    command: str
    params: tuple[str, ...] = ()
    trailing: str | None = None

    @property
    def nick(self) -> str:
        return nick_from_prefix(self.prefix)

    @property
    def is_numeric(self) -> bool:
        return self.command.isascii() and self.command.isdigit()

    @property
    def arguments(self) -> tuple[str, ...]:
        """Positional parameters followed by a non-empty trailing parameter."""
        if self.trailing:
            return (*self.params, self.trailing)
        return self.params

    def param(self, index: int) -> str:
        """Positional parameter at ``index`` or an empty string."""
        return self.params[index] if 0 <= index < len(self.params) else ""


def parse_message(line: str) -> ParsedMessage:
    """Decompose one protocol line. Never raises.

    ``[:prefix ]command param ... [:trailing]``. Malformed input degrades to
    best-effort fields: a prefix without a following space swallows the whole
    line and leaves the command empty.
    """
    prefix: str | None = None
    rest = line

    if rest.startswith(":"):
        # Malformed lines may omit the space after the prefix; guard split
        remainder = rest[1:]
        if " " in remainder:
            prefix, rest = remainder.split(" ", 1)
        else:
            prefix, rest = remainder, ""

    tokens = rest.split(" ")
    command = ""
    params: list[str] = []
    trailing: str | None = None

    for index, token in enumerate(tokens):
        if not token:
            continue
        if not command:
            command = token
            continue
        if token.startswith(":"):
            # Rejoin on single spaces so runs of spaces inside the text survive
            trailing = " ".join(tokens[index:])[1:]
            break
        params.append(token)

    return ParsedMessage(
        raw=line,
        prefix=prefix,
        command=command,
        params=tuple(params),
        trailing=trailing,
    )


def nick_from_prefix(prefix: str | None) -> str:
    """Nickname part of ``nick!user@host`` (the whole prefix when no ``!``)."""
    if not prefix:
        return ""
    return prefix.split("!", 1)[0]
