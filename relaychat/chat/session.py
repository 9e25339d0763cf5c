"""Conversation state kept on top of the connection's event stream."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..config.model import CHANNEL_PREFIXES, ClientConfig
from ..errors.internal import InvalidIntentError, InvalidOperationError, TransportError
from ..irc.connection import IRCConnection
from ..irc.events import (
    ChatMessage,
    Connected,
    ConnectionFailure,
    Disconnected,
    DomainEvent,
    Joined,
    NickChanged,
    Parted,
    ServerText,
    TopicReceived,
    UserListReceived,
)
from ..irc.numerics import RPL_WELCOME
from ..logs.logger import logger

SERVER_BUFFER = "Server"


def is_channel(name: str) -> bool:
    return name.startswith(CHANNEL_PREFIXES)


@dataclass
class ChannelState:
    name: str
    topic: str = ""
    users: list[str] = field(default_factory=list)

    def add_user(self, nick: str) -> None:
        if nick and nick not in self.users:
            self.users.append(nick)

    def remove_user(self, nick: str) -> None:
        if nick in self.users:
            self.users.remove(nick)

    def rename_user(self, old: str, new: str) -> None:
        if old in self.users:
            self.users[self.users.index(old)] = new


class ChatSession:
    """Registers the identity, joins configured channels and tracks channels.

    Attaches itself as a handler on the connection's dispatcher. Channel
    membership is driven only by server events: a channel is tracked from our
    own JOIN echo until our own PART or the end of the connection. NAMES
    replies are merged, since a large channel spans several replies.
    """

    def __init__(self, connection: IRCConnection, config: ClientConfig | None = None):
        self.connection = connection
        self.config = config or connection.config
        self.channels: dict[str, ChannelState] = {}
        self.welcomed = False
        connection.dispatcher.add_handler(self.handle_event)

    @property
    def nickname(self) -> str:
        return self.connection.nickname

    def detach(self) -> None:
        self.connection.dispatcher.remove_handler(self.handle_event)

    def users(self, channel: str) -> list[str]:
        state = self.channels.get(channel)
        return list(state.users) if state else []

    def topic(self, channel: str) -> str:
        state = self.channels.get(channel)
        return state.topic if state else ""

    def route_message(self, message: ChatMessage) -> str:
        """Name of the conversation a chat message belongs to."""
        if is_channel(message.target):
            return message.target
        if message.target == self.nickname:
            return message.sender
        return SERVER_BUFFER

    async def handle_event(self, event: DomainEvent) -> None:
        match event:
            case Connected():
                await self._identify()
            case ServerText(code=code) if code == RPL_WELCOME and not self.welcomed:
                self.welcomed = True
                await self._autojoin()
            case Joined(channel=channel, user=user):
                self._on_join(channel, user)
            case Parted(channel=channel, user=user):
                self._on_part(channel, user)
            case UserListReceived(channel=channel, users=users):
                state = self.channels.get(channel)
                if state is not None:
                    for nick in users:
                        state.add_user(nick)
            case TopicReceived(channel=channel, topic=topic):
                state = self.channels.get(channel)
                if state is not None:
                    state.topic = topic
            case NickChanged(old_nick=old, new_nick=new):
                for state in self.channels.values():
                    state.rename_user(old, new)
            case Disconnected() | ConnectionFailure():
                self._reset()
            case _:
                pass

    async def _identify(self) -> None:
        nick = self.config.nickname
        logger.log_event("session", "identify", nick=nick)
        try:
            await self.connection.set_identity(nick)
        except (InvalidOperationError, InvalidIntentError, TransportError) as e:
            logger.log_event(
                "session", "identify", level=logging.ERROR, human=f"Registration failed: {e}", nick=nick
            )

    async def _autojoin(self) -> None:
        for channel in self.config.channels:
            logger.log_event("session", "autojoin", nick=self.nickname, channel=channel)
            try:
                await self.connection.join(channel)
            except (InvalidOperationError, InvalidIntentError, TransportError) as e:
                logger.log_event(
                    "session",
                    "autojoin",
                    level=logging.ERROR,
                    human=f"Joining {channel} failed: {e}",
                    nick=self.nickname,
                )
                return

    def _on_join(self, channel: str, user: str) -> None:
        if user == self.nickname:
            if channel not in self.channels:
                self.channels[channel] = ChannelState(channel)
                logger.log_event(
                    "session", "channel_added", level=logging.DEBUG, nick=user, channel=channel
                )
            return
        state = self.channels.get(channel)
        if state is not None:
            state.add_user(user)

    def _on_part(self, channel: str, user: str) -> None:
        if user == self.nickname:
            if self.channels.pop(channel, None) is not None:
                logger.log_event(
                    "session", "channel_removed", level=logging.DEBUG, nick=user, channel=channel
                )
            return
        state = self.channels.get(channel)
        if state is not None:
            state.remove_user(user)

    def _reset(self) -> None:
        self.channels.clear()
        self.welcomed = False
        logger.log_event("session", "reset", level=logging.DEBUG, nick=self.nickname)
