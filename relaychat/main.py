#!/usr/bin/env python3
"""
Terminal front-end for the relaychat IRC client.

Prints every event of the connection to stdout and turns stdin lines into
intents (see ``relaychat.chat.input_parser``).
"""

import argparse
import asyncio
import logging
import sys
from typing import TextIO

from . import __version__
from .chat.input_parser import QuitRequest, parse_input
from .chat.session import SERVER_BUFFER, ChatSession
from .config import load_config
from .constants import CONNECT_RETRY_ATTEMPTS
from .errors.handling import connect_with_retry, log_error
from .errors.internal import (
    ConfigError,
    InvalidIntentError,
    InvalidOperationError,
    TransportError,
)
from .irc.commands import SendText
from .irc.connection import IRCConnection
from .irc.dispatcher import EventSubscription
from .irc.events import (
    ChatMessage,
    Connected,
    ConnectionFailure,
    Disconnected,
    DomainEvent,
    Joined,
    NickChanged,
    Notice,
    Parted,
    ServerText,
    TopicReceived,
    UserListReceived,
)
from .logging_config import LoggerConfigurator, error_aggregator
from .logs.logger import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relaychat", description="Minimal terminal IRC client"
    )
    parser.add_argument("--host", help="server host name")
    parser.add_argument("--port", type=int, help="server port (default 6667)")
    parser.add_argument("--nick", dest="nickname", help="nickname to register")
    parser.add_argument(
        "--channel",
        dest="channels",
        action="append",
        help="channel to join after the welcome reply (repeatable)",
    )
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument(
        "--retries",
        type=int,
        default=CONNECT_RETRY_ATTEMPTS,
        help="connection attempts before giving up",
    )
    parser.add_argument("--debug", action="store_true", help="log at DEBUG level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def format_event(event: DomainEvent, session: ChatSession | None = None) -> str:
    """One display line per event."""
    match event:
        case Connected(host=host, port=port):
            return f"*** Connected to {host}:{port}"
        case Disconnected():
            return "*** Disconnected from server"
        case ConnectionFailure(reason=reason):
            return f"*** Connection error: {reason}"
        case ChatMessage(sender=sender, target=target, text=text):
            where = session.route_message(event) if session else target
            return f"[{where}] <{sender}> {text}"
        case Notice(sender=sender, text=text):
            return f"-{sender or 'server'}- {text}"
        case Joined(channel=channel, user=user):
            return f"[{channel}] * {user} has joined"
        case Parted(channel=channel, user=user):
            return f"[{channel}] * {user} has left"
        case NickChanged(old_nick=old, new_nick=new):
            return f"* {old} is now known as {new}"
        case UserListReceived(channel=channel, users=users, entries=entries):
            return f"[{channel}] Users: {' '.join(entries or users)}"
        case TopicReceived(channel=channel, topic=topic):
            return f"[{channel}] Topic: {topic}"
        case ServerText(text=text):
            return f"[{SERVER_BUFFER}] {text}"
        case _:
            return repr(event)


class TerminalFrontend:
    """Glue between a connection and a text terminal."""

    def __init__(
        self,
        connection: IRCConnection,
        session: ChatSession,
        output: TextIO | None = None,
    ) -> None:
        self.connection = connection
        self.session = session
        self.output = output or sys.stdout
        self.current_target: str | None = None

    def emit(self, text: str) -> None:
        print(text, file=self.output, flush=True)

    def track_target(self, event: DomainEvent) -> None:
        own = self.connection.nickname
        if isinstance(event, Joined) and event.user == own:
            self.current_target = event.channel
        elif isinstance(event, Parted) and event.user == own:
            if self.current_target == event.channel:
                self.current_target = None

    async def print_events(self, subscription: EventSubscription) -> None:
        async for event in subscription:
            self.track_target(event)
            self.emit(format_event(event, self.session))

    async def handle_input(self, line: str) -> bool:
        """Process one input line; returns False once the user asked to quit."""
        try:
            result = parse_input(line, self.current_target)
        except InvalidIntentError as e:
            self.emit(f"!!! {e}")
            return True
        if isinstance(result, QuitRequest):
            await self.connection.disconnect(result.reason)
            return False
        for intent in result:
            try:
                await self.connection.send(intent)
            except (InvalidOperationError, InvalidIntentError, TransportError) as e:
                self.emit(f"!!! {e}")
                return True
            if isinstance(intent, SendText):
                self.emit(f"[{intent.target}] <{self.connection.nickname}> {intent.text}")
        return True

    async def read_input(self, reader: asyncio.StreamReader) -> None:
        while True:
            raw = await reader.readline()
            if not raw:
                await self.connection.disconnect()
                return
            if not await self.handle_input(raw.decode("utf-8", errors="replace")):
                return


async def open_stdin() -> asyncio.StreamReader:
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return reader


async def main(argv: list[str] | None = None) -> int:
    """Run the client until the connection ends.

    Returns:
        Process exit code: 0 after a normal session, 1 when no connection
        could be established, 2 for configuration errors.
    """
    args = build_parser().parse_args(argv)
    LoggerConfigurator({"debug": args.debug}).configure()
    logger.log_event("app", "start", version=__version__)

    try:
        config = load_config(
            args.config,
            {
                "host": args.host,
                "port": args.port,
                "nickname": args.nickname,
                "channels": args.channels,
            },
        )
    except ConfigError as e:
        log_error("Configuration error", e)
        return 2

    connection = IRCConnection(config)
    session = ChatSession(connection)
    frontend = TerminalFrontend(connection, session)
    printer = asyncio.create_task(frontend.print_events(connection.dispatcher.subscribe()))

    exit_code = 0
    input_task: asyncio.Task[None] | None = None
    try:
        if not await connect_with_retry(connection, attempts=args.retries):
            exit_code = 1
        else:
            input_task = asyncio.create_task(frontend.read_input(await open_stdin()))
            await connection.wait_closed()
    finally:
        if input_task is not None:
            input_task.cancel()
        await connection.close()
        await connection.dispatcher.close()
        await printer
        logger.log_event("app", "shutdown", level=logging.DEBUG)
        if error_aggregator.get_error_summary():
            error_aggregator.log_summary_report()
    return exit_code


def run() -> None:
    """Synchronous entry point for the console script."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    run()
