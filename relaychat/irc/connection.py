"""Connection lifecycle and inbound/outbound processing for one IRC server."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..config.model import ClientConfig
from ..constants import READ_CHUNK_SIZE
from ..errors.handling import log_error
from ..errors.internal import (
    InvalidOperationError,
    LineBufferOverflowError,
    TransportError,
)
from ..logs.logger import logger
from .commands import (
    Join,
    OutboundIntent,
    Part,
    Pong,
    Quit,
    Raw,
    SendText,
    SetIdentity,
    build_lines,
    describe,
)
from .dispatcher import EventDispatcher
from .events import Connected, ConnectionFailure, Disconnected, NickChanged
from .framer import LineFramer
from .interpreter import interpret_message, pong_token
from .models import ConnectionState
from .parser import parse_message

OpenConnection = Callable[
    [str, int], Awaitable[tuple[asyncio.StreamReader, Any]]
]


class IRCConnection:  # pylint: disable=too-many-instance-attributes
    """Owns the socket, the line buffer and the lifecycle state.

    ``connect`` opens the stream and starts a reader task that frames, parses
    and dispatches every inbound line in arrival order. Outbound intents are
    accepted only while CONNECTED and are written under a lock so lines from
    concurrent callers never interleave.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        dispatcher: EventDispatcher | None = None,
        open_connection: OpenConnection | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self.host = self.config.host
        self.port = self.config.port
        self.nickname = self.config.nickname
        self.dispatcher = dispatcher or EventDispatcher(self.config.event_queue_size)
        self.framer = LineFramer(self.config.max_line_buffer)
        self.state = ConnectionState.DISCONNECTED
        self.reader: asyncio.StreamReader | None = None
        self.writer: Any = None
        self._open_connection: OpenConnection = open_connection or asyncio.open_connection
        self._write_lock = asyncio.Lock()
        self._reader_task: asyncio.Task[None] | None = None
        self._connect_task: asyncio.Future[Any] | None = None
        self._cancel_requested = False
        self._closing = False
        self._failure_reason: str | None = None

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def _set_state(self, new_state: ConnectionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                nick=self.nickname,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    # Lifecycle -----------------------------------------------------------

    async def connect(self, host: str | None = None, port: int | None = None) -> bool:
        """Open the transport; returns True once CONNECTED.

        A failed attempt publishes ``ConnectionFailure`` and returns False.
        Nothing is retried here.

        Raises:
            InvalidOperationError: the connection is not DISCONNECTED.
        """
        if self.state is not ConnectionState.DISCONNECTED:
            raise InvalidOperationError(
                f"connect() is only valid while disconnected (state: {self.state.value})",
                data={"state": self.state.value},
            )
        self.host = host or self.host
        self.port = port or self.port
        self.framer.reset()
        self._cancel_requested = False
        self._closing = False
        self._failure_reason = None
        self._set_state(ConnectionState.CONNECTING)
        logger.log_event(
            "irc", "connect_start", nick=self.nickname, host=self.host, port=self.port
        )
        self._connect_task = asyncio.ensure_future(
            asyncio.wait_for(
                self._open_connection(self.host, self.port),
                timeout=self.config.connect_timeout,
            )
        )
        try:
            reader, writer = await self._connect_task
        except asyncio.CancelledError:
            requested = self._cancel_requested
            logger.log_event(
                "irc", "connect_cancelled", nick=self.nickname, host=self.host, port=self.port
            )
            self._set_state(ConnectionState.DISCONNECTED)
            await self.dispatcher.publish(Disconnected())
            if not requested:
                raise
            return False
        except TimeoutError:
            logger.log_event(
                "irc",
                "connect_timeout",
                level=logging.ERROR,
                nick=self.nickname,
                host=self.host,
                port=self.port,
                timeout=self.config.connect_timeout,
            )
            return await self._connect_failed(
                f"Connection to {self.host}:{self.port} timed out"
            )
        except OSError as e:
            log_error(
                "Connection attempt failed",
                TransportError(str(e) or type(e).__name__),
                context={"host": self.host, "port": self.port},
            )
            logger.log_event(
                "irc",
                "connect_failed",
                level=logging.ERROR,
                nick=self.nickname,
                host=self.host,
                port=self.port,
                error=str(e),
            )
            return await self._connect_failed(str(e) or type(e).__name__)
        finally:
            self._connect_task = None

        self.reader, self.writer = reader, writer
        self._set_state(ConnectionState.CONNECTED)
        logger.log_event(
            "irc", "connect_success", nick=self.nickname, host=self.host, port=self.port
        )
        await self.dispatcher.publish(Connected(host=self.host, port=self.port))
        self._reader_task = asyncio.create_task(self._read_loop())
        return True

    async def _connect_failed(self, reason: str) -> bool:
        self._set_state(ConnectionState.DISCONNECTED)
        await self.dispatcher.publish(ConnectionFailure(reason=reason))
        return False

    async def disconnect(self, reason: str | None = None) -> None:
        """Send QUIT and request the transport to close.

        The state change and the ``Disconnected`` event follow from the close
        itself, observed by the reader task. While CONNECTING the pending open
        is cancelled; while DISCONNECTED this does nothing.
        """
        if self.state is ConnectionState.CONNECTING and self._connect_task is not None:
            self._cancel_requested = True
            self._connect_task.cancel()
            return
        if self.state is not ConnectionState.CONNECTED or self._closing:
            logger.log_event(
                "irc",
                "disconnect_noop",
                level=logging.DEBUG,
                nick=self.nickname,
                state="closing" if self._closing else self.state.value,
            )
            return
        self._closing = True
        quit_reason = reason if reason is not None else self.config.quit_message
        logger.log_event("irc", "disconnect_requested", nick=self.nickname, reason=quit_reason)
        try:
            await self._write_intent(Quit(quit_reason))
        except (OSError, InvalidOperationError) as e:
            logger.log_event(
                "irc", "connection_error", level=logging.WARNING, nick=self.nickname, error=str(e)
            )
        self._request_close()

    async def wait_closed(self) -> None:
        """Wait until the reader task has finished."""
        task = self._reader_task
        if task is not None and task is not asyncio.current_task():
            await asyncio.shield(task)

    async def close(self, reason: str | None = None) -> None:
        await self.disconnect(reason)
        await self.wait_closed()

    async def __aenter__(self) -> IRCConnection:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    def _request_close(self) -> None:
        writer = self.writer
        if writer is not None:
            writer.close()

    # Inbound -------------------------------------------------------------

    async def _read_chunk(self) -> bytes:
        reader = self.reader
        if reader is None:
            return b""
        idle = self.config.idle_timeout
        if idle:
            return await asyncio.wait_for(reader.read(READ_CHUNK_SIZE), timeout=idle)
        return await reader.read(READ_CHUNK_SIZE)

    async def _read_loop(self) -> None:
        reason: str | None = None
        try:
            while True:
                data = await self._read_chunk()
                if not data:
                    break
                for line in self.framer.feed(data):
                    await self._handle_line(line)
        except asyncio.CancelledError:
            await self._finish(None)
            raise
        except LineBufferOverflowError as e:
            reason = str(e)
            logger.log_event(
                "irc", "buffer_overflow", level=logging.ERROR, nick=self.nickname, error=reason
            )
        except TimeoutError:
            reason = f"No data received for {self.config.idle_timeout}s"
            logger.log_event(
                "irc",
                "idle_timeout",
                level=logging.WARNING,
                nick=self.nickname,
                timeout=self.config.idle_timeout,
            )
        except OSError as e:
            reason = str(e) or type(e).__name__
        await self._finish(reason)

    async def _handle_line(self, line: str) -> None:
        logger.log_event("irc", "raw_in", level=logging.DEBUG, nick=self.nickname, line=line)
        message = parse_message(line)
        if message.command.upper() == "PING":
            token = pong_token(message)
            await self._write_intent(Pong(token))
            logger.log_event("irc", "ping", level=logging.DEBUG, nick=self.nickname, token=token)
            return
        event = interpret_message(message)
        if event is None:
            return
        if isinstance(event, NickChanged) and event.old_nick == self.nickname:
            self.nickname = event.new_nick
            logger.log_event("irc", "own_nick_changed", nick=self.nickname, new_nick=event.new_nick)
        await self.dispatcher.publish(event)

    async def _finish(self, reason: str | None) -> None:
        """Single exit path to DISCONNECTED; publishes exactly one final event."""
        if self.state is ConnectionState.DISCONNECTED:
            return
        writer = self.writer
        self.reader = None
        self.writer = None
        self.framer.reset()
        self._set_state(ConnectionState.DISCONNECTED)
        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.log_event(
                    "irc", "connection_error", level=logging.DEBUG, nick=self.nickname, error=str(e)
                )
        reason = reason or self._failure_reason
        if reason is None or self._closing:
            logger.log_event("irc", "disconnected", level=logging.WARNING, nick=self.nickname)
            await self.dispatcher.publish(Disconnected())
        else:
            logger.log_event(
                "irc", "connection_error", level=logging.ERROR, nick=self.nickname, error=reason
            )
            log_error("Connection lost", TransportError(reason), context={"host": self.host})
            await self.dispatcher.publish(ConnectionFailure(reason=reason))
        self._closing = False

    # Outbound ------------------------------------------------------------

    async def _write_intent(self, intent: OutboundIntent) -> None:
        lines = build_lines(intent)
        writer = self.writer
        if writer is None:
            raise InvalidOperationError("Transport is not open")
        for line in lines:
            logger.log_event(
                "irc", "raw_out", level=logging.DEBUG, nick=self.nickname, line=line.rstrip("\r\n")
            )
        async with self._write_lock:
            writer.write("".join(lines).encode("utf-8"))
            await writer.drain()

    async def send(self, intent: OutboundIntent) -> None:
        """Serialize and write one intent.

        Raises:
            InvalidOperationError: not CONNECTED; nothing is written.
            InvalidIntentError: the intent cannot be serialized.
            TransportError: the write failed; the connection is being closed.
        """
        if self.state is not ConnectionState.CONNECTED:
            logger.log_event(
                "irc",
                "send_rejected",
                level=logging.WARNING,
                nick=self.nickname,
                intent=describe(intent),
                state=self.state.value,
            )
            raise InvalidOperationError(
                f"Cannot send {describe(intent)} while {self.state.value}",
                data={"state": self.state.value, "intent": describe(intent)},
            )
        try:
            await self._write_intent(intent)
        except OSError as e:
            self._failure_reason = str(e) or type(e).__name__
            self._request_close()
            raise TransportError(f"Write failed: {self._failure_reason}") from e

    async def set_identity(self, nick: str) -> None:
        await self.send(SetIdentity(nick))
        self.nickname = nick

    async def join(self, channel: str) -> None:
        await self.send(Join(channel))

    async def part(self, channel: str) -> None:
        await self.send(Part(channel))

    async def send_text(self, target: str, text: str) -> None:
        await self.send(SendText(target, text))

    async def send_private_message(self, user: str, text: str) -> None:
        await self.send_text(user, text)

    async def send_raw(self, literal: str) -> None:
        await self.send(Raw(literal))
