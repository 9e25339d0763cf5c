"""In-memory transport doubles shared by the connection tests."""

import asyncio


class FakeWriter:
    """In-memory stand-in for ``asyncio.StreamWriter``.

    Closing it feeds EOF to the paired reader, the way a real transport close
    ends the peer's read side for our own reader task.
    """

    def __init__(self, reader: asyncio.StreamReader) -> None:
        self.reader = reader
        self.data = bytearray()
        self.calls: list[str] = []
        self.closed = False
        self.fail_writes = False

    def write(self, data: bytes) -> None:
        if self.fail_writes:
            raise ConnectionResetError("Connection reset by peer")
        self.calls.append("write")
        self.data.extend(data)

    async def drain(self) -> None:
        await asyncio.sleep(0)

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self.calls.append("close")
            self.reader.feed_eof()

    async def wait_closed(self) -> None:
        return None

    def is_closing(self) -> bool:
        return self.closed

    @property
    def lines(self) -> list[str]:
        return self.data.decode("utf-8").split("\r\n")[:-1]


class FakeServer:
    """Hands out a reader/writer pair and lets tests push server traffic."""

    def __init__(self) -> None:
        self.reader = asyncio.StreamReader()
        self.writer = FakeWriter(self.reader)
        self.opened: list[tuple[str, int]] = []

    async def open_connection(self, host: str, port: int):  # type: ignore[no-untyped-def]
        self.opened.append((host, port))
        return self.reader, self.writer

    def send(self, data: str | bytes) -> None:
        self.reader.feed_data(data.encode("utf-8") if isinstance(data, str) else data)

    def hang_up(self) -> None:
        self.reader.feed_eof()


async def next_event(subscription, timeout: float = 1.0):  # type: ignore[no-untyped-def]
    return await asyncio.wait_for(subscription.get(), timeout)

