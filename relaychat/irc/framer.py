"""Reassembly of the inbound byte stream into protocol lines."""

from __future__ import annotations

from collections.abc import Iterator

from ..errors.internal import LineBufferOverflowError


class LineFramer:
    """Buffers raw chunks and yields complete lines in arrival order.

    A line ends at LF; a CR right before it is part of the terminator. Lines
    are decoded as UTF-8 only once complete, so a multi-byte character split
    across two reads decodes correctly. Undecodable bytes are replaced rather
    than rejected.
    """

    def __init__(self, max_buffer: int | None = None, encoding: str = "utf-8"):
        self._buffer = bytearray()
        self.max_buffer = max_buffer or None
        self.encoding = encoding

    @property
    def pending(self) -> int:
        """Number of buffered bytes still waiting for a terminator."""
        return len(self._buffer)

    def reset(self) -> None:
        self._buffer.clear()

    def feed(self, data: bytes) -> Iterator[str]:
        """Append ``data`` and yield every line it completes.

        Empty lines (after trimming) are skipped. Whatever follows the last
        terminator stays buffered for the next call.

        Raises:
            LineBufferOverflowError: the unterminated remainder grew past
                ``max_buffer``. The buffer is cleared before raising.
        """
        self._buffer.extend(data)
        while True:
            end = self._buffer.find(b"\n")
            if end < 0:
                break
            raw = bytes(self._buffer[:end])
            del self._buffer[: end + 1]
            line = raw.rstrip(b"\r").decode(self.encoding, errors="replace").strip()
            if line:
                yield line
        if self.max_buffer is not None and len(self._buffer) > self.max_buffer:
            size = len(self._buffer)
            self._buffer.clear()
            raise LineBufferOverflowError(size, self.max_buffer)
