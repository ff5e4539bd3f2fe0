"""Big-endian byte reading and buffered asynchronous writing."""

from __future__ import annotations

import os
from typing import Awaitable, Callable

from .errors import BytesReadError

Sink = Callable[[bytes], Awaitable[object]]


class ByteReader:
    """A consuming reader over a growable byte buffer."""

    def __init__(self, data: bytes = b"") -> None:
        self._buffer = bytearray(data)

    def extend(self, data: bytes) -> None:
        """Append more bytes to the end of the buffer."""
        self._buffer.extend(data)

    def _take(self, size: int) -> bytes:
        if size < 0:
            raise ValueError("size must not be negative")
        if size > len(self._buffer):
            raise BytesReadError(
                f"not enough bytes: wanted {size}, have {len(self._buffer)}"
            )
        chunk = bytes(self._buffer[:size])
        del self._buffer[:size]
        return chunk

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u24(self) -> int:
        return int.from_bytes(self._take(3), "big")

    def read_u32(self) -> int:
        return int.from_bytes(self._take(4), "big")

    def read_bytes(self, size: int) -> bytes:
        return self._take(size)

    def remaining(self) -> bytes:
        """Return the unread bytes without consuming them."""
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)


class AsyncByteWriter:
    """Buffers written bytes and hands them to an async sink on flush."""

    def __init__(self, sink: Sink) -> None:
        self._sink = sink
        self._buffer = bytearray()

    def write(self, data: bytes) -> None:
        self._buffer.extend(data)

    def _write_uint(self, value: int, width: int) -> None:
        if not 0 <= value < 1 << (8 * width):
            raise ValueError(f"{value} does not fit in {width} bytes")
        self._buffer.extend(value.to_bytes(width, "big"))

    def write_u8(self, value: int) -> None:
        self._write_uint(value, 1)

    def write_u24(self, value: int) -> None:
        self._write_uint(value, 3)

    def write_u32(self, value: int) -> None:
        self._write_uint(value, 4)

    def write_random_bytes(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must not be negative")
        self._buffer.extend(os.urandom(size))

    def pending(self) -> bytes:
        """Return the bytes written since the last flush."""
        return bytes(self._buffer)

    async def flush(self) -> None:
        """Send everything buffered to the sink and clear the buffer."""
        if not self._buffer:
            return
        data = bytes(self._buffer)
        self._buffer.clear()
        await self._sink(data)