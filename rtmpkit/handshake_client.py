"""Client side of the simple (plain) RTMP handshake."""

from __future__ import annotations

import contextlib
from typing import Iterator

from .errors import BytesReadError, HandshakeError
from .handshake_define import (
    RTMP_HANDSHAKE_SIZE,
    RTMP_VERSION,
    ClientHandshakeState,
    current_time,
)
from .wire import AsyncByteWriter, ByteReader, Sink


@contextlib.contextmanager
def _as_handshake_error() -> Iterator[None]:
    try:
        yield
    except BytesReadError as err:
        raise HandshakeError(f"bytes read error: {err}") from err


class SimpleHandshakeClient:
    """Drives C0/C1, reads S0/S1/S2 and answers with C2."""

    def __init__(self, sink: Sink) -> None:
        self.reader = ByteReader()
        self.writer = AsyncByteWriter(sink)
        self.state = ClientHandshakeState.WRITE_C0C1
        self._s1_bytes = b""

    def extend_data(self, data: bytes) -> None:
        """Feed bytes received from the server."""
        self.reader.extend(data)

    async def flush(self) -> None:
        await self.writer.flush()

    async def handshake(self) -> None:
        """Advance the handshake as far as the buffered data allows."""
        while True:
            if self.state is ClientHandshakeState.WRITE_C0C1:
                self.write_c0()
                self.write_c1()
                await self.flush()
                self.state = ClientHandshakeState.READ_S0S1S2
                break
            if self.state is ClientHandshakeState.READ_S0S1S2:
                with _as_handshake_error():
                    self.read_s0()
                    self.read_s1()
                    self.read_s2()
                self.state = ClientHandshakeState.WRITE_C2
            elif self.state is ClientHandshakeState.WRITE_C2:
                self.write_c2()
                await self.flush()
                self.state = ClientHandshakeState.FINISH
            else:
                break

    def write_c0(self) -> None:
        self.writer.write_u8(RTMP_VERSION)

    def write_c1(self) -> None:
        self.writer.write_u32(current_time())
        self.writer.write_u32(0)
        self.writer.write_random_bytes(RTMP_HANDSHAKE_SIZE - 8)

    def write_c2(self) -> None:
        self.writer.write(self._s1_bytes)

    def read_s0(self) -> None:
        self.reader.read_u8()

    def read_s1(self) -> None:
        self._s1_bytes = self.reader.read_bytes(RTMP_HANDSHAKE_SIZE)

    def read_s2(self) -> None:
        self.reader.read_bytes(RTMP_HANDSHAKE_SIZE)