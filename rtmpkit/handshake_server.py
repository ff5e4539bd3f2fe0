"""Server side of the RTMP handshake, simple and complex (digest) forms."""

from __future__ import annotations

import contextlib
import logging
import os
from typing import Iterator

from .digest import DigestProcessor
from .errors import BytesReadError, HandshakeError
from .handshake_define import (
    RTMP_CLIENT_KEY_FIRST_HALF,
    RTMP_DIGEST_LENGTH,
    RTMP_HANDSHAKE_SIZE,
    RTMP_SERVER_KEY,
    RTMP_SERVER_KEY_FIRST_HALF,
    RTMP_SERVER_VERSION,
    RTMP_VERSION,
    ServerHandshakeState,
    current_time,
)
from .wire import AsyncByteWriter, ByteReader, Sink

log = logging.getLogger(__name__)


@contextlib.contextmanager
def _as_handshake_error() -> Iterator[None]:
    try:
        yield
    except BytesReadError as err:
        raise HandshakeError(f"bytes read error: {err}") from err


def _random(size: int) -> bytes:
    return os.urandom(size)


class _ServerHandshakeBase:
    _label = ""

    def __init__(self, sink: Sink) -> None:
        self.reader = ByteReader()
        self.writer = AsyncByteWriter(sink)
        self.state = ServerHandshakeState.READ_C0C1
        self._c1_timestamp = 0

    def _extend(self, data: bytes) -> None:
        self.reader.extend(data)

    async def _run(self) -> None:
        while True:
            if self.state is ServerHandshakeState.READ_C0C1:
                log.info("[ S<-C ] [%s handshake] read C0C1", self._label)
                with _as_handshake_error():
                    self.read_c0()
                    self.read_c1()
                self.state = ServerHandshakeState.WRITE_S0S1S2
            elif self.state is ServerHandshakeState.WRITE_S0S1S2:
                log.info("[ S->C ] [%s handshake] write S0S1S2", self._label)
                self.write_s0()
                self.write_s1()
                self.write_s2()
                await self.writer.flush()
                self.state = ServerHandshakeState.READ_C2
                break
            elif self.state is ServerHandshakeState.READ_C2:
                log.info("[ S<-C ] [%s handshake] read C2", self._label)
                with _as_handshake_error():
                    self.read_c2()
                self.state = ServerHandshakeState.FINISH
            else:
                log.info("%s handshake successfully..", self._label)
                break

    def read_c1(self) -> None:
        raise NotImplementedError

    def write_s1(self) -> None:
        raise NotImplementedError

    def write_s2(self) -> None:
        raise NotImplementedError

    def read_c0(self) -> None:
        self.reader.read_u8()

    def read_c2(self) -> None:
        self.reader.read_bytes(RTMP_HANDSHAKE_SIZE)

    def write_s0(self) -> None:
        self.writer.write_u8(RTMP_VERSION)


class SimpleHandshakeServer(_ServerHandshakeBase):
    """Plain handshake: S1 is random, S2 echoes C1."""

    _label = "simple"

    def __init__(self, sink: Sink) -> None:
        super().__init__(sink)
        self._c1_bytes = b""

    def extend_data(self, data: bytes) -> None:
        """Feed bytes received from the client."""
        self._extend(data)

    async def handshake(self) -> None:
        """Advance the handshake as far as the buffered data allows."""
        await self._run()

    def read_c0(self) -> None:
        super().read_c0()

    def read_c1(self) -> None:
        self._c1_bytes = self.reader.read_bytes(RTMP_HANDSHAKE_SIZE)
        self._c1_timestamp = int.from_bytes(self._c1_bytes[:4], "big")

    def read_c2(self) -> None:
        super().read_c2()

    def write_s0(self) -> None:
        super().write_s0()

    def write_s1(self) -> None:
        self.writer.write_u32(current_time())
        self.writer.write_u32(self._c1_timestamp)
        self.writer.write_random_bytes(RTMP_HANDSHAKE_SIZE - 8)

    def write_s2(self) -> None:
        self.writer.write(self._c1_bytes)


class ComplexHandshakeServer(_ServerHandshakeBase):
    """Digest handshake: C1 must carry a valid client digest."""

    _label = "complex"

    def __init__(self, sink: Sink) -> None:
        super().__init__(sink)
        self._c1_digest = b""

    def extend_data(self, data: bytes) -> None:
        """Feed bytes received from the client."""
        self._extend(data)

    async def handshake(self) -> None:
        """Advance the handshake as far as the buffered data allows."""
        await self._run()

    def read_c0(self) -> None:
        super().read_c0()

    def read_c1(self) -> None:
        c1 = self.reader.read_bytes(RTMP_HANDSHAKE_SIZE)
        self._c1_timestamp = int.from_bytes(c1[:4], "big")
        processor = DigestProcessor(c1, RTMP_CLIENT_KEY_FIRST_HALF.encode("ascii"))
        self._c1_digest, _ = processor.read_digest()

    def read_c2(self) -> None:
        super().read_c2()

    def write_s0(self) -> None:
        super().write_s0()

    def write_s1(self) -> None:
        packet = (
            current_time().to_bytes(4, "big")
            + RTMP_SERVER_VERSION
            + _random(RTMP_HANDSHAKE_SIZE - 8)
        )
        processor = DigestProcessor(packet, RTMP_SERVER_KEY_FIRST_HALF.encode("ascii"))
        self.writer.write(processor.generate_and_fill_digest())

    def write_s2(self) -> None:
        packet = (
            current_time().to_bytes(4, "big")
            + self._c1_timestamp.to_bytes(4, "big")
            + _random(RTMP_HANDSHAKE_SIZE - 8)
        )
        tmp_key = DigestProcessor(b"", RTMP_SERVER_KEY).make_digest(self._c1_digest)
        body = packet[: RTMP_HANDSHAKE_SIZE - RTMP_DIGEST_LENGTH]
        digest = DigestProcessor(b"", tmp_key).make_digest(body)
        self.writer.write(body + digest)


class HandshakeServer:
    """Tries the complex handshake and falls back to the simple one."""

    def __init__(self, sink: Sink) -> None:
        self._simple = SimpleHandshakeServer(sink)
        self._complex = ComplexHandshakeServer(sink)
        self._is_complex = True
        self._saved_data = bytearray()

    @property
    def is_complex(self) -> bool:
        return self._is_complex

    def _active(self) -> _ServerHandshakeBase:
        return self._complex if self._is_complex else self._simple

    def extend_data(self, data: bytes) -> None:
        if self._is_complex:
            self._complex.extend_data(data)
            self._saved_data.extend(data)
        else:
            self._simple.extend_data(data)

    def state(self) -> ServerHandshakeState:
        return self._active().state

    def remaining_bytes(self) -> bytes:
        """Bytes received beyond what the handshake has consumed."""
        return self._active().reader.remaining()

    async def handshake(self) -> None:
        if not self._is_complex:
            await self._simple.handshake()
            return
        try:
            await self._complex.handshake()
        except HandshakeError as err:
            log.warning("complex handshake failed.. err:%s", err)
            self._is_complex = False
            self.extend_data(bytes(self._saved_data))
            await self._simple.handshake()