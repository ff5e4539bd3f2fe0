"""Reading and writing RTMP protocol control messages."""

from __future__ import annotations

import contextlib
from typing import Iterator

from .errors import BytesReadError, ControlMessageReadError
from .messages_define import MessageTypeId, SetPeerBandwidthProperties
from .wire import AsyncByteWriter, ByteReader


@contextlib.contextmanager
def _as_read_error() -> Iterator[None]:
    try:
        yield
    except BytesReadError as err:
        raise ControlMessageReadError(f"bytes read error: {err}") from err


class ProtocolControlMessageReader:
    """Decodes the payloads of protocol control messages."""

    def __init__(self, reader: ByteReader | bytes) -> None:
        self.reader = reader if isinstance(reader, ByteReader) else ByteReader(reader)

    def _read_u32(self) -> int:
        with _as_read_error():
            return self.reader.read_u32()

    def read_set_chunk_size(self) -> int:
        return self._read_u32()

    def read_abort_message(self) -> int:
        return self._read_u32()

    def read_acknowledgement(self) -> int:
        return self._read_u32()

    def read_window_acknowledgement_size(self) -> int:
        return self._read_u32()

    def read_set_peer_bandwidth(self) -> SetPeerBandwidthProperties:
        with _as_read_error():
            window_size = self.reader.read_u32()
            limit_type = self.reader.read_u8()
        return SetPeerBandwidthProperties(window_size, limit_type)


class ProtocolControlMessagesWriter:
    """Encodes protocol control messages as single type-0 chunks on stream 2."""

    def __init__(self, writer: AsyncByteWriter) -> None:
        self.writer = writer

    def write_control_message_header(self, msg_type_id: int, length: int) -> None:
        self.writer.write_u8(0x02)  # fmt 0, chunk stream id 2
        self.writer.write_u24(0)  # timestamp
        self.writer.write_u24(length)
        self.writer.write_u8(int(msg_type_id))
        self.writer.write_u32(0)  # message stream id

    async def write_set_chunk_size(self, chunk_size: int) -> None:
        self.write_control_message_header(MessageTypeId.SET_CHUNK_SIZE, 4)
        self.writer.write_u32(chunk_size & 0x7FFFFFFF)  # top bit must be 0
        await self.writer.flush()

    async def write_abort_message(self, chunk_stream_id: int) -> None:
        self.write_control_message_header(MessageTypeId.ABORT, 4)
        self.writer.write_u32(chunk_stream_id)
        await self.writer.flush()

    async def write_acknowledgement(self, sequence_number: int) -> None:
        self.write_control_message_header(MessageTypeId.ACKNOWLEDGEMENT, 4)
        self.writer.write_u32(sequence_number)
        await self.writer.flush()

    async def write_window_acknowledgement_size(self, window_size: int) -> None:
        self.write_control_message_header(MessageTypeId.WIN_ACKNOWLEDGEMENT_SIZE, 4)
        self.writer.write_u32(window_size)
        await self.writer.flush()

    async def write_set_peer_bandwidth(self, window_size: int, limit_type: int) -> None:
        self.write_control_message_header(MessageTypeId.SET_PEER_BANDWIDTH, 5)
        self.writer.write_u32(window_size)
        self.writer.write_u8(limit_type)
        await self.writer.flush()