"""RTMP message type identifiers and decoded message payloads."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class MessageTypeId(enum.IntEnum):
    SET_CHUNK_SIZE = 1
    ABORT = 2
    ACKNOWLEDGEMENT = 3
    USER_CONTROL_EVENT = 4
    WIN_ACKNOWLEDGEMENT_SIZE = 5
    SET_PEER_BANDWIDTH = 6
    AUDIO = 8
    VIDEO = 9
    DATA_AMF3 = 15
    SHARED_OBJ_AMF3 = 16
    COMMAND_AMF3 = 17
    DATA_AMF0 = 18
    SHARED_OBJ_AMF0 = 19
    COMMAND_AMF0 = 20
    AGGREGATE = 22


@dataclass(frozen=True)
class SetPeerBandwidthProperties:
    window_size: int
    limit_type: int


@dataclass(frozen=True)
class SetChunkSize:
    chunk_size: int


@dataclass(frozen=True)
class AbortMessage:
    chunk_stream_id: int


@dataclass(frozen=True)
class Acknowledgement:
    sequence_number: int


@dataclass(frozen=True)
class WindowAcknowledgementSize:
    size: int


@dataclass(frozen=True)
class SetPeerBandwidth:
    properties: SetPeerBandwidthProperties


@dataclass(frozen=True)
class AudioData:
    data: bytes


@dataclass(frozen=True)
class VideoData:
    data: bytes


@dataclass(frozen=True)
class AmfData:
    raw_data: bytes


@dataclass(frozen=True)
class SetBufferLength:
    stream_id: int
    buffer_length: int


@dataclass(frozen=True)
class StreamBegin:
    stream_id: int


@dataclass(frozen=True)
class StreamIsRecorded:
    stream_id: int