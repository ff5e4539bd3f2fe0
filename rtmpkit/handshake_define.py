"""Handshake constants, state enums and the handshake clock."""

from __future__ import annotations

import enum
import time


class SchemaVersion(enum.Enum):
    """Where the digest sits inside a complex-handshake C1/S1 packet."""

    SCHEMA0 = 0
    SCHEMA1 = 1
    UNKNOWN = 2


class ClientHandshakeState(enum.Enum):
    WRITE_C0C1 = enum.auto()
    READ_S0S1S2 = enum.auto()
    WRITE_C2 = enum.auto()
    FINISH = enum.auto()


class ServerHandshakeState(enum.Enum):
    READ_C0C1 = enum.auto()
    WRITE_S0S1S2 = enum.auto()
    READ_C2 = enum.auto()
    FINISH = enum.auto()


RTMP_VERSION = 3
RTMP_HANDSHAKE_SIZE = 1536

RTMP_SERVER_VERSION = bytes([0x0D, 0x0E, 0x0A, 0x0D])
RTMP_CLIENT_VERSION = bytes([0x0C, 0x00, 0x0D, 0x0E])

RTMP_DIGEST_LENGTH = 32
RTMP_SERVER_KEY_FIRST_HALF = "Genuine Adobe Flash Media Server 001"
RTMP_CLIENT_KEY_FIRST_HALF = "Genuine Adobe Flash Player 001"

RTMP_SERVER_KEY = RTMP_SERVER_KEY_FIRST_HALF.encode("ascii") + bytes(
    [
        0xF0, 0xEE, 0xC2, 0x4A, 0x80, 0x68, 0xBE, 0xE8,
        0x2E, 0x00, 0xD0, 0xD1, 0x02, 0x9E, 0x7E, 0x57,
        0x6E, 0xEC, 0x5D, 0x2D, 0x29, 0x80, 0x6F, 0xAB,
        0x93, 0xB8, 0xE6, 0x36, 0xCF, 0xEB, 0x31, 0xAE,
    ]
)


def current_time() -> int:
    """Nanoseconds since the Unix epoch, truncated to 32 bits; 0 before the epoch."""
    nanos = time.time_ns()
    if nanos < 0:
        return 0
    return nanos & 0xFFFFFFFF