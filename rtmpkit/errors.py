"""Exception types raised by the RTMP handshake and control-message code."""

from __future__ import annotations

import enum


class RtmpError(Exception):
    """Base class of every error raised by this package."""


class BytesReadError(RtmpError):
    """Raised when a buffer holds fewer bytes than a read asks for."""


class HandshakeError(RtmpError):
    """Raised when an RTMP handshake cannot proceed."""


class DigestErrorKind(enum.Enum):
    """What went wrong while computing or checking a handshake digest."""

    BYTES_READ = "bytes read error"
    DIGEST_LENGTH_NOT_CORRECT = "digest length not correct"
    CANNOT_GENERATE = "cannot generate digest"
    UNKNOWN_SCHEMA = "unknow schema"


class DigestError(HandshakeError):
    """Raised when a handshake digest is missing, malformed or wrong."""

    def __init__(self, kind: DigestErrorKind, detail: str | None = None) -> None:
        self.kind = kind
        self.detail = detail
        message = kind.value if detail is None else f"{kind.value}: {detail}"
        super().__init__(message)


class ControlMessageReadError(RtmpError):
    """Raised when a protocol control message payload is truncated."""