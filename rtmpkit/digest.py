"""HMAC-SHA256 digests embedded in complex RTMP handshake packets.

A 1536-byte C1/S1 packet carries a 32-byte digest at an offset computed
from four bytes of the packet; the digest is the HMAC of the packet with
the digest bytes removed.
"""

from __future__ import annotations

import hashlib
import hmac

from .errors import DigestError, DigestErrorKind
from .handshake_define import RTMP_DIGEST_LENGTH, SchemaVersion

_OFFSET_MODULUS = 728
_SCHEMA_LAYOUT = {
    SchemaVersion.SCHEMA0: (772, 776),
    SchemaVersion.SCHEMA1: (8, 12),
}


class DigestProcessor:
    """Finds, checks and fills the digest of one handshake packet."""

    def __init__(self, data: bytes, key: bytes | str) -> None:
        self._data = bytes(data)
        self._key = key.encode() if isinstance(key, str) else bytes(key)

    def read_digest(self) -> tuple[bytes, SchemaVersion]:
        """Return the valid digest and the schema it was found under."""
        try:
            return self._generate_and_validate(SchemaVersion.SCHEMA0), SchemaVersion.SCHEMA0
        except DigestError:
            pass
        return self._generate_and_validate(SchemaVersion.SCHEMA1), SchemaVersion.SCHEMA1

    def generate_and_fill_digest(self) -> bytes:
        """Return the packet with a freshly computed schema-0 digest in place."""
        left, _, right = self._split(SchemaVersion.SCHEMA0)
        return left + self.make_digest(left + right) + right

    def generate_digest(self) -> bytes:
        """Return the schema-0 digest the packet ought to carry."""
        left, _, right = self._split(SchemaVersion.SCHEMA0)
        return self.make_digest(left + right)

    def make_digest(self, raw_message: bytes) -> bytes:
        """HMAC-SHA256 of ``raw_message`` under this processor's key."""
        digest = hmac.new(self._key, bytes(raw_message), hashlib.sha256).digest()
        if len(digest) != RTMP_DIGEST_LENGTH:
            raise DigestError(DigestErrorKind.DIGEST_LENGTH_NOT_CORRECT)
        return digest

    def _digest_offset(self, version: SchemaVersion) -> int:
        layout = _SCHEMA_LAYOUT.get(version)
        if layout is None:
            raise DigestError(DigestErrorKind.UNKNOWN_SCHEMA)
        start, base = layout
        seed = self._data[start : start + 4]
        if len(seed) < 4:
            raise DigestError(
                DigestErrorKind.BYTES_READ,
                f"packet of {len(self._data)} bytes has no offset at {start}",
            )
        return sum(seed) % _OFFSET_MODULUS + base

    def _split(self, version: SchemaVersion) -> tuple[bytes, bytes, bytes]:
        offset = self._digest_offset(version)
        end = offset + RTMP_DIGEST_LENGTH
        if end > len(self._data):
            raise DigestError(
                DigestErrorKind.BYTES_READ,
                f"packet of {len(self._data)} bytes ends before digest end {end}",
            )
        return self._data[:offset], self._data[offset:end], self._data[end:]

    def _generate_and_validate(self, version: SchemaVersion) -> bytes:
        left, digest, right = self._split(version)
        if hmac.compare_digest(digest, self.make_digest(left + right)):
            return digest
        raise DigestError(DigestErrorKind.CANNOT_GENERATE)