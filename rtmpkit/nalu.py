"""Splitting Annex-B H.264 byte streams into NAL units."""

from __future__ import annotations

from .errors import BytesReadError

START_CODE = b"\x00\x00\x01"

H264_NAL_IDR = 5
H264_NAL_SPS = 7
H264_NAL_PPS = 8

_NAL_TYPE_MASK = 0x1F
_DUMP_RULE = "==========="
_DUMP_WIDTH = 16


def find_start_code(data: bytes) -> int | None:
    """Return the offset of the first 00 00 01 start code, or None."""
    position = bytes(data).find(START_CODE)
    return None if position < 0 else position


def split_nalus(data: bytes) -> list[bytes]:
    """Split an Annex-B buffer into NAL units with their start codes removed.

    Zero bytes just before a following start code belong to that start code
    (the four-byte 00 00 00 01 form) and are dropped. Anything before the
    first start code is ignored; a buffer with no start code yields nothing.
    """
    rest = bytes(data)
    nalus: list[bytes] = []
    while rest:
        first = find_start_code(rest)
        if first is None:
            break
        body_start = first + len(START_CODE)
        distance = find_start_code(rest[body_start:])
        if distance is None:
            chunk, rest = rest, b""
        else:
            end = body_start + distance
            while end > 0 and rest[end - 1] == 0:
                end -= 1
            chunk, rest = rest[:end], rest[end:]
        nalus.append(chunk[body_start:])
    return nalus


def nalu_type(nalu: bytes) -> int:
    """Return the H.264 nal_unit_type held in the low five bits of the first byte."""
    if not nalu:
        raise BytesReadError("not enough bytes: wanted 1, have 0")
    return nalu[0] & _NAL_TYPE_MASK


def hex_dump(data: bytes) -> str:
    """Render bytes as upper-case hex, sixteen to a line, between two rules."""
    parts = [f"{_DUMP_RULE}{len(data)}\n"]
    for count, byte in enumerate(bytes(data), start=1):
        parts.append(f"{byte:02X} ")
        if count % _DUMP_WIDTH == 0:
            parts.append("\n")
    parts.append(_DUMP_RULE)
    return "".join(parts)