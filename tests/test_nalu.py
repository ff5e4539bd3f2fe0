import pytest

from rtmpkit.errors import BytesReadError
from rtmpkit.nalu import (
    H264_NAL_IDR,
    H264_NAL_PPS,
    H264_NAL_SPS,
    find_start_code,
    hex_dump,
    nalu_type,
    split_nalus,
)

SPS = bytes([0x67, 0x42, 0xC0, 0x1E, 0xAB])
PPS = bytes([0x68, 0xCE, 0x3C, 0x80])
IDR = bytes([0x65, 0x88, 0x84, 0x21, 0x10])


def test_find_start_code_at_beginning():
    assert find_start_code(b"\x00\x00\x01\x67") == 0


def test_find_start_code_after_leading_zero():
    assert find_start_code(b"\x00\x00\x00\x01\x67") == 1


def test_find_start_code_missing():
    assert find_start_code(b"\x00\x00\x02\x00\x01") is None
    assert find_start_code(b"") is None


def test_split_three_byte_start_codes():
    data = b"\x00\x00\x01" + SPS + b"\x00\x00\x01" + PPS
    assert split_nalus(data) == [SPS, PPS]


def test_split_four_byte_start_codes_drop_zero_prefix():
    data = b"\x00\x00\x00\x01" + SPS + b"\x00\x00\x00\x01" + PPS + b"\x00\x00\x00\x01" + IDR
    assert split_nalus(data) == [SPS, PPS, IDR]


def test_split_ignores_leading_garbage():
    data = b"\xAA\xBB" + b"\x00\x00\x01" + IDR
    assert split_nalus(data) == [IDR]


def test_split_without_start_code_is_empty():
    assert split_nalus(IDR) == []
    assert split_nalus(b"") == []


def test_split_accepts_bytearray():
    data = bytearray(b"\x00\x00\x01" + PPS)
    assert split_nalus(data) == [PPS]


def test_split_adjacent_start_codes_give_empty_unit():
    data = b"\x00\x00\x01" + b"\x00\x00\x01" + IDR
    assert split_nalus(data) == [b"", IDR]


def test_split_round_trip_with_join():
    units = [SPS, PPS, IDR]
    data = b"".join(b"\x00\x00\x00\x01" + unit for unit in units)
    assert split_nalus(data) == units


def test_nalu_types_of_common_units():
    assert nalu_type(SPS) == H264_NAL_SPS
    assert nalu_type(PPS) == H264_NAL_PPS
    assert nalu_type(IDR) == H264_NAL_IDR


def test_nalu_type_masks_high_bits():
    assert nalu_type(bytes([0x80 | 0x60 | H264_NAL_IDR])) == H264_NAL_IDR


def test_nalu_type_of_empty_unit_raises():
    with pytest.raises(BytesReadError):
        nalu_type(b"")


def test_split_then_classify():
    data = b"\x00\x00\x00\x01" + SPS + b"\x00\x00\x01" + PPS + b"\x00\x00\x01" + IDR
    types = [nalu_type(unit) for unit in split_nalus(data)]
    assert types == [H264_NAL_SPS, H264_NAL_PPS, H264_NAL_IDR]


def test_hex_dump_short():
    assert hex_dump(b"\x01\xab") == "===========2\n01 AB ==========="


def test_hex_dump_breaks_every_sixteen_bytes():
    dump = hex_dump(bytes(range(17)))
    lines = dump.split("\n")
    assert lines[0] == "===========17"
    assert len(lines[1].split()) == 16
    assert lines[2] == "10 ==========="


def test_hex_dump_empty():
    assert hex_dump(b"") == "===========0\n==========="