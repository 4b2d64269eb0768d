import struct

import pytest

from mybinlog.reader import (
    BinlogError,
    ByteReader,
    UnexpectedDataError,
    decode_utf8,
    null_terminated,
    xor_bytes,
)


def test_fixed_width_integers_round_trip():
    data = (
        struct.pack("<B", 200)
        + struct.pack("<H", 513)
        + struct.pack(">H", 513)
        + (70000).to_bytes(3, "little")
        + struct.pack("<I", 4000000000)
        + (123456789012).to_bytes(6, "little")
        + struct.pack("<Q", 2**63 + 5)
    )
    reader = ByteReader(data)
    assert reader.read_u8() == 200
    assert reader.read_u16() == 513
    assert reader.read_u16_be() == 513
    assert reader.read_u24() == 70000
    assert reader.read_u32() == 4000000000
    assert reader.read_u48() == 123456789012
    assert reader.read_u64() == 2**63 + 5
    assert reader.available() == 0
    assert reader.position() == len(data)


def test_read_past_end_raises():
    reader = ByteReader(b"\x01")
    with pytest.raises(BinlogError):
        reader.read_u16()


def test_skip_back_before_start_raises():
    reader = ByteReader(b"abc")
    reader.skip(1)
    with pytest.raises(BinlogError):
        reader.skip(-2)


def test_skip_moves_position():
    reader = ByteReader(b"abcdef")
    reader.skip(4)
    assert reader.read_bytes(2) == b"ef"
    reader.skip(-3)
    assert reader.read_rest() == b"def"


@pytest.mark.parametrize("value", [0, 1, 250])
def test_packed_number_single_byte(value):
    assert ByteReader(bytes([value])).read_packed_number() == value


@pytest.mark.parametrize(
    "prefix, fmt_bytes, value",
    [
        (0xFC, lambda v: v.to_bytes(2, "little"), 300),
        (0xFD, lambda v: v.to_bytes(3, "little"), 0x123456),
        (0xFE, lambda v: v.to_bytes(8, "little"), 2**40 + 7),
    ],
)
def test_packed_number_multi_byte(prefix, fmt_bytes, value):
    reader = ByteReader(bytes([prefix]) + fmt_bytes(value))
    assert reader.read_packed_number() == value
    assert reader.available() == 0


@pytest.mark.parametrize("prefix", [0xFB, 0xFF])
def test_packed_number_invalid_prefix(prefix):
    with pytest.raises(UnexpectedDataError):
        ByteReader(bytes([prefix, 0, 0])).read_packed_number()


def test_read_string_and_without_terminator():
    reader = ByteReader(b"db\x00table")
    assert reader.read_string_without_terminator(2) == "db"
    assert reader.read_string(5) == "table"


def test_read_null_terminated_strings():
    reader = ByteReader(null_terminated("5.7.40") + null_terminated("native"))
    assert reader.read_null_terminated_string() == "5.7.40"
    assert reader.read_null_terminated_string() == "native"
    assert reader.available() == 0


def test_read_null_terminated_string_without_terminator_drops_last_byte():
    reader = ByteReader(b"abcd")
    assert reader.read_null_terminated_string() == "abc"
    assert reader.available() == 0


def test_read_bits_little_endian():
    reader = ByteReader(bytes([0b00000101]))
    assert reader.read_bits(3, False) == [True, False, True]


def test_read_bits_big_endian_reverses_bytes():
    data = bytes([0x01, 0x00])
    little = ByteReader(data).read_bits(16, False)
    big = ByteReader(data).read_bits(16, True)
    assert little.index(True) == 0
    assert big.index(True) == 8
    assert sum(little) == sum(big) == 1


def test_read_bits_as_bytes():
    data = bytes([0x12, 0x34, 0x56])
    assert ByteReader(data).read_bits_as_bytes(17, False) == data
    assert ByteReader(data).read_bits_as_bytes(17, True) == data[::-1]
    reader = ByteReader(data)
    reader.read_bits_as_bytes(9, False)
    assert reader.available() == 1


def test_decode_utf8_valid_and_lossy():
    assert decode_utf8("中文".encode("utf-8")) == "中文"
    assert decode_utf8(b"a\xffb") == "a\ufffdb"


def test_xor_bytes_is_involution():
    data = b"scramble-data-123"
    key = b"key"
    assert xor_bytes(xor_bytes(data, key), key) == data
    assert len(xor_bytes(data, key)) == len(data)


def test_xor_bytes_with_zero_key_is_identity():
    assert xor_bytes(b"abc", b"\x00") == b"abc"


def test_null_terminated():
    assert null_terminated("root") == b"root\x00"