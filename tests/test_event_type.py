import pytest

from mybinlog.event_type import ChecksumType, EventType


@pytest.mark.parametrize(
    "code, expected",
    [
        (2, EventType.QUERY),
        (15, EventType.FORMAT_DESCRIPTION),
        (19, EventType.TABLE_MAP),
        (30, EventType.EXT_WRITE_ROWS),
        (40, EventType.TRANSACTION_PAYLOAD),
        (163, EventType.MARIADB_GTID_LIST),
    ],
)
def test_from_code_known(code, expected):
    assert EventType.from_code(code) is expected


@pytest.mark.parametrize("code", [41, 100, 159, 164, 255])
def test_from_code_unknown(code):
    assert EventType.from_code(code) is EventType.UNKNOWN


def test_codes_round_trip():
    for event_type in EventType:
        assert EventType.from_code(int(event_type)) is event_type


def test_checksum_from_code():
    assert ChecksumType.from_code(1) is ChecksumType.CRC32
    assert ChecksumType.from_code(0) is ChecksumType.NONE
    assert ChecksumType.from_code(2) is ChecksumType.NONE


def test_checksum_from_name_is_exact():
    assert ChecksumType.from_name("CRC32") is ChecksumType.CRC32
    assert ChecksumType.from_name("crc32") is ChecksumType.NONE
    assert ChecksumType.from_name("NONE") is ChecksumType.NONE


def test_checksum_length():
    assert ChecksumType.CRC32.length() == 4
    assert ChecksumType.NONE.length() == 0