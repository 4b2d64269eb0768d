import pytest

from mybinlog.reader import BinlogError, ByteReader, UnexpectedDataError
from mybinlog.table_metadata import TableMetadata

COLUMN_TYPES = [1, 3, 4, 5, 246, 253, 254]
COLUMN_METAS = [0, 0, 0, 0, 0, 0, 0]


def parse(data, column_types=COLUMN_TYPES, column_metas=COLUMN_METAS):
    return TableMetadata.parse(ByteReader(bytes(data)), column_types, column_metas)


def test_parse_signedness_metadata():
    result = parse([1, 1, 0b11010000])
    assert len(result.columns) == 7
    assert result.columns[0].is_signed is True
    assert result.columns[1].is_signed is True
    assert result.columns[2].is_signed is False
    assert result.columns[3].is_signed is True
    assert result.columns[4].is_signed is False
    assert result.columns[5].is_signed is None
    assert result.columns[6].is_signed is None


def test_parse_column_names_metadata():
    result = parse([4, 3, 2, ord("i"), ord("d")])
    assert len(result.columns) == 7
    assert result.columns[0].column_name == "id"
    assert [c.column_name for c in result.columns[1:]] == [None] * 6


def test_parse_default_charset_metadata():
    result = parse([2, 1, 33])
    assert result.default_charset is not None
    assert result.default_charset.default_charset_collation == 33
    assert result.default_charset.charset_collations == []


def test_parse_enum_string_values_metadata():
    data = [6, 7, 1, 5] + list(b"small")
    result = parse(data, [1, 254, 3], [0, (247 << 8) | 1, 0])
    assert len(result.columns) == 3
    assert result.columns[0].enum_string_values is None
    assert result.columns[1].enum_string_values == ["small"]
    assert result.columns[2].enum_string_values is None


def test_parse_multiple_metadata_types():
    data = [1, 1, 0b10100000, 4, 3, 2, ord("i"), ord("d")]
    result = parse(data)
    assert len(result.columns) == 7
    assert result.columns[0].is_signed is True
    assert result.columns[1].is_signed is False
    assert result.columns[2].is_signed is True
    assert result.columns[0].column_name == "id"
    assert result.columns[1].column_name is None


def test_parse_empty_metadata():
    result = parse([])
    assert len(result.columns) == 7
    assert result.default_charset is None
    assert result.enum_and_set_default_charset is None
    for column in result.columns:
        assert column.column_name is None
        assert column.is_signed is None
        assert column.charset_collation is None
        assert column.enum_string_values is None
        assert column.set_string_values is None
        assert column.geometry_type is None
        assert column.is_simple_primary_key is None
        assert column.primary_key_prefix is None
        assert column.enum_and_set_charset_collation is None
        assert column.is_visible is None


def test_parse_set_string_values_goes_to_set_column():
    data = [5, 5, 2, 1, ord("a"), 1, ord("b")]
    result = parse(data, [3, 254], [0, (248 << 8) | 1])
    assert result.columns[0].set_string_values is None
    assert result.columns[1].set_string_values == ["a", "b"]


def test_default_charset_with_exceptions():
    result = parse([2, 3, 33, 1, 8])
    assert result.default_charset.default_charset_collation == 33
    assert result.default_charset.charset_collations == [(1, 8)]


def test_enum_and_set_default_charset():
    result = parse([10, 1, 33])
    assert result.default_charset is None
    assert result.enum_and_set_default_charset.default_charset_collation == 33


def test_column_charsets_in_order():
    result = parse([3, 2, 33, 8])
    assert result.columns[0].charset_collation == 33
    assert result.columns[1].charset_collation == 8
    assert result.columns[2].charset_collation is None


def test_column_visibility():
    result = parse([12, 1, 0b10000000])
    assert [c.is_visible for c in result.columns] == [True] + [False] * 6


def test_simple_primary_key_ignores_out_of_range_index():
    result = parse([8, 2, 0, 99])
    assert result.columns[0].is_simple_primary_key is True
    assert all(c.is_simple_primary_key is None for c in result.columns[1:])


def test_primary_key_with_prefix():
    result = parse([9, 2, 1, 10])
    assert result.columns[1].primary_key_prefix == 10
    assert result.columns[0].primary_key_prefix is None


def test_unknown_metadata_type_is_rejected():
    with pytest.raises(UnexpectedDataError):
        parse([13, 0])


def test_truncated_block_is_an_error():
    with pytest.raises(BinlogError):
        parse([4, 5, 2, ord("i")])