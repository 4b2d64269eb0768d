"""Column type codes and the per-column metadata carried by table map events."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Sequence, Union

from .reader import ByteReader, UnexpectedDataError


class ColumnTypeCode(IntEnum):
    """Column type codes as written in table map events."""

    DECIMAL = 0
    TINY = 1
    SHORT = 2
    LONG = 3
    FLOAT = 4
    DOUBLE = 5
    NULL = 6
    TIMESTAMP = 7
    LONGLONG = 8
    INT24 = 9
    DATE = 10
    TIME = 11
    DATETIME = 12
    YEAR = 13
    NEWDATE = 14
    VARCHAR = 15
    BIT = 16
    TIMESTAMP2 = 17
    DATETIME2 = 18
    TIME2 = 19
    TYPED_ARRAY = 20
    UNKNOWN = 21
    JSON = 245
    NEWDECIMAL = 246
    ENUM = 247
    SET = 248
    TINY_BLOB = 249
    MEDIUM_BLOB = 250
    LONG_BLOB = 251
    BLOB = 252
    VAR_STRING = 253
    STRING = 254
    GEOMETRY = 255

    @classmethod
    def from_code(cls, code: int) -> "ColumnTypeCode":
        """Return the column type for ``code``, or UNKNOWN when it is not known."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN


_NUMERIC_TYPES = frozenset(
    {
        ColumnTypeCode.TINY,
        ColumnTypeCode.SHORT,
        ColumnTypeCode.INT24,
        ColumnTypeCode.LONG,
        ColumnTypeCode.LONGLONG,
        ColumnTypeCode.FLOAT,
        ColumnTypeCode.DOUBLE,
        ColumnTypeCode.NEWDECIMAL,
    }
)


class MetadataType(IntEnum):
    """Kinds of optional metadata blocks in a table map event."""

    SIGNEDNESS = 1
    DEFAULT_CHARSET = 2
    COLUMN_CHARSET = 3
    COLUMN_NAME = 4
    SET_STR_VALUE = 5
    ENUM_STR_VALUE = 6
    GEOMETRY_TYPE = 7
    SIMPLE_PRIMARY_KEY = 8
    PRIMARY_KEY_WITH_PREFIX = 9
    ENUM_AND_SET_DEFAULT_CHARSET = 10
    ENUM_AND_SET_COLUMN_CHARSET = 11
    COLUMN_VISIBILITY = 12

    @classmethod
    def from_code(cls, code: int) -> "MetadataType":
        """Return the metadata type for ``code``; unknown codes are an error."""
        try:
            return cls(code)
        except ValueError:
            raise UnexpectedDataError(
                f"Table metadata type {code} is not supported"
            ) from None


@dataclass
class DefaultCharset:
    """Charsets of character columns: the most used one plus per-column exceptions."""

    default_charset_collation: int
    charset_collations: list[tuple[int, int]] = field(default_factory=list)


@dataclass
class ColumnMetadata:
    """Metadata for a single table column; unknown properties stay None."""

    column_name: Optional[str] = None
    is_signed: Optional[bool] = None
    charset_collation: Optional[int] = None
    enum_string_values: Optional[list[str]] = None
    set_string_values: Optional[list[str]] = None
    geometry_type: Optional[int] = None
    is_simple_primary_key: Optional[bool] = None
    primary_key_prefix: Optional[int] = None
    enum_and_set_charset_collation: Optional[int] = None
    is_visible: Optional[bool] = None


def read_bitmap_reverted(reader: ByteReader, bits_number: int) -> list[bool]:
    """Read ``bits_number`` bits, most significant bit of each byte first."""
    raw = reader.read_bytes((bits_number + 7) // 8)
    return [bool(raw[i >> 3] & (0x80 >> (i % 8))) for i in range(bits_number)]


def is_numeric_type(column_type: Union[ColumnTypeCode, int]) -> bool:
    """Whether the column type carries a signedness flag."""
    return ColumnTypeCode.from_code(int(column_type)) in _NUMERIC_TYPES


def get_numeric_column_count(column_types: Sequence[int]) -> int:
    """Count the numeric columns among ``column_types``."""
    return sum(1 for code in column_types if is_numeric_type(code))


def _string_column_real_type(column_meta: int) -> int:
    """Real type hidden in the metadata of a STRING column."""
    real_type = (column_meta >> 8) & 0xFF
    if real_type & 0x30 != 0x30:
        real_type |= 0x30
    return real_type


def _is_string_column_of(column_type_code: int, column_meta: int, wanted: int) -> bool:
    if column_type_code != ColumnTypeCode.STRING:
        return False
    return _string_column_real_type(column_meta) == wanted


def is_enum_column(column_type_code: int, column_meta: int) -> bool:
    """Whether a column is an ENUM, which is stored as STRING with ENUM metadata."""
    return _is_string_column_of(column_type_code, column_meta, ColumnTypeCode.ENUM)


def is_set_column(column_type_code: int, column_meta: int) -> bool:
    """Whether a column is a SET, which is stored as STRING with SET metadata."""
    return _is_string_column_of(column_type_code, column_meta, ColumnTypeCode.SET)


__all__ = [
    "ColumnMetadata",
    "ColumnTypeCode",
    "DefaultCharset",
    "MetadataType",
    "get_numeric_column_count",
    "is_enum_column",
    "is_numeric_type",
    "is_set_column",
    "read_bitmap_reverted",
]