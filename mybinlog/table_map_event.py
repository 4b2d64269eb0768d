"""The table map event, which describes the table used by following rows events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .column_metadata import ColumnTypeCode
from .reader import ByteReader
from .table_metadata import TableMetadata

_ONE_BYTE_META = frozenset(
    {
        ColumnTypeCode.FLOAT,
        ColumnTypeCode.DOUBLE,
        ColumnTypeCode.BLOB,
        ColumnTypeCode.TINY_BLOB,
        ColumnTypeCode.MEDIUM_BLOB,
        ColumnTypeCode.LONG_BLOB,
        ColumnTypeCode.JSON,
        ColumnTypeCode.GEOMETRY,
        ColumnTypeCode.TIME2,
        ColumnTypeCode.DATETIME2,
        ColumnTypeCode.TIMESTAMP2,
    }
)
_TWO_BYTE_LE_META = frozenset(
    {ColumnTypeCode.BIT, ColumnTypeCode.VARCHAR, ColumnTypeCode.NEWDECIMAL}
)
_TWO_BYTE_BE_META = frozenset(
    {ColumnTypeCode.SET, ColumnTypeCode.ENUM, ColumnTypeCode.STRING}
)


def _read_column_meta(reader: ByteReader, column_type: int) -> int:
    kind = ColumnTypeCode.from_code(column_type)
    if kind in _ONE_BYTE_META:
        return reader.read_u8()
    if kind in _TWO_BYTE_LE_META:
        return reader.read_u16()
    if kind in _TWO_BYTE_BE_META:
        return reader.read_u16_be()
    return 0


@dataclass
class TableMapEvent:
    """Maps a table id to its schema, name and column layout."""

    table_id: int
    database_name: str
    table_name: str
    column_types: list[int]
    column_metas: list[int]
    null_bits: list[bool]
    table_metadata: Optional[TableMetadata] = None

    @classmethod
    def parse(cls, reader: ByteReader) -> "TableMapEvent":
        table_id = reader.read_u48()
        reader.read_u16()  # flags, reserved

        database_name = reader.read_string_without_terminator(reader.read_u8())
        table_name = reader.read_string_without_terminator(reader.read_u8())

        column_count = reader.read_packed_number()
        column_types = list(reader.read_bytes(column_count))

        reader.read_packed_number()  # metadata length, not needed
        column_metas = _read_metas(reader, column_types)

        null_bits = reader.read_bits(column_count, False)

        table_metadata = None
        if reader.available() > 0:
            table_metadata = TableMetadata.parse(reader, column_types, column_metas)

        return cls(
            table_id=table_id,
            database_name=database_name,
            table_name=table_name,
            column_types=column_types,
            column_metas=column_metas,
            null_bits=null_bits,
            table_metadata=table_metadata,
        )


def _read_metas(reader: ByteReader, column_types: Sequence[int]) -> list[int]:
    return [_read_column_meta(reader, code) for code in column_types]


__all__ = ["TableMapEvent"]