"""Optional table metadata carried at the end of table map events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .column_metadata import (
    ColumnMetadata,
    DefaultCharset,
    MetadataType,
    get_numeric_column_count,
    is_enum_column,
    is_numeric_type,
    is_set_column,
    read_bitmap_reverted,
)
from .reader import ByteReader


@dataclass
class TableMetadata:
    """Table-level and per-column metadata (MySQL 8.0.1+, MariaDB 10.5+)."""

    default_charset: Optional[DefaultCharset] = None
    enum_and_set_default_charset: Optional[DefaultCharset] = None
    columns: list[ColumnMetadata] = field(default_factory=list)

    @classmethod
    def parse(
        cls,
        reader: ByteReader,
        column_types: Sequence[int],
        column_metas: Sequence[int],
    ) -> "TableMetadata":
        """Read metadata blocks until the reader is exhausted."""
        columns = [ColumnMetadata() for _ in column_types]
        metadata = cls(columns=columns)

        while reader.available() > 0:
            metadata_type = MetadataType.from_code(reader.read_u8())
            length = reader.read_packed_number()
            block = ByteReader(reader.read_bytes(length))
            metadata._apply_block(metadata_type, block, column_types, column_metas)

        return metadata

    def _apply_block(
        self,
        metadata_type: MetadataType,
        block: ByteReader,
        column_types: Sequence[int],
        column_metas: Sequence[int],
    ) -> None:
        columns = self.columns
        if metadata_type is MetadataType.SIGNEDNESS:
            bits = read_bitmap_reverted(block, get_numeric_column_count(column_types))
            _apply_signedness(columns, column_types, bits)
        elif metadata_type is MetadataType.DEFAULT_CHARSET:
            self.default_charset = _parse_default_charset(block)
        elif metadata_type is MetadataType.COLUMN_CHARSET:
            for column, value in zip(columns, _packed_numbers(block, len(columns))):
                column.charset_collation = value
        elif metadata_type is MetadataType.COLUMN_NAME:
            for column, name in zip(columns, _column_names(block, len(columns))):
                column.column_name = name
        elif metadata_type is MetadataType.SET_STR_VALUE:
            targets = [
                i
                for i, (code, meta) in enumerate(zip(column_types, column_metas))
                if is_set_column(code, meta)
            ]
            for ordinal, values in enumerate(_string_value_lists(block)):
                if ordinal < len(targets):
                    columns[targets[ordinal]].set_string_values = values
        elif metadata_type is MetadataType.ENUM_STR_VALUE:
            targets = [
                i
                for i, (code, meta) in enumerate(zip(column_types, column_metas))
                if is_enum_column(code, meta)
            ]
            for ordinal, values in enumerate(_string_value_lists(block)):
                if ordinal < len(targets):
                    columns[targets[ordinal]].enum_string_values = values
        elif metadata_type is MetadataType.GEOMETRY_TYPE:
            for column, value in zip(columns, _packed_numbers(block, len(columns))):
                column.geometry_type = value
        elif metadata_type is MetadataType.SIMPLE_PRIMARY_KEY:
            while block.available() > 0:
                index = block.read_packed_number()
                if index < len(columns):
                    columns[index].is_simple_primary_key = True
        elif metadata_type is MetadataType.PRIMARY_KEY_WITH_PREFIX:
            while block.available() > 0:
                index = block.read_packed_number()
                prefix = block.read_packed_number()
                if index < len(columns):
                    columns[index].primary_key_prefix = prefix
        elif metadata_type is MetadataType.ENUM_AND_SET_DEFAULT_CHARSET:
            self.enum_and_set_default_charset = _parse_default_charset(block)
        elif metadata_type is MetadataType.ENUM_AND_SET_COLUMN_CHARSET:
            for column, value in zip(columns, _packed_numbers(block, len(columns))):
                column.enum_and_set_charset_collation = value
        elif metadata_type is MetadataType.COLUMN_VISIBILITY:
            visibility = read_bitmap_reverted(block, len(column_types))
            for column, visible in zip(columns, visibility):
                column.is_visible = visible


def _apply_signedness(
    columns: list[ColumnMetadata],
    column_types: Sequence[int],
    signedness: list[bool],
) -> None:
    flags = iter(signedness)
    for column, code in zip(columns, column_types):
        if is_numeric_type(code):
            value = next(flags, None)
            if value is None:
                return
            column.is_signed = value


def _parse_default_charset(block: ByteReader) -> DefaultCharset:
    default_collation = block.read_packed_number()
    pairs = []
    while block.available() > 0:
        key = block.read_packed_number()
        value = block.read_packed_number()
        pairs.append((key, value))
    return DefaultCharset(default_collation, pairs)


def _packed_numbers(block: ByteReader, limit: int):
    count = 0
    while block.available() > 0 and count < limit:
        yield block.read_packed_number()
        count += 1


def _column_names(block: ByteReader, limit: int):
    count = 0
    while block.available() > 0 and count < limit:
        yield block.read_string(block.read_packed_number())
        count += 1


def _string_value_lists(block: ByteReader):
    while block.available() > 0:
        count = block.read_packed_number()
        yield [block.read_string(block.read_packed_number()) for _ in range(count)]


__all__ = ["TableMetadata"]