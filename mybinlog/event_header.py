"""The common binlog event header and the shared rows-event header."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .reader import BinlogError, ByteReader

EVENT_HEADER_LENGTH = 19
_HEADER_FORMAT = struct.Struct("<IBIIIH")


@dataclass(frozen=True)
class EventHeader:
    """The fixed 19-byte header that precedes every binlog event."""

    timestamp: int
    event_type: int
    server_id: int
    event_length: int
    next_event_position: int
    event_flags: int

    @classmethod
    def parse(cls, stream) -> "EventHeader":
        """Read a header from a ByteReader or a binary stream with ``read``."""
        if isinstance(stream, ByteReader):
            raw = stream.read_bytes(EVENT_HEADER_LENGTH)
        else:
            raw = stream.read(EVENT_HEADER_LENGTH)
            if raw is None or len(raw) < EVENT_HEADER_LENGTH:
                raise BinlogError("unexpected end of data while reading event header")
        return cls(*_HEADER_FORMAT.unpack(raw))


def parse_rows_event_common_header(
    reader: ByteReader, row_event_version: int
) -> tuple[int, int, list[bool]]:
    """Parse the header shared by write, update and delete rows events.

    Returns the table id, the column count and the included-columns bitmap.
    Version 2 events carry extra data that is skipped.
    """
    table_id = reader.read_u48()
    reader.read_u16()  # flags

    if row_event_version == 2:
        extra_data_length = reader.read_u16()
        reader.skip(extra_data_length - 2)

    column_count = reader.read_packed_number()
    included_columns = reader.read_bits(column_count, False)
    return table_id, column_count, included_columns