"""Parsers for the non-row binlog events."""

from __future__ import annotations

from dataclasses import dataclass

from .event_type import ChecksumType, EventType
from .reader import BinlogError, ByteReader, UnexpectedDataError

_SERVER_VERSION_LENGTH = 50
# binlog_version (2) + server_version (50) + create_timestamp (4) + header_length (1)
_FORMAT_DESCRIPTION_FIXED_LENGTH = 2 + _SERVER_VERSION_LENGTH + 4 + 1
_UUID_GROUPS = (4, 2, 2, 2, 6)


def _decode_strict(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise UnexpectedDataError(f"invalid utf-8 data: {exc}") from exc


def read_uuid(reader: ByteReader) -> str:
    """Read 16 bytes and format them as a dashed lower-case hex UUID."""
    return "-".join(reader.read_bytes(size).hex() for size in _UUID_GROUPS)


@dataclass(frozen=True)
class FormatDescriptionEvent:
    """Describes the format of the binlog file that follows."""

    binlog_version: int
    server_version: str
    create_timestamp: int
    header_length: int
    checksum_type: ChecksumType

    @classmethod
    def parse(cls, reader: ByteReader, data_length: int) -> "FormatDescriptionEvent":
        binlog_version = reader.read_u16()
        server_version = _decode_strict(reader.read_bytes(_SERVER_VERSION_LENGTH))
        create_timestamp = reader.read_u32()
        # Length of the header of the following events; should always be 19.
        header_length = reader.read_u8()

        # The post-header array holds one byte per event type; the entry for
        # FORMAT_DESCRIPTION is this event's payload length.
        reader.skip(EventType.FORMAT_DESCRIPTION - 1)
        payload_length = reader.read_u8()

        if data_length < payload_length:
            raise UnexpectedDataError(
                f"format description data length {data_length} is shorter "
                f"than its payload length {payload_length}"
            )

        checksum_code = 0
        if data_length - payload_length > 0:
            current_pos = _FORMAT_DESCRIPTION_FIXED_LENGTH + EventType.FORMAT_DESCRIPTION
            reader.skip(payload_length - current_pos)
            checksum_code = reader.read_u8()

        return cls(
            binlog_version=binlog_version,
            server_version=server_version,
            create_timestamp=create_timestamp,
            header_length=header_length,
            checksum_type=ChecksumType.from_code(checksum_code),
        )


@dataclass(frozen=True)
class GtidEvent:
    """A global transaction identifier in the form ``uuid:number``."""

    flags: int
    gtid: str

    @classmethod
    def parse(cls, reader: ByteReader) -> "GtidEvent":
        flags = reader.read_u8()
        sid = read_uuid(reader)
        gno = reader.read_u64()
        return cls(flags=flags, gtid=f"{sid}:{gno}")


@dataclass(frozen=True)
class PreviousGtidsEvent:
    """The set of GTIDs executed before the current binlog file."""

    gtid_set: str

    @classmethod
    def parse(cls, reader: ByteReader) -> "PreviousGtidsEvent":
        uuid_count = reader.read_u64()
        gtids = []
        for _ in range(uuid_count):
            uuid = read_uuid(reader)
            intervals = _read_intervals(reader)
            gtids.append(f"{uuid}:{intervals}")
        return cls(gtid_set=",".join(gtids))


def _read_intervals(reader: ByteReader) -> str:
    interval_count = reader.read_u64()
    intervals = []
    for _ in range(interval_count):
        start = reader.read_u64()
        end = reader.read_u64()
        # The stored end is exclusive; the server displays it inclusive.
        intervals.append(f"{start}-{end - 1}")
    return ":".join(intervals)


@dataclass(frozen=True)
class QueryEvent:
    """A statement executed on the server."""

    thread_id: int
    exec_time: int
    error_code: int
    schema: str
    query: str

    @classmethod
    def parse(cls, reader: ByteReader) -> "QueryEvent":
        thread_id = reader.read_u32()
        exec_time = reader.read_u32()
        schema_length = reader.read_u8()
        error_code = reader.read_u16()
        status_vars_length = reader.read_u16()

        reader.skip(status_vars_length)
        schema = reader.read_string_without_terminator(schema_length)
        query = _decode_strict(reader.read_rest())

        return cls(
            thread_id=thread_id,
            exec_time=exec_time,
            error_code=error_code,
            schema=schema,
            query=query,
        )


@dataclass(frozen=True)
class RotateEvent:
    """Points to the next binlog file and position."""

    binlog_filename: str
    binlog_position: int

    @classmethod
    def parse(cls, reader: ByteReader) -> "RotateEvent":
        binlog_position = reader.read_u64()
        binlog_filename = reader.read_string_without_terminator(len(reader) - 8)
        return cls(binlog_filename=binlog_filename, binlog_position=binlog_position)


@dataclass(frozen=True)
class RowsQueryEvent:
    """The original statement that produced the following rows events."""

    query: str

    @classmethod
    def parse(cls, reader: ByteReader) -> "RowsQueryEvent":
        # The one-byte length is ignored; the rest of the data is the query.
        reader.skip(1)
        return cls(query=reader.read_string(len(reader) - 1))


@dataclass(frozen=True)
class XaPrepareEvent:
    """Prepare step of an XA transaction."""

    one_phase: bool
    format_id: int
    gtrid: str
    bqual: str

    @classmethod
    def parse(cls, reader: ByteReader) -> "XaPrepareEvent":
        one_phase = reader.read_u8() == 0
        format_id = reader.read_u32()
        gtrid_length = reader.read_u32()
        bqual_length = reader.read_u32()
        gtrid = reader.read_string(gtrid_length)
        bqual = reader.read_string(bqual_length)
        return cls(one_phase=one_phase, format_id=format_id, gtrid=gtrid, bqual=bqual)


@dataclass(frozen=True)
class XidEvent:
    """Commit of a transaction, identified by its XID."""

    xid: int

    @classmethod
    def parse(cls, reader: ByteReader) -> "XidEvent":
        return cls(xid=reader.read_u64())


__all__ = [
    "BinlogError",
    "FormatDescriptionEvent",
    "GtidEvent",
    "PreviousGtidsEvent",
    "QueryEvent",
    "RotateEvent",
    "RowsQueryEvent",
    "XaPrepareEvent",
    "XidEvent",
    "read_uuid",
]