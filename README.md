# mybinlog

Pure-Python parsers for MySQL binary log events and for packets of the
MySQL client/server protocol, plus a small asyncio packet channel. It has
no third-party dependencies.

## Modules

- `mybinlog.reader`: `ByteReader`, a positioned little-endian reader over a
  bytes buffer. It reads fixed-width integers (`read_u8` … `read_u64`,
  `read_u16_be`), length-encoded numbers (`read_packed_number`), bitmaps
  (`read_bits`, `read_bits_as_bytes`) and strings (`read_string`,
  `read_string_without_terminator`, `read_null_terminated_string`). The
  module also holds `decode_utf8`, `xor_bytes`, `null_terminated` and the
  error classes `BinlogError` and `UnexpectedDataError`.
- `mybinlog.event_type`: the `EventType` and `ChecksumType` enumerations.
  `EventType.from_code` maps unknown codes to `EventType.UNKNOWN`, and
  `ChecksumType.length()` gives the number of checksum bytes (4 for CRC32).
- `mybinlog.event_header`: `EventHeader.parse` reads the 19-byte event header
  from a `ByteReader` or from any binary stream with `read`.
  `parse_rows_event_common_header` reads the table id, the column count and
  the included-columns bitmap that open every rows event (version 1 and 2).
- `mybinlog.events`: `FormatDescriptionEvent`, `GtidEvent`,
  `PreviousGtidsEvent`, `QueryEvent`, `RotateEvent`, `RowsQueryEvent`,
  `XaPrepareEvent` and `XidEvent`, each with a `parse` class method. There is
  also `read_uuid`.
- `mybinlog.column_metadata`: the `ColumnTypeCode` and `MetadataType`
  enumerations, the `DefaultCharset` and `ColumnMetadata` records, and helpers
  to classify columns: `is_numeric_type`, `is_enum_column`, `is_set_column`,
  `get_numeric_column_count` and `read_bitmap_reverted`.
- `mybinlog.table_metadata`: `TableMetadata.parse` reads the optional
  metadata blocks that MySQL 8.0.1+ and MariaDB 10.5+ append to table map
  events. These blocks cover signedness, charsets, column names, ENUM/SET
  values, geometry types, primary keys and visibility. An unknown block type
  raises `UnexpectedDataError`.
- `mybinlog.table_map_event`: `TableMapEvent.parse` reads the table id,
  schema and table names, column types, column metadata and nullability. It
  also reads the table metadata when present.
- `mybinlog.packets`: `GreetingPacket`, `ErrorPacket`,
  `AuthPluginSwitchPacket` and `ResultSetRowPacket`, each with a `parse`
  class method.
- `mybinlog.packet_channel`: `PacketChannel`, an asyncio connection that
  frames outgoing payloads with a 3-byte length and a sequence number. It
  reads packets back and joins packets that were split at 16,777,215 bytes.
  Every read is subject to a timeout. `KeepAliveConfig` turns on TCP
  keepalive; a zero in either field leaves it off.

## Install

```
pip install .
```

## Examples

Parse an event header and a rotate event body:

```python
import io
import struct

from mybinlog.event_header import EventHeader
from mybinlog.event_type import EventType
from mybinlog.events import RotateEvent
from mybinlog.reader import ByteReader

body = (4).to_bytes(8, "little") + b"binlog.000002"
raw_header = struct.pack("<IBIIIH", 0, EventType.ROTATE, 1, 19 + len(body), 0, 0)

header = EventHeader.parse(io.BytesIO(raw_header))
event = RotateEvent.parse(ByteReader(body))
print(EventType.from_code(header.event_type), event.binlog_filename, event.binlog_position)
```

Read column metadata from a table map event body:

```python
from mybinlog.reader import ByteReader
from mybinlog.table_map_event import TableMapEvent

table_map = TableMapEvent.parse(ByteReader(body))
if table_map.table_metadata is not None:
    for column in table_map.table_metadata.columns:
        print(column.column_name, column.is_signed)
```

Read the server greeting:

```python
from mybinlog.packet_channel import PacketChannel
from mybinlog.packets import GreetingPacket

async with await PacketChannel.connect("localhost", 3306, 10) as channel:
    greeting = GreetingPacket.parse(await channel.read())
    print(greeting.server_version)
```

## Errors

Every error is a `mybinlog.reader.BinlogError` or one of its subclasses:

- A buffer that ends too early raises `BinlogError`.
- Malformed values raise `UnexpectedDataError`. This covers an invalid packed
  number and an unknown metadata type. A read timeout on a `PacketChannel`
  raises it too.
- `mybinlog.packet_channel.ConnectError` is raised when opening a connection
  times out. Other connection failures raise `BinlogError`.

## What it does not do

- Rows events (write, update, delete) are not decoded beyond their common
  header. Row images and column values are not turned into Python values.
- Compressed transaction payload events are not decoded.
- There is no client that authenticates, registers as a replica and streams
  events. `PacketChannel` only moves packets, and the packet classes only
  parse them.
- There is no command-line tool.

## Tests

```
pip install ".[test]"
pytest
```