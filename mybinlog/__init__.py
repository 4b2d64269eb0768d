"""Parsers for MySQL binary log events and protocol packets, with an asyncio packet channel."""

__version__ = "0.3.3"

__all__ = [
    "column_metadata",
    "event_header",
    "event_type",
    "events",
    "packet_channel",
    "packets",
    "reader",
    "table_map_event",
    "table_metadata",
]