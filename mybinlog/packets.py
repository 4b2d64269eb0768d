"""Parsers for client/server protocol packets used during the handshake and queries."""

from __future__ import annotations

from dataclasses import dataclass, field

from .reader import ByteReader, UnexpectedDataError, decode_utf8

_SQL_STATE_MARKER = ord("#")
_SQL_STATE_LENGTH = 5
_GREETING_RESERVED_LENGTH = 13


@dataclass(frozen=True)
class AuthPluginSwitchPacket:
    """Request from the server to continue authentication with another plugin."""

    auth_plugin_name: str
    scramble: str

    @classmethod
    def parse(cls, packet: bytes) -> "AuthPluginSwitchPacket":
        reader = ByteReader(packet)
        reader.skip(1)  # 0xFE status byte
        auth_plugin_name = reader.read_null_terminated_string()
        scramble = reader.read_null_terminated_string()
        return cls(auth_plugin_name=auth_plugin_name, scramble=scramble)


@dataclass(frozen=True)
class ErrorPacket:
    """An ERR packet sent by the server."""

    error_code: int
    sql_state: str
    error_message: str

    @classmethod
    def parse(cls, packet: bytes) -> "ErrorPacket":
        reader = ByteReader(packet)
        reader.skip(1)  # always 0xFF for an error packet
        error_code = reader.read_u16()

        if reader.available() == 0:
            raise UnexpectedDataError("error packet ends before its message")

        rest = ByteReader(reader.read_rest())
        sql_state = ""
        if rest.read_u8() == _SQL_STATE_MARKER:
            sql_state = rest.read_string(_SQL_STATE_LENGTH)
        else:
            rest.skip(-1)

        error_message = decode_utf8(rest.read_rest())
        return cls(error_code=error_code, sql_state=sql_state, error_message=error_message)


@dataclass(frozen=True)
class GreetingPacket:
    """The initial handshake packet sent by the server."""

    protocol_version: int
    server_version: str
    thread_id: int
    server_capabilities: int
    server_collation: int
    server_status: int
    scramble: str
    plugin_provided_data: str

    @classmethod
    def parse(cls, packet: bytes) -> "GreetingPacket":
        reader = ByteReader(packet)
        protocol_version = reader.read_u8()
        server_version = reader.read_null_terminated_string()
        thread_id = reader.read_u32()
        scramble = reader.read_null_terminated_string()
        server_capabilities = reader.read_u16()
        server_collation = reader.read_u8()
        server_status = reader.read_u16()

        reader.skip(_GREETING_RESERVED_LENGTH)
        scramble += reader.read_null_terminated_string()

        plugin_provided_data = ""
        if reader.available() > 0:
            plugin_provided_data = reader.read_null_terminated_string()

        return cls(
            protocol_version=protocol_version,
            server_version=server_version,
            thread_id=thread_id,
            server_capabilities=server_capabilities,
            server_collation=server_collation,
            server_status=server_status,
            scramble=scramble,
            plugin_provided_data=plugin_provided_data,
        )


@dataclass(frozen=True)
class ResultSetRowPacket:
    """One row of a text result set: a list of length-encoded strings."""

    values: list[str] = field(default_factory=list)

    @classmethod
    def parse(cls, packet: bytes) -> "ResultSetRowPacket":
        reader = ByteReader(packet)
        values = []
        while reader.available() > 0:
            values.append(reader.read_string(reader.read_packed_number()))
        return cls(values=values)


__all__ = [
    "AuthPluginSwitchPacket",
    "ErrorPacket",
    "GreetingPacket",
    "ResultSetRowPacket",
]