"""Binlog event type codes and checksum kinds."""

from __future__ import annotations

from enum import Enum, IntEnum


class EventType(IntEnum):
    """Binlog event type codes as written in the event header."""

    UNKNOWN = 0
    START_V3 = 1
    QUERY = 2
    STOP = 3
    ROTATE = 4
    INTVAR = 5
    LOAD = 6
    SLAVE = 7
    CREATE_FILE = 8
    APPEND_BLOCK = 9
    EXEC_LOAD = 10
    DELETE_FILE = 11
    NEW_LOAD = 12
    RAND = 13
    USER_VAR = 14
    FORMAT_DESCRIPTION = 15
    XID = 16
    BEGIN_LOAD_QUERY = 17
    EXECUTE_LOAD_QUERY = 18
    TABLE_MAP = 19
    PRE_GA_WRITE_ROWS = 20
    PRE_GA_UPDATE_ROWS = 21
    PRE_GA_DELETE_ROWS = 22
    WRITE_ROWS = 23
    UPDATE_ROWS = 24
    DELETE_ROWS = 25
    INCIDENT = 26
    HEART_BEAT = 27
    IGNORABLE = 28
    ROWS_QUERY = 29
    EXT_WRITE_ROWS = 30
    EXT_UPDATE_ROWS = 31
    EXT_DELETE_ROWS = 32
    GTID = 33
    ANONYMOUS_GTID = 34
    PREVIOUS_GTIDS = 35
    TRANSACTION_CONTEXT = 36
    VIEW_CHANGE = 37
    XA_PREPARE = 38
    PARTIAL_UPDATE_ROWS = 39
    TRANSACTION_PAYLOAD = 40
    ANNOTATE_ROWS = 160
    BINLOG_CHECKPOINT = 161
    MARIADB_GTID = 162
    MARIADB_GTID_LIST = 163

    @classmethod
    def from_code(cls, code: int) -> "EventType":
        """Return the event type for ``code``, or UNKNOWN when it is not known."""
        try:
            return cls(code)
        except ValueError:
            return cls.UNKNOWN


class ChecksumType(Enum):
    """Checksum algorithm appended to each binlog event."""

    NONE = "NONE"
    CRC32 = "CRC32"

    @classmethod
    def from_code(cls, code: int) -> "ChecksumType":
        return cls.CRC32 if code == 0x01 else cls.NONE

    @classmethod
    def from_name(cls, name: str) -> "ChecksumType":
        return cls.CRC32 if name == "CRC32" else cls.NONE

    def length(self) -> int:
        """Number of checksum bytes at the end of each event."""
        return 4 if self is ChecksumType.CRC32 else 0