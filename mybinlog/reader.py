"""Little-endian byte reading helpers for binlog and protocol payloads."""

from __future__ import annotations

NULL_TERMINATOR = 0x00


class BinlogError(Exception):
    """Base error for binlog parsing and protocol handling."""


class UnexpectedDataError(BinlogError):
    """Raised when the data does not match the expected format."""


def decode_utf8(data: bytes) -> str:
    """Decode bytes as UTF-8, replacing invalid sequences when strict decoding fails."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("utf-8", errors="replace")


def xor_bytes(data: bytes, key: bytes) -> bytes:
    """XOR every byte of ``data`` with ``key``, repeating the key as needed."""
    if not key:
        raise ValueError("xor key must not be empty")
    key_length = len(key)
    return bytes(byte ^ key[index % key_length] for index, byte in enumerate(data))


def null_terminated(text: str) -> bytes:
    """Encode ``text`` as UTF-8 followed by a 0x00 terminator."""
    return text.encode("utf-8") + bytes([NULL_TERMINATOR])


class ByteReader:
    """A positioned reader over an immutable byte buffer."""

    __slots__ = ("_data", "_pos")

    def __init__(self, data) -> None:
        self._data = bytes(data)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._data)

    def position(self) -> int:
        """Current offset into the buffer."""
        return self._pos

    def available(self) -> int:
        """Number of bytes left to read."""
        return max(0, len(self._data) - self._pos)

    def skip(self, count: int) -> None:
        """Move the position by ``count`` bytes; negative values move back."""
        new_pos = self._pos + count
        if new_pos < 0:
            raise BinlogError("invalid seek to a negative position")
        self._pos = new_pos

    def _take(self, size: int) -> bytes:
        if size < 0:
            raise BinlogError(f"invalid read size {size}")
        remaining = self.available()
        if remaining < size:
            raise BinlogError(
                f"unexpected end of data: need {size} bytes, {remaining} available"
            )
        chunk = self._data[self._pos : self._pos + size]
        self._pos += size
        return chunk

    def _read_le(self, size: int) -> int:
        return int.from_bytes(self._take(size), "little")

    def read_u8(self) -> int:
        return self._take(1)[0]

    def read_u16(self) -> int:
        return self._read_le(2)

    def read_u16_be(self) -> int:
        return int.from_bytes(self._take(2), "big")

    def read_u24(self) -> int:
        return self._read_le(3)

    def read_u32(self) -> int:
        return self._read_le(4)

    def read_u48(self) -> int:
        return self._read_le(6)

    def read_u64(self) -> int:
        return self._read_le(8)

    def read_bytes(self, size: int) -> bytes:
        """Read exactly ``size`` bytes."""
        return self._take(size)

    def read_rest(self) -> bytes:
        """Read every remaining byte."""
        return self._take(self.available())

    def read_string(self, size: int) -> str:
        """Read ``size`` bytes and decode them as UTF-8."""
        return decode_utf8(self._take(size))

    def read_string_without_terminator(self, size: int) -> str:
        """Read a ``size``-byte string and skip the single terminator byte after it."""
        text = self.read_string(size)
        self.skip(1)
        return text

    def read_null_terminated_string(self) -> str:
        """Read a string ending with 0x00.

        If no terminator is present, the rest of the buffer is consumed and its
        final byte is dropped.
        """
        end = self._data.find(bytes([NULL_TERMINATOR]), self._pos)
        if end == -1:
            chunk = self.read_rest()[:-1]
        else:
            chunk = self._data[self._pos : end]
            self._pos = end + 1
        return decode_utf8(chunk)

    def read_packed_number(self) -> int:
        """Read a length-encoded integer.

        0-250 is the value itself; 0xfc, 0xfd and 0xfe are followed by 2, 3 and 8
        bytes. 0xfb (SQL NULL) and 0xff are rejected.
        """
        first = self.read_u8()
        if first < 0xFB:
            return first
        if first == 0xFC:
            return self.read_u16()
        if first == 0xFD:
            return self.read_u24()
        if first == 0xFE:
            return self.read_u64()
        raise UnexpectedDataError("read packed number failed")

    def read_bits_as_bytes(self, size: int, big_endian: bool) -> bytes:
        """Read the bytes holding ``size`` bits, reversed when stored big-endian."""
        raw = self._take((size + 7) >> 3)
        return raw[::-1] if big_endian else raw

    def read_bits(self, size: int, big_endian: bool) -> list[bool]:
        """Read ``size`` bits, least significant bit of each byte first."""
        raw = self.read_bits_as_bytes(size, big_endian)
        return [bool(raw[i >> 3] & (1 << (i % 8))) for i in range(size)]