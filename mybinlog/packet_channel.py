"""An asynchronous channel that sends and receives length-prefixed protocol packets."""

from __future__ import annotations

import asyncio
import logging
import socket
from dataclasses import dataclass
from typing import Optional, Union

from .reader import BinlogError, UnexpectedDataError

MAX_PACKET_LENGTH = 16777215

_log = logging.getLogger(__name__)


class ConnectError(BinlogError):
    """Raised when the connection to the server cannot be set up in time."""


@dataclass(frozen=True)
class KeepAliveConfig:
    """TCP keepalive settings; a zero in either field disables them."""

    keepidle_secs: int
    keepintvl_secs: int


def _configure_keepalive(sock, config: KeepAliveConfig) -> None:
    if config.keepidle_secs == 0 or config.keepintvl_secs == 0:
        return
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
        idle_option = getattr(socket, "TCP_KEEPIDLE", None)
        if idle_option is None:
            idle_option = getattr(socket, "TCP_KEEPALIVE", None)
        if idle_option is not None:
            sock.setsockopt(socket.IPPROTO_TCP, idle_option, config.keepidle_secs)
        interval_option = getattr(socket, "TCP_KEEPINTVL", None)
        if interval_option is not None:
            sock.setsockopt(socket.IPPROTO_TCP, interval_option, config.keepintvl_secs)
    except OSError as exc:
        raise BinlogError(f"failed to configure tcp keepalive: {exc}") from exc


class PacketChannel:
    """Reads and writes packets of the form: 3-byte length, 1-byte sequence, payload."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        timeout_secs: float,
    ) -> None:
        self._reader = reader
        self._writer = writer
        self._timeout_secs = timeout_secs

    @classmethod
    async def connect(
        cls,
        host: str,
        port: Union[int, str],
        timeout_secs: float,
        keepalive_config: Optional[KeepAliveConfig] = None,
    ) -> "PacketChannel":
        """Open a TCP connection, failing with ConnectError after ``timeout_secs``."""
        addr = f"{host}:{port}"
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(host, int(port)), timeout_secs
            )
        except asyncio.TimeoutError:
            raise ConnectError(
                f"Connection timeout after {timeout_secs} seconds while connecting to {addr}"
            ) from None
        except OSError as exc:
            raise BinlogError(f"failed to connect to {addr}: {exc}") from exc

        if keepalive_config is not None:
            sock = writer.get_extra_info("socket")
            if sock is not None:
                try:
                    _configure_keepalive(sock, keepalive_config)
                except BinlogError:
                    writer.close()
                    raise

        return cls(reader, writer, timeout_secs)

    async def __aenter__(self) -> "PacketChannel":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Shut the connection down in both directions."""
        self._writer.close()
        try:
            await self._writer.wait_closed()
        except OSError:
            pass

    async def write(self, payload: bytes, sequence: int) -> None:
        """Send ``payload`` as one packet with the given sequence number."""
        if len(payload) > MAX_PACKET_LENGTH:
            raise BinlogError(
                f"packet payload of {len(payload)} bytes exceeds {MAX_PACKET_LENGTH}"
            )
        if not 0 <= sequence <= 0xFF:
            raise BinlogError(f"invalid packet sequence {sequence}")
        header = len(payload).to_bytes(3, "little") + bytes([sequence])
        try:
            self._writer.write(header + bytes(payload))
            await self._writer.drain()
        except OSError as exc:
            raise BinlogError(f"failed to write packet: {exc}") from exc

    async def _read_packet_info(self) -> tuple[int, int]:
        try:
            header = await asyncio.wait_for(
                self._reader.readexactly(4), self._timeout_secs
            )
        except asyncio.TimeoutError:
            raise UnexpectedDataError(
                f"Read binlog header timeout after {self._timeout_secs}s "
                "while waiting for packet header"
            ) from None
        except asyncio.IncompleteReadError as exc:
            raise BinlogError(
                "Connection closed by peer while reading packet header"
            ) from exc
        except OSError as exc:
            raise BinlogError(f"failed to read packet header: {exc}") from exc
        return int.from_bytes(header[:3], "little"), header[3]

    async def _read_exact(self, length: int) -> bytes:
        buf = bytearray()
        while len(buf) < length:
            try:
                chunk = await asyncio.wait_for(
                    self._reader.read(length - len(buf)), self._timeout_secs
                )
            except asyncio.TimeoutError:
                raise UnexpectedDataError(
                    f"Read binlog timeout, expect data length: {length}, "
                    f"read so far: {len(buf)}"
                ) from None
            except OSError as exc:
                raise BinlogError(f"failed to read packet: {exc}") from exc
            if not chunk:
                raise BinlogError(
                    f"Connection closed by peer. Expected data length: {length}, "
                    f"read so far: {len(buf)}"
                )
            buf += chunk
            _log.debug(
                "Stream reading binlog data, Expected data length: %d, read so far: %d",
                length,
                len(buf),
            )
        return bytes(buf)

    async def read_with_sequence(self) -> tuple[bytes, int]:
        """Read one logical packet, joining split parts, with its sequence number."""
        length, sequence = await self._read_packet_info()
        if length != MAX_PACKET_LENGTH:
            return await self._read_exact(length), sequence

        payload = bytearray(await self._read_exact(length))
        while True:
            chunk_length, _ = await self._read_packet_info()
            payload += await self._read_exact(chunk_length)
            if chunk_length != MAX_PACKET_LENGTH:
                break
        _log.debug("Received big binlog data, full length: %d", len(payload))
        return bytes(payload), sequence

    async def read(self) -> bytes:
        """Read one logical packet and drop its sequence number."""
        payload, _ = await self.read_with_sequence()
        return payload


__all__ = ["ConnectError", "KeepAliveConfig", "MAX_PACKET_LENGTH", "PacketChannel"]