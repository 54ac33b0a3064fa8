"""TCP stream connection to an MPD server.

Owns the socket through an asyncio ``StreamReader``/``StreamWriter`` pair and
exposes the two primitives the protocol layer needs: write one line, read
one line. Lines are UTF-8 and terminated by a single ``\\n``.
"""

from __future__ import annotations

import asyncio
import logging

from ..errors import TransportClosed, TransportError, TransportRead, TransportWrite

logger = logging.getLogger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6600
ENCODING = "utf-8"
LINE_TERMINATOR = b"\n"
STREAM_LIMIT = 1024 * 1024  # reader buffer; longer lines are read in chunks


class TCPConnection:
    """Manages the TCP stream to the server.

    Usage::

        conn = TCPConnection("localhost", 6600)
        await conn.open()
        await conn.write_line("status")
        line = await conn.read_line()
        await conn.close()
    """

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
        if not host:
            raise ValueError("Host must be a non-empty string")
        if not 0 < port < 65536:
            raise ValueError(f"Port must be 1-65535, got {port}")
        self._host = host
        self._port = port
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._connected = False

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def connected(self) -> bool:
        return self._connected

    async def open(self) -> None:
        """Open the TCP connection.

        Raises:
            TransportError: If the connection cannot be established.
        """
        if self._connected:
            raise RuntimeError("Connection is already open")

        try:
            reader, writer = await asyncio.open_connection(
                self._host, self._port, limit=STREAM_LIMIT
            )
        except OSError as e:
            raise TransportError(
                f"Could not connect to {self._host}:{self._port}: {e}"
            ) from e

        self._reader = reader
        self._writer = writer
        self._connected = True
        logger.info("Connected to %s:%d", self._host, self._port)

    async def close(self) -> None:
        """Close the stream. Safe to call more than once; never raises."""
        if not self._connected:
            return

        writer = self._writer
        self._connected = False
        self._reader = None
        self._writer = None
        try:
            writer.close()
            await writer.wait_closed()
        except Exception as e:
            logger.debug("Error closing connection: %s", e)
        finally:
            logger.info("Disconnected from %s:%d", self._host, self._port)

    async def write_line(self, text: str) -> None:
        """Write ``text`` followed by a newline.

        Raises:
            TransportWrite: If not connected or the write fails.
        """
        writer = self._writer
        if not self._connected or writer is None or writer.is_closing():
            raise TransportWrite("Not connected to server")

        try:
            writer.write(text.encode(ENCODING) + LINE_TERMINATOR)
            await writer.drain()
        except OSError as e:
            raise TransportWrite(f"Write to server failed: {e}") from e

    async def read_line(self) -> str:
        """Read one line, without its terminator.

        Raises:
            TransportClosed: If the stream ended before a full line arrived.
            TransportRead: On any other read or decoding failure.
        """
        reader = self._reader
        if not self._connected or reader is None:
            raise TransportClosed("Not connected to server")

        chunks: list[bytes] = []
        while True:
            try:
                chunks.append(await reader.readuntil(LINE_TERMINATOR))
                break
            except asyncio.IncompleteReadError as e:
                raise TransportClosed("Server closed the connection") from e
            except asyncio.LimitOverrunError as e:
                # Line is longer than the buffer: take what is there and keep going
                chunks.append(await self._read_exactly(reader, e.consumed))
            except OSError as e:
                raise TransportRead(f"Read from server failed: {e}") from e

        raw = b"".join(chunks)[: -len(LINE_TERMINATOR)]
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        try:
            return raw.decode(ENCODING)
        except UnicodeDecodeError as e:
            raise TransportRead(f"Invalid {ENCODING} from server: {e}") from e

    @staticmethod
    async def _read_exactly(reader: asyncio.StreamReader, count: int) -> bytes:
        try:
            return await reader.readexactly(count)
        except asyncio.IncompleteReadError as e:
            raise TransportClosed("Server closed the connection") from e
        except OSError as e:
            raise TransportRead(f"Read from server failed: {e}") from e
