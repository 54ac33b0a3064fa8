"""Connection to an MPD server: greeting, commands, and teardown.

Usage::

    async with await connect("localhost", 6600) as conn:
        print(conn.version)
        response = await conn.send_command("status")
        if response.ok:
            print(response.lines)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .errors import ConnectionRejected, TransportClosed, TransportError
from .protocol.commands import build_command_line
from .protocol.framing import Response, assemble_response
from .transport.tcp_connection import DEFAULT_HOST, DEFAULT_PORT, TCPConnection

logger = logging.getLogger(__name__)

BANNER = "MPD"


def parse_greeting(response: Response) -> str:
    """Validate a greeting Response and return the protocol version.

    Raises:
        ConnectionRejected: If the server refused us or sent no ``MPD`` banner.
    """
    if not response.ok:
        raise ConnectionRejected(response.error)
    if not response.lines:
        raise ConnectionRejected("Server greeting carried no version")

    banner, _, version = response.lines[0].partition(" ")
    if banner != BANNER or not version:
        raise ConnectionRejected(f"Unexpected server greeting: {response.lines[0]!r}")
    return version


class Connection:
    """An open, greeted connection to an MPD server.

    Create with :meth:`connect`. Only one command is in flight at a time;
    concurrent :meth:`send_command` calls wait for each other.
    """

    def __init__(self, transport: TCPConnection, version: str) -> None:
        self._transport = transport
        self._version = version
        self._lock = asyncio.Lock()
        self._broken = False

    @classmethod
    async def connect(cls, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> Connection:
        """Open a connection and validate the server greeting.

        Raises:
            ConnectionRejected: If the greeting was ``ACK`` or malformed.
            TransportError: If the connection fails or drops during the greeting.
        """
        transport = TCPConnection(host, port)
        await transport.open()
        try:
            version = parse_greeting(await assemble_response(transport, greeting=True))
        except ConnectionRejected as e:
            logger.warning("Server at %s:%d rejected connection: %s", host, port, e)
            await transport.close()
            raise
        except BaseException:
            await transport.close()
            raise

        logger.info("Server at %s:%d speaks protocol %s", host, port, version)
        return cls(transport, version)

    @property
    def version(self) -> str:
        """Protocol version announced in the greeting."""
        return self._version

    @property
    def host(self) -> str:
        return self._transport.host

    @property
    def port(self) -> int:
        return self._transport.port

    @property
    def is_open(self) -> bool:
        return self._transport.connected and not self._broken

    async def send_command(self, command: str, *arguments: Any) -> Response:
        """Send one command and return the assembled reply.

        A reply of ``ACK ...`` is returned as a failed Response, not raised.

        Raises:
            ValueError: If the command line is malformed.
            TransportError: On any I/O fault; the connection is unusable afterwards.

        Cancelling the call (e.g. through ``asyncio.wait_for``) also leaves the
        connection unusable, since the rest of the reply is still in the stream.
        """
        line = build_command_line(command, *arguments)
        async with self._lock:
            if self._broken:
                raise TransportClosed("Connection is broken; close it and reconnect")
            try:
                logger.debug("> %s", line)
                await self._transport.write_line(line)
                response = await assemble_response(self._transport)
            except (TransportError, asyncio.CancelledError):
                # The reply may be half read; nothing after it can be trusted
                self._broken = True
                raise

        if response.ok:
            logger.debug("< OK (%d lines)", len(response.lines))
        else:
            logger.debug("< ACK %s", response.error)
        return response

    async def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        await self._transport.close()

    async def __aenter__(self) -> Connection:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return (
            f"Connection(host={self.host!r}, port={self.port}, "
            f"version={self._version!r}, {state})"
        )


async def connect(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> Connection:
    """Shortcut for :meth:`Connection.connect`."""
    return await Connection.connect(host, port)
