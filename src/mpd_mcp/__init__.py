"""Minimal asyncio client for the MPD text protocol, with an MCP server front end."""

from .client import Connection, connect
from .errors import (
    ConnectionRejected,
    MPDError,
    TransportClosed,
    TransportError,
    TransportRead,
    TransportWrite,
)
from .protocol.framing import Response
