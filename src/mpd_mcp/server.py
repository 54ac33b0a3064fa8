"""MCP server entry point for talking to an MPD server.

Exposes the protocol client as tools and resources via the Model Context
Protocol using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import Connection
from .transport.tcp_connection import DEFAULT_HOST, DEFAULT_PORT

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "mpd",
    instructions="MCP server for controlling a Music Player Daemon over its text protocol",
)

# Global connection state
_connection: Connection | None = None


def _default_host() -> str:
    return os.environ.get("MPD_HOST", DEFAULT_HOST)


def _default_port() -> int:
    value = os.environ.get("MPD_PORT")
    if value is None:
        return DEFAULT_PORT
    try:
        return int(value)
    except ValueError:
        raise RuntimeError(f"MPD_PORT must be an integer, got {value!r}") from None


def _get_connection() -> Connection:
    """Get the active connection, raising if not connected."""
    if _connection is None or not _connection.is_open:
        raise RuntimeError(
            "Not connected to MPD. Use the 'connect' tool first."
        )
    return _connection


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
async def connect(host: str | None = None, port: int | None = None) -> dict[str, Any]:
    """Connect to an MPD server and validate its greeting.

    Args:
        host: Server hostname (default: $MPD_HOST or localhost).
        port: Server port (default: $MPD_PORT or 6600).
    """
    global _connection
    if _connection is not None and _connection.is_open:
        return {
            "connected": True,
            "message": "Already connected",
            "host": _connection.host,
            "port": _connection.port,
            "version": _connection.version,
        }
    if _connection is not None:
        await _connection.close()
        _connection = None

    _connection = await Connection.connect(
        host or _default_host(),
        port or _default_port(),
    )
    return {
        "connected": True,
        "host": _connection.host,
        "port": _connection.port,
        "version": _connection.version,
    }


@mcp.tool()
async def disconnect() -> dict[str, bool]:
    """Close the connection to the MPD server."""
    global _connection
    if _connection is None:
        return {"disconnected": True}
    await _connection.close()
    _connection = None
    return {"disconnected": True}


@mcp.tool()
async def send_command(command: str, arguments: list[str] | None = None) -> dict[str, Any]:
    """Send a raw protocol command and return the reply lines.

    Arguments are joined with single spaces and are not quoted.
    A refused command comes back with ``ok: false`` and the server's error.

    Args:
        command: Command name, e.g. "status", "play", "setvol".
        arguments: Optional list of arguments.
    """
    conn = _get_connection()
    response = await conn.send_command(command, *(arguments or []))
    return response.to_dict()


@mcp.tool()
def get_server_info() -> dict[str, Any]:
    """Return the host, port, and protocol version of the active connection."""
    conn = _get_connection()
    return {
        "host": conn.host,
        "port": conn.port,
        "version": conn.version,
    }


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("mpd://connection/status")
def resource_connection_status() -> str:
    """Connection state and protocol version."""
    if _connection is None or not _connection.is_open:
        return json.dumps({"connected": False})

    return json.dumps({
        "connected": True,
        "host": _connection.host,
        "port": _connection.port,
        "version": _connection.version,
    })


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
