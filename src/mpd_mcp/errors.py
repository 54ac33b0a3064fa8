"""Exception hierarchy for the MPD client.

Transport faults are exceptions. A command the server refused with
``ACK`` is not: it comes back as a failed :class:`~mpd_mcp.protocol.framing.Response`.
"""

from __future__ import annotations


class MPDError(Exception):
    """Base class for all client errors."""


class ConnectionRejected(MPDError):
    """The server greeting was a failure (or not a valid banner)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class TransportError(MPDError, ConnectionError):
    """I/O fault on the underlying TCP stream."""


class TransportWrite(TransportError):
    """Writing a command line failed, or the connection is closed."""


class TransportRead(TransportError):
    """Reading from the stream failed for a reason other than EOF."""


class TransportClosed(TransportError):
    """The stream ended, either closed by the peer or locally."""
