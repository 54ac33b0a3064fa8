"""Transport layer: the TCP stream and its line primitives."""

from .tcp_connection import TCPConnection
