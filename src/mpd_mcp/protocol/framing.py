"""Response framing for the line-oriented MPD protocol.

A reply is zero or more payload lines followed by exactly one terminal
line::

    volume: 50          <- payload
    state: play         <- payload
    OK                  <- terminal, success

    ACK [50@0] {play} song doesn't exist    <- terminal, failure

The terminal line is never part of the payload. The greeting sent on
connect (``OK MPD 0.23.5``) is read with the same procedure in greeting
mode, where the text after ``OK `` becomes the sole payload line.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from ..errors import TransportClosed

SUCCESS_MARKER = "OK"
ERROR_PREFIX = "ACK"


class LineSource(Protocol):
    """Anything that yields lines one at a time."""

    async def read_line(self) -> str | None: ...


@dataclass(frozen=True)
class Response:
    """A complete server reply."""

    lines: tuple[str, ...] = ()
    ok: bool = True
    error: str | None = None

    def __post_init__(self) -> None:
        if self.ok and self.error is not None:
            raise ValueError("A successful response carries no error message")
        if not self.ok and not self.error:
            raise ValueError("A failed response needs an error message")

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"ok": self.ok, "lines": list(self.lines)}
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass(frozen=True)
class LineResult:
    """Outcome of classifying a single line."""

    terminal: bool
    ok: bool = True
    error: str | None = None
    payload: str | None = None


def classify_line(line: str | None, greeting: bool = False) -> LineResult:
    """Classify one reply line.

    Args:
        line: The line without its terminator, or ``None`` if the stream ended.
        greeting: Accept ``OK <banner>`` as a terminal line whose remainder
            is kept as payload.

    Raises:
        TransportClosed: If ``line`` is ``None``; the reply was left unterminated.
    """
    if line is None:
        raise TransportClosed("Stream ended before the reply was terminated")

    if line == SUCCESS_MARKER:
        return LineResult(terminal=True)

    if line.startswith(ERROR_PREFIX):
        remainder = line[len(ERROR_PREFIX):]
        if remainder.startswith(" "):
            remainder = remainder[1:]
        return LineResult(terminal=True, ok=False, error=remainder or ERROR_PREFIX)

    if greeting and line.startswith(SUCCESS_MARKER + " "):
        return LineResult(terminal=True, payload=line[len(SUCCESS_MARKER) + 1:])

    return LineResult(terminal=False, payload=line)


async def assemble_response(source: LineSource, greeting: bool = False) -> Response:
    """Read lines from ``source`` until a terminal line and build the Response.

    Raises:
        TransportClosed: If the stream ends before a terminal line.
    """
    lines: list[str] = []
    while True:
        result = classify_line(await source.read_line(), greeting=greeting)
        if result.payload is not None:
            lines.append(result.payload)
        if result.terminal:
            return Response(lines=tuple(lines), ok=result.ok, error=result.error)
