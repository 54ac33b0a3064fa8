"""Tests for reply line classification and response assembly."""

import asyncio

import pytest

from mpd_mcp.errors import TransportClosed
from mpd_mcp.protocol.framing import Response, assemble_response, classify_line


class ListSource:
    """Line source backed by a list; returns None once exhausted."""

    def __init__(self, lines):
        self._lines = list(lines)
        self.reads = 0

    async def read_line(self):
        self.reads += 1
        if not self._lines:
            return None
        return self._lines.pop(0)


def assemble(lines, greeting=False):
    return asyncio.run(assemble_response(ListSource(lines), greeting=greeting))


def test_ok_terminates_with_success():
    result = classify_line("OK")
    assert result.terminal
    assert result.ok
    assert result.payload is None


def test_ack_strips_prefix_and_separator():
    result = classify_line("ACK [50@0] {play} song doesn't exist")
    assert result.terminal
    assert not result.ok
    assert result.error == "[50@0] {play} song doesn't exist"


def test_bare_ack_still_has_error_message():
    """An ACK with nothing after it must still produce a non-empty error."""
    result = classify_line("ACK")
    assert not result.ok
    assert result.error


def test_payload_line_kept_verbatim():
    result = classify_line("  file: a b.mp3  ")
    assert not result.terminal
    assert result.payload == "  file: a b.mp3  "


def test_ok_with_text_is_payload_outside_greeting():
    result = classify_line("OK MPD 0.20.0")
    assert not result.terminal
    assert result.payload == "OK MPD 0.20.0"


def test_ok_with_text_is_terminal_in_greeting():
    result = classify_line("OK MPD 0.20.0", greeting=True)
    assert result.terminal
    assert result.ok
    assert result.payload == "MPD 0.20.0"


def test_none_line_raises_closed():
    with pytest.raises(TransportClosed):
        classify_line(None)


def test_assemble_success_keeps_order():
    lines = ["volume: 50", "repeat: 0", "", "state: play"]
    response = assemble(lines + ["OK"])
    assert response == Response(lines=tuple(lines), ok=True, error=None)


def test_assemble_empty_success():
    """A bare OK is a valid response with no payload."""
    response = assemble(["OK"])
    assert response.ok
    assert response.lines == ()
    assert response.error is None


def test_assemble_failure_keeps_preceding_lines():
    response = assemble(["partial: 1", "ACK [2@0] {setvol} bad volume"])
    assert not response.ok
    assert response.lines == ("partial: 1",)
    assert response.error == "[2@0] {setvol} bad volume"


def test_assemble_stops_at_terminal_line():
    """Lines after the terminal line belong to the next reply."""
    source = ListSource(["a: 1", "OK", "b: 2", "OK"])
    response = asyncio.run(assemble_response(source))
    assert response.lines == ("a: 1",)
    assert source.reads == 2


def test_assemble_unterminated_raises_closed():
    with pytest.raises(TransportClosed):
        assemble(["volume: 50", "state: play"])


def test_assemble_greeting_single_line():
    response = assemble(["OK MPD 0.23.5"], greeting=True)
    assert response.ok
    assert response.lines == ("MPD 0.23.5",)


def test_assemble_greeting_banner_then_ok():
    response = assemble(["MPD 0.20.0", "OK"], greeting=True)
    assert response.lines == ("MPD 0.20.0",)


def test_response_is_immutable():
    response = assemble(["a: 1", "OK"])
    with pytest.raises(AttributeError):
        response.ok = False


def test_response_invariants():
    with pytest.raises(ValueError):
        Response(ok=True, error="nope")
    with pytest.raises(ValueError):
        Response(ok=False, error="")


def test_response_to_dict():
    assert Response(lines=("a: 1",)).to_dict() == {"ok": True, "lines": ["a: 1"]}
    assert Response(ok=False, error="bad").to_dict() == {
        "ok": False,
        "lines": [],
        "error": "bad",
    }
