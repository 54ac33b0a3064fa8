"""Command line builder.

A command line is the command name followed by its arguments, joined by
single spaces. No quoting or escaping is applied; arguments containing
spaces are the caller's responsibility.
"""

from __future__ import annotations

from typing import Any


def build_command_line(command: str, *arguments: Any) -> str:
    """Build the text of one command line (without the trailing newline).

    Args:
        command: Command name, e.g. ``"status"`` or ``"play"``.
        arguments: Values appended verbatim after ``str()`` conversion.

    Raises:
        ValueError: If the command is empty or any part contains a newline.
    """
    if not command:
        raise ValueError("Command must be a non-empty string")

    parts = [command, *(str(arg) for arg in arguments)]
    for part in parts:
        if "\n" in part or "\r" in part:
            raise ValueError(f"Command line parts may not contain newlines: {part!r}")
    return " ".join(parts)
