"""Protocol layer: command line building and response framing."""

from .framing import Response, assemble_response, classify_line
from .commands import build_command_line
