"""Chat layer built on the protocol engine: session state and user input."""

from .input_parser import QuitRequest, parse_input  # noqa: F401
from .session import SERVER_BUFFER, ChannelState, ChatSession, is_channel  # noqa: F401

__all__ = [
    "ChannelState",
    "ChatSession",
    "QuitRequest",
    "SERVER_BUFFER",
    "is_channel",
    "parse_input",
]
