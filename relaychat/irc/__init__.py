"""IRC protocol engine.

Line framing, message parsing, numeric reply interpretation, outbound command
serialization, event dispatch and the connection state machine that ties them
together.
"""

from .commands import (  # noqa: F401
    Join,
    OutboundIntent,
    Part,
    Raw,
    SendText,
    SetIdentity,
    build_lines,
    encode_intent,
)
from .connection import IRCConnection  # noqa: F401
from .dispatcher import EventDispatcher, EventSubscription  # noqa: F401
from .events import (  # noqa: F401
    ChatMessage,
    Connected,
    ConnectionFailure,
    Disconnected,
    DomainEvent,
    Joined,
    NickChanged,
    Notice,
    Parted,
    ServerText,
    TopicReceived,
    UserListReceived,
)
from .framer import LineFramer  # noqa: F401
from .interpreter import interpret_message  # noqa: F401
from .models import ConnectionState  # noqa: F401
from .numerics import interpret_numeric  # noqa: F401
from .parser import ParsedMessage, nick_from_prefix, parse_message  # noqa: F401

__all__ = [
    "ChatMessage",
    "Connected",
    "ConnectionFailure",
    "ConnectionState",
    "Disconnected",
    "DomainEvent",
    "EventDispatcher",
    "EventSubscription",
    "IRCConnection",
    "Join",
    "Joined",
    "LineFramer",
    "NickChanged",
    "Notice",
    "OutboundIntent",
    "ParsedMessage",
    "Part",
    "Parted",
    "Raw",
    "SendText",
    "ServerText",
    "SetIdentity",
    "TopicReceived",
    "UserListReceived",
    "build_lines",
    "encode_intent",
    "interpret_message",
    "interpret_numeric",
    "nick_from_prefix",
    "parse_message",
]
