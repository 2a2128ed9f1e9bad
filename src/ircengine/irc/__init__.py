"""IRC subsystem package.

Contains framing, parsing, event bus, connection, dispatcher, idle
watchdog and command routing modules, wired together by ``IRCClient``.
"""

from .client import IRCClient  # noqa: F401
from .commands import IRCCommandRouter, parse_command  # noqa: F401
from .events import WILDCARD, EventBus  # noqa: F401
from .framer import LineFramer  # noqa: F401
from .models import (  # noqa: F401
    ChanCommand,
    ConnectionState,
    ParsedLine,
    Session,
    UserInfo,
)
from .parser import parse_line, parse_userinfo, ping_token  # noqa: F401

__all__ = [
    "ChanCommand",
    "ConnectionState",
    "EventBus",
    "IRCClient",
    "IRCCommandRouter",
    "LineFramer",
    "ParsedLine",
    "Session",
    "UserInfo",
    "WILDCARD",
    "parse_command",
    "parse_line",
    "parse_userinfo",
    "ping_token",
]
