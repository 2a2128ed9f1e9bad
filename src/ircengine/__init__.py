"""Client-side IRC engine: framing, parsing, lifecycle and bot commands."""

from .config import EngineConfig, ServerConfig, load_config
from .errors import (
    ConfigError,
    EngineError,
    MalformedLineError,
    NoServerError,
    TransportError,
)
from .irc import (
    ChanCommand,
    ConnectionState,
    EventBus,
    IRCClient,
    LineFramer,
    ParsedLine,
    UserInfo,
    parse_command,
    parse_line,
    parse_userinfo,
)

__version__ = "0.1.0"

__all__ = [
    "ChanCommand",
    "ConfigError",
    "ConnectionState",
    "EngineConfig",
    "EngineError",
    "EventBus",
    "IRCClient",
    "LineFramer",
    "MalformedLineError",
    "NoServerError",
    "ParsedLine",
    "ServerConfig",
    "TransportError",
    "UserInfo",
    "load_config",
    "parse_command",
    "parse_line",
    "parse_userinfo",
]
