"""Shared IRC data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ConnectionState(Enum):
    IDLE = auto()
    CONNECTING = auto()
    AWAITING_REGISTRATION = auto()
    CONNECTED = auto()
    DISCONNECTED = auto()


@dataclass(slots=True)
class Session:
    """Live connection facts for one engine instance.

    ``connected`` is False whenever ``current_nick``/``server_name`` are empty.
    """

    connected: bool = False
    current_nick: str = ""
    server_name: str = ""

    def reset(self) -> None:
        self.connected = False
        self.current_nick = ""
        self.server_name = ""


@dataclass(frozen=True, slots=True)
class ParsedLine:
    event_name: str
    source: str
    params: tuple[str, ...] = field(default_factory=tuple)

    def as_list(self) -> list[str]:
        """``[event_name, source, *params]``, the ``raw:parsed`` payload."""
        return [self.event_name, self.source, *self.params]


@dataclass(frozen=True, slots=True)
class UserInfo:
    nick: str
    username: str = ""
    host: str = ""


@dataclass(frozen=True, slots=True)
class ChanCommand:
    command: str
    argument_text: str
    result_target: str
