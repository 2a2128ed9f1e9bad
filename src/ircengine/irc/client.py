"""Async IRC client engine."""

from __future__ import annotations

import logging
from typing import Any

from ..config import EngineConfig
from ..logs.logger import logger as root_logger
from .commands import IRCCommandRouter
from .connection import IRCConnection
from .dispatcher import IRCDispatcher
from .events import EventBus, Subscriber
from .models import ConnectionState, Session
from .watchdog import IRCIdleWatchdog


class IRCClient:  # pylint: disable=too-many-instance-attributes
    """One independent IRC engine instance.

    Wires the connection, dispatcher, watchdog and command router around a
    private event bus. Subscribe with ``on(event, fn)``; every protocol
    command or numeric is published under its lower-cased name with
    ``(source, *params)``, plus ``raw``, ``raw:parsed``, ``botmsg``,
    ``chanmsg``, ``chancmd``, ``chancmd:<name>``, ``connected``,
    ``disconnected`` and ``error``. ``on("*", fn)`` observes everything.
    """

    def __init__(self, config: EngineConfig) -> None:
        self.config = config
        self.session = Session()
        self.state = ConnectionState.IDLE
        # Per-instance logger name: the level set below must not leak to
        # another engine running under the same nick.
        self.log = root_logger.child(f"{config.nick}.{id(self):x}")
        if config.debug_logging:
            self.log.set_level(logging.DEBUG)
        self.bus = EventBus(self.log)
        self.watchdog = IRCIdleWatchdog(self)
        self.connection = IRCConnection(self)
        self.dispatcher = IRCDispatcher(self)
        self.commands = IRCCommandRouter(self)

    @classmethod
    def create(cls, server: str, nick: str, **options: Any) -> IRCClient:
        """Shortcut for ``IRCClient(EngineConfig.from_server_string(...))``."""
        return cls(EngineConfig.from_server_string(server, nick, **options))

    def _set_state(self, new_state: ConnectionState) -> None:
        if self.state != new_state:
            self.log.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                user=self.session.current_nick,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    @property
    def connected(self) -> bool:
        return self.session.connected

    async def connect(self, host: str | None = None, port: int | None = None) -> bool:
        """Open the TCP connection and send NICK/USER.

        Returns False (after publishing ``error``) if no host is available
        or the socket cannot be opened. Registration completes later, when
        the welcome numeric arrives and ``connected`` is published.
        """
        return await self.connection.connect(host, port)

    def disconnect(self, reason: str | None = None) -> None:
        """Send QUIT and close; state is reset before this returns."""
        self.connection.disconnect(reason)

    def send(self, raw_line: str) -> bool:
        """Write one raw protocol line; dropped with a warning unless connected."""
        if not self.session.connected:
            self.log.log_event("irc", "send_dropped", level=logging.WARNING, line=raw_line)
            return False
        return self.connection.write_line(raw_line)

    async def wait_closed(self) -> None:
        """Wait until the current connection's reader has stopped."""
        await self.connection.wait_closed()

    def on(self, event_name: str, handler: Subscriber) -> Subscriber:
        return self.bus.subscribe(event_name, handler)

    def off(self, event_name: str, handler: Subscriber) -> bool:
        return self.bus.unsubscribe(event_name, handler)

    def once(self, event_name: str, handler: Subscriber) -> Subscriber:
        return self.bus.once(event_name, handler)

    def emit(self, event_name: str, *args: Any) -> int:
        return self.bus.publish(event_name, *args)

    subscribe = on
    unsubscribe = off
