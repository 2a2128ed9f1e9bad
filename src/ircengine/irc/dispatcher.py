"""Line dispatch: PING handling, parsing and event publication."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..constants import RPL_WELCOME
from ..errors import MalformedLineError
from .parser import parse_line, ping_token

if TYPE_CHECKING:  # pragma: no cover
    from .client import IRCClient


class IRCDispatcher:
    """Feeds framed lines through the parser onto the event bus.

    Also installs the built-in subscribers: ``privmsg`` fans out to
    ``botmsg``/``chanmsg`` and the welcome numeric completes registration.
    Built-ins are subscribed first, so user handlers of ``001`` already
    see the connected session.
    """

    def __init__(self, client: IRCClient):
        self.client = client
        client.bus.subscribe(RPL_WELCOME, self._handle_welcome)
        client.bus.subscribe("privmsg", self._handle_privmsg)

    def handle_line(self, line: str) -> bool:
        """Process one line; True if it reached parsing (PING included)."""
        client = self.client
        client.log.log_event(
            "irc", "read", level=logging.DEBUG, user=client.session.current_nick, line=line
        )
        if not line.strip():
            return False
        try:
            token = ping_token(line)
            if token is not None:
                client.connection.write_line(f"PONG {token}")
                client.log.log_event("irc", "ping", level=logging.DEBUG)
                client.watchdog.reset()
                return True
            parsed = parse_line(line)
        except MalformedLineError as e:
            client.log.log_event(
                "irc",
                "malformed_line",
                level=logging.WARNING,
                user=client.session.current_nick,
                error=str(e),
            )
            return False

        client.watchdog.reset()
        bus = client.bus
        bus.publish(parsed.event_name, parsed.source, *parsed.params)
        bus.publish("raw", line)
        bus.publish("raw:parsed", parsed.as_list())
        return True

    def _handle_welcome(self, server_name: str, *params: str) -> None:
        nick = params[0] if params else self.client.config.nick
        self.client.connection.registered(server_name, nick)

    def _handle_privmsg(self, userinfo: str, *params: str) -> None:
        if len(params) < 2:
            return
        target, message = params[0], params[1]
        session = self.client.session
        if session.current_nick and target.lower() == session.current_nick.lower():
            self.client.bus.publish("botmsg", userinfo, message)
        elif target.startswith("#"):
            self.client.bus.publish("chanmsg", userinfo, target, message)
