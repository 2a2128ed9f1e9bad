"""Bot command extraction from channel messages.

A command looks like ``!seen Bob > Alice``: prefix, command word, free
argument text, and optionally the pipe marker followed by the nick the
answer should be addressed to. Without a pipe the answer goes to the
sender.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from .models import ChanCommand
from .parser import parse_userinfo

if TYPE_CHECKING:  # pragma: no cover
    from .client import IRCClient


def parse_command(
    message: str, prefix: str, pipe: str, sender_nick: str
) -> ChanCommand | None:
    """Extract a command from ``message`` or return None.

    The prefix must be followed directly by a non-whitespace word. The last
    occurrence of ``pipe`` splits off the result target, provided the text
    after it is a single word; otherwise the pipe is ordinary argument text
    and the target falls back to ``sender_nick``. So ``!say a > b c`` is
    answered to the sender with ``a > b c`` as its argument text.
    """
    if not message.startswith(prefix):
        return None
    body = message[len(prefix) :]
    if not body or body[0].isspace():
        return None

    result_target = sender_nick
    head, sep, tail = body.rpartition(pipe)
    target = tail.strip()
    if sep and head.strip() and target and len(target.split()) == 1:
        body = head
        result_target = target

    parts = body.strip().split(None, 1)
    if not parts:
        return None
    command = parts[0].lower()
    argument_text = parts[1].strip() if len(parts) > 1 else ""
    return ChanCommand(
        command=command, argument_text=argument_text, result_target=result_target
    )


class IRCCommandRouter:
    """Turns ``chanmsg`` events into ``chancmd`` and ``chancmd:<name>``."""

    def __init__(self, client: IRCClient) -> None:
        self.client = client
        client.bus.subscribe("chanmsg", self.handle_chanmsg)

    def handle_chanmsg(self, userinfo: str, channel: str, message: str) -> None:
        cfg = self.client.config
        sender = parse_userinfo(userinfo).nick
        cmd = parse_command(message, cfg.command_prefix, cfg.command_pipe, sender)
        if cmd is None:
            return
        self.client.log.log_event(
            "irc",
            "command",
            level=logging.DEBUG,
            user=self.client.session.current_nick,
            command=cmd.command,
            nick=sender,
            channel=channel,
        )
        respond = self._responder(channel, cmd.result_target)
        bus = self.client.bus
        bus.publish(
            "chancmd",
            userinfo,
            channel,
            cmd.command,
            cmd.argument_text,
            cmd.result_target,
            respond,
        )
        bus.publish(
            f"chancmd:{cmd.command}",
            userinfo,
            channel,
            cmd.argument_text,
            cmd.result_target,
            respond,
        )

    def _responder(self, channel: str, target: str) -> Callable[[str], None]:
        def respond(text: str) -> None:
            self.client.send(f"PRIVMSG {channel} :{target}: {text}")

        return respond
