"""Idle connection watchdog."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .client import IRCClient

TIMEOUT_REASON = "Timeout"


class IRCIdleWatchdog:
    """Single timer forcing ``disconnect("Timeout")`` after inbound silence.

    Armed on registration, disarmed on every disconnect path. ``reset()``
    restarts the full countdown and is a no-op while disarmed.
    """

    def __init__(self, client: IRCClient) -> None:
        self.client = client
        self._handle: asyncio.TimerHandle | None = None

    @property
    def timeout(self) -> float:
        return self.client.config.idle_timeout_seconds

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self) -> None:
        self._cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.timeout, self._fire)
        self.client.log.log_event(
            "irc",
            "watchdog_armed",
            level=logging.DEBUG,
            user=self.client.session.current_nick,
            timeout=self.timeout,
        )

    def reset(self) -> None:
        if self._handle is None:
            return
        self.arm()

    def disarm(self) -> None:
        if self._cancel():
            self.client.log.log_event(
                "irc", "watchdog_disarmed", level=logging.DEBUG
            )

    def _cancel(self) -> bool:
        handle, self._handle = self._handle, None
        if handle is None:
            return False
        handle.cancel()
        return True

    def _fire(self) -> None:
        self._handle = None
        self.client.log.log_event(
            "irc",
            "watchdog_timeout",
            level=logging.WARNING,
            user=self.client.session.current_nick,
            timeout=self.timeout,
        )
        self.client.disconnect(TIMEOUT_REASON)
