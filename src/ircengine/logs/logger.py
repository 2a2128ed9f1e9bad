"""Structured event logger used across the engine."""

from __future__ import annotations

import logging
import os

from .event_catalog import render


class BotLogger:
    """Thin wrapper over a stdlib logger that renders catalogued events.

    ``log_event("irc", "registered", server=..., nick=...)`` looks up the
    human text for ``("irc", "registered")`` in the event catalog, formats
    it with the keyword context and logs it with a ``[nick#channel]``
    prefix. The reserved keywords ``user`` and ``channel`` feed the prefix.
    """

    def __init__(self, name: str = "ircengine") -> None:
        self._event_name_width = 32
        self.logger = logging.getLogger(name)
        debug_enabled = os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")
        if debug_enabled:
            self.logger.setLevel(logging.DEBUG)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)

    def child(self, suffix: str) -> BotLogger:
        """Return a logger for ``<name>.<suffix>`` sharing this configuration."""
        return BotLogger(f"{self.logger.name}.{suffix}")

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        event_name = f"{domain}_{action}".lower()
        human_text = human
        derived = False
        if human_text is None:
            human_text = render(domain, action, kwargs)
            if human_text is None:
                human_text = f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
                derived = True
        if derived:
            kwargs.setdefault("derived", True)
        self._log(level, event_name, human_text, exc_info=exc_info, **kwargs)

    def _log(
        self,
        level: int,
        event_name: str,
        human_text: str,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        kw: dict[str, object] = dict(kwargs)
        user, channel = self._extract_reserved(kw)
        prefix = self._build_prefix(user, channel)
        if self.logger.isEnabledFor(logging.DEBUG):
            msg = self._build_debug_message(event_name, prefix, human_text, kw)
        else:
            msg = f"{prefix} {human_text}"
        self.logger.log(level, msg, exc_info=exc_info)

    @staticmethod
    def _extract_reserved(kwargs: dict[str, object]) -> tuple[str | None, str | None]:
        user_o = kwargs.pop("user", None)
        channel_o = kwargs.pop("channel", None)
        user = user_o if isinstance(user_o, str) and user_o else None
        channel = channel_o if isinstance(channel_o, str) and channel_o else None
        return user, channel

    @staticmethod
    def _build_prefix(user: str | None, channel: str | None) -> str:
        user_label = user or "system"
        core = f"{user_label}{channel}" if channel else user_label
        padded = core.ljust(24)[:24]
        return f"[{padded}]"

    def _build_debug_message(
        self,
        event_name: str,
        prefix: str,
        human_text: str,
        kwargs: dict[str, object],
    ) -> str:
        context = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        width = self._event_name_width
        if len(event_name) <= width:
            ev = event_name.ljust(width)
        else:  # truncate but keep rightmost indicator
            ev = event_name[: width - 1] + "…"
        base = f"{ev} {prefix} {human_text}"
        if context:
            base = f"{base} ({context})"
        return base


logger = BotLogger()
