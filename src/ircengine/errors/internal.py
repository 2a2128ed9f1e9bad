"""Centralized internal error hierarchy.

These exceptions give semantic categories to the failures the engine
reports. On I/O paths they are not raised to callers: they are published
as the argument of the ``error`` event and logged.

Classes:
  EngineError         – Base for all engine errors.
  NoServerError       – ``connect()`` called without a usable host.
  TransportError      – Socket open/read/write failures (OSError, timeouts).
  MalformedLineError  – Inbound protocol line the parser cannot use.
  ConfigError         – Invalid or unreadable configuration.
"""

from __future__ import annotations

from collections.abc import Mapping


class EngineError(Exception):
    """Base class for all engine errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class NoServerError(EngineError):
    """Raised (as an event payload) when no server host is configured."""

    def __init__(self, message: str = "No server set.") -> None:
        super().__init__(message)


class TransportError(EngineError):
    """Exception for network or transport layer errors.

    Wraps the underlying OSError / TimeoutError in ``data["cause"]``.
    """


class MalformedLineError(EngineError):
    """Inbound line with fewer tokens than the parser needs."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"Malformed line ({reason}): {line!r}", data={"line": line})
        self.line = line


class ConfigError(EngineError):
    """Configuration could not be loaded or failed validation."""


__all__ = [
    "EngineError",
    "NoServerError",
    "TransportError",
    "MalformedLineError",
    "ConfigError",
]
