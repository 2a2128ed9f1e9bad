from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ..constants import (
    IRC_CONNECT_TIMEOUT_SECONDS,
    IRC_DEFAULT_COMMAND_PIPE,
    IRC_DEFAULT_COMMAND_PREFIX,
    IRC_DEFAULT_PORT,
    IRC_DEFAULT_REAL_NAME,
    IRC_IDLE_TIMEOUT_SECONDS,
)
from ..errors import ConfigError


class ServerConfig(BaseModel):
    """Server endpoint. ``host`` may be empty; ``connect()`` then reports NoServer."""

    model_config = ConfigDict(frozen=True)

    host: str = ""
    port: int = Field(default=IRC_DEFAULT_PORT, ge=1, le=65535)

    @field_validator("host", mode="before")
    @classmethod
    def strip_host(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()


class EngineConfig(BaseModel):
    """Immutable engine configuration.

    Attributes:
        server: Host/port of the IRC server.
        nick: Nickname sent with NICK during registration.
        user_name: Username sent with USER (defaults to ``nick``).
        real_name: Real name sent as the USER trailing parameter.
        command_prefix: Leading marker of bot commands in channel messages.
        command_pipe: Marker that redirects a command result to another nick.
        idle_timeout_seconds: Inbound silence tolerated before disconnecting.
        debug_logging: Log wire traffic at DEBUG level.
        connect_timeout_seconds: Timeout of a single TCP open attempt.
        connect_attempts: TCP open attempts before reporting failure.

    Both snake_case names and the camelCase aliases (``userName``,
    ``commandPrefix``...) are accepted on input.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    server: ServerConfig = Field(default_factory=ServerConfig)
    nick: str = Field(min_length=1)
    user_name: str = Field(default="", alias="userName")
    real_name: str = Field(default=IRC_DEFAULT_REAL_NAME, alias="realName")
    command_prefix: str = Field(
        default=IRC_DEFAULT_COMMAND_PREFIX, min_length=1, alias="commandPrefix"
    )
    command_pipe: str = Field(
        default=IRC_DEFAULT_COMMAND_PIPE, min_length=1, alias="commandPipe"
    )
    idle_timeout_seconds: float = Field(
        default=IRC_IDLE_TIMEOUT_SECONDS, gt=0, alias="idleTimeoutSeconds"
    )
    debug_logging: bool = Field(default=False, alias="debugLogging")
    connect_timeout_seconds: float = Field(
        default=IRC_CONNECT_TIMEOUT_SECONDS, gt=0, alias="connectTimeoutSeconds"
    )
    connect_attempts: int = Field(default=1, ge=1, alias="connectAttempts")

    @field_validator("nick", "command_prefix", "command_pipe")
    @classmethod
    def no_whitespace(cls, v: str) -> str:
        if any(ch.isspace() for ch in v):
            raise ValueError("must not contain whitespace")
        return v

    @model_validator(mode="before")
    @classmethod
    def default_user_name(cls, data: Any) -> Any:
        """Fill ``userName`` from ``nick`` when it is absent or blank."""
        if not isinstance(data, Mapping):
            return data
        values = dict(data)
        user_name = values.get("userName", values.get("user_name"))
        if not user_name:
            values.pop("user_name", None)
            values["userName"] = values.get("nick", "")
        return values

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EngineConfig:
        """Validate a raw mapping, raising ConfigError on invalid input."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigError(
                f"Invalid configuration: {e.error_count()} error(s)",
                data={"errors": "; ".join(_format_errors(e))},
            ) from e

    @classmethod
    def from_server_string(
        cls, server: str, nick: str, **options: Any
    ) -> EngineConfig:
        """Build a config from ``"host[:port]"`` plus keyword options."""
        host, _, port = server.strip().partition(":")
        server_data: dict[str, Any] = {"host": host}
        if port:
            server_data["port"] = port
        return cls.from_dict({**options, "server": server_data, "nick": nick})


def _format_errors(error: ValidationError) -> list[str]:
    out = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item.get("loc", ()))
        out.append(f"{loc}: {item.get('msg', 'invalid')}")
    return out
