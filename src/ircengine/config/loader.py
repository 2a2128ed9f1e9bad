"""Configuration loading utilities."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from ..constants import IRC_ENGINE_CONF_FILE
from ..errors import ConfigError
from .model import EngineConfig


def load_raw(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Read the JSON config file into a dict.

    Raises:
        ConfigError: If the file is missing, unreadable or not a JSON object.
    """
    p = Path(path)
    try:
        with p.open(encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {p}", data={"path": str(p)}) from e
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(
            f"Config file unreadable: {p}: {e}", data={"path": str(p)}
        ) from e
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file must contain a JSON object: {p}", data={"path": str(p)}
        )
    return data


def load_config(path: str | os.PathLike[str] | None = None) -> EngineConfig:
    """Load and validate the engine configuration.

    Args:
        path: Config file path; defaults to ``$IRC_ENGINE_CONF_FILE`` or
            ``ircengine.conf``.
    """
    config_file = path or os.environ.get("IRC_ENGINE_CONF_FILE", IRC_ENGINE_CONF_FILE)
    return EngineConfig.from_dict(load_raw(config_file))
