"""
Configuration constants for the IRC engine

This module contains the tunable defaults used throughout the engine.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable (see _get_env_int)."""
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


# Server defaults
IRC_DEFAULT_PORT = _get_env_int("IRC_DEFAULT_PORT", 6667)
IRC_DEFAULT_REAL_NAME = os.getenv("IRC_DEFAULT_REAL_NAME", "Python IRC Bot")
IRC_DEFAULT_QUIT_REASON = os.getenv("IRC_DEFAULT_QUIT_REASON", "Leaving")

# Command convention defaults (e.g. "!seen Bob > Alice")
IRC_DEFAULT_COMMAND_PREFIX = "!"
IRC_DEFAULT_COMMAND_PIPE = ">"

# Seconds without any inbound line before the watchdog forces a disconnect
IRC_IDLE_TIMEOUT_SECONDS = _get_env_float("IRC_IDLE_TIMEOUT_SECONDS", 180.0)

# Transport tuning
IRC_CONNECT_TIMEOUT_SECONDS = _get_env_float("IRC_CONNECT_TIMEOUT_SECONDS", 30.0)
IRC_READ_CHUNK_SIZE = _get_env_int("IRC_READ_CHUNK_SIZE", 4096)
IRC_LINE_TERMINATOR = "\r\n"

# Connect retry backoff (only used when connect_attempts > 1)
IRC_CONNECT_BACKOFF_BASE = _get_env_float("IRC_CONNECT_BACKOFF_BASE", 1.0)
IRC_CONNECT_BACKOFF_MAX = _get_env_float("IRC_CONNECT_BACKOFF_MAX", 30.0)

# "Welcome to the network" numeric; marks successful registration
RPL_WELCOME = "001"

# Config file location for the CLI entry point
IRC_ENGINE_CONF_FILE = os.getenv("IRC_ENGINE_CONF_FILE", "ircengine.conf")
