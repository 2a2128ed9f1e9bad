r"""
Logging configuration module for the IRC engine CLI.

Provides a colored root logger setup using the colorlog library plus a
structured error logging helper used by the error handling module.
"""

import logging
import os
import sys
from typing import Any

import colorlog


def log_structured_error(
    error_type: str,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error with a category tag, exception details and context.

    Args:
        error_type: Category of the error (e.g., 'network', 'config', 'parsing')
        message: Descriptive error message
        exception: The exception that occurred (optional)
        context: Additional context data for debugging
        level: Logging level (default: ERROR)
    """
    structured_message = f"[{error_type.upper()}] {message}"

    if exception is not None:
        structured_message += f" | Exception: {type(exception).__name__}: {str(exception)}"

    if context:
        context_str = " | ".join(f"{k}={v}" for k, v in context.items())
        structured_message += f" | Context: {context_str}"

    logging.getLogger("ircengine.errors").log(level, structured_message)


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, config=None):
        """Initialize the configurator.

        Args:
            config: Optional dict; ``{"debug": True}`` forces DEBUG level.
        """
        self.config = config or {}

    def _log_level(self) -> int:
        debug_env = os.environ.get("DEBUG", "").lower()
        if self.config.get("debug") or debug_env in ("true", "1", "yes"):
            return logging.DEBUG
        return logging.INFO

    def configure(self) -> int:
        """Configure the root logger with colored output.

        Uses environment variables:
        - DEBUG: Set to 'true', '1', or 'yes' for DEBUG level, otherwise INFO

        Returns:
            The level that was applied.
        """
        log_level = self._log_level()

        formatter = colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "magenta",
            },
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)

        logging.basicConfig(
            level=log_level,
            handlers=[handler],
            format="%(message)s",
            force=True,
        )
        logging.getLogger().setLevel(log_level)
        # asyncio debug chatter is not useful at DEBUG for a bot process
        logging.getLogger("asyncio").setLevel(logging.INFO)
        return log_level
