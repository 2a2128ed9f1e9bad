from __future__ import annotations

from ..logging_config import log_structured_error
from .internal import (
    ConfigError,
    EngineError,
    MalformedLineError,
    NoServerError,
    TransportError,
)


def error_category(error: BaseException) -> str:
    """Map an exception to the short category used in structured logs."""
    if isinstance(error, TransportError | OSError | ConnectionError | TimeoutError):
        return "network"
    if isinstance(error, NoServerError | ConfigError):
        return "config"
    if isinstance(error, MalformedLineError):
        return "parsing"
    if isinstance(error, EngineError):
        return "internal"
    return "unknown"


def log_error(message: str, error: BaseException, context: dict | None = None) -> None:
    """Logs an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    merged: dict[str, object] = {}
    if isinstance(error, EngineError):
        merged.update(error.data)
    if context:
        merged.update(context)
    log_structured_error(
        error_type=error_category(error),
        message=f"{message}: {error}",
        exception=error,
        context=merged or None,
    )


def wrap_transport_error(error: BaseException, *, host: str, port: int) -> TransportError:
    """Wrap a raw socket exception into a TransportError carrying the endpoint."""
    if isinstance(error, TransportError):
        return error
    text = str(error) or type(error).__name__
    return TransportError(
        f"{host}:{port}: {text}",
        data={"host": host, "port": port, "cause": type(error).__name__},
    )
