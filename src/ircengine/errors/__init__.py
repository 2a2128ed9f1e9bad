"""Engine error types and reporting helpers."""

from .handling import error_category, log_error, wrap_transport_error  # noqa: F401
from .internal import (  # noqa: F401
    ConfigError,
    EngineError,
    MalformedLineError,
    NoServerError,
    TransportError,
)

__all__ = [
    "ConfigError",
    "EngineError",
    "MalformedLineError",
    "NoServerError",
    "TransportError",
    "error_category",
    "log_error",
    "wrap_transport_error",
]
