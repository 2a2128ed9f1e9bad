"""Configuration package exports."""

from .loader import load_config, load_raw
from .model import EngineConfig, ServerConfig

__all__ = ["EngineConfig", "ServerConfig", "load_config", "load_raw"]
