"""Logging configuration."""

from .config import LoggingConfig, get_config, set_config
from .logging import configure_logging, correlation_context

__all__ = [
    "LoggingConfig",
    "get_config",
    "set_config",
    "configure_logging",
    "correlation_context",
]
