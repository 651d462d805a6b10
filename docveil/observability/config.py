"""Configuration for logging."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format (json or text)")
    enable_correlation: bool = Field(default=True, description="Enable correlation IDs")
    output: str = Field(default="stderr", description="Log output (stdout, stderr or file)")
    file_path: str | None = Field(default=None, description="Log file path")

    @classmethod
    def from_file(cls, config_path: Path | str) -> LoggingConfig:
        """Load configuration from the ``logging`` section of a YAML file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data.get("logging", {}))

    @classmethod
    def from_env(cls) -> LoggingConfig:
        """Load configuration from environment variables."""
        config = cls()
        config.level = os.getenv("DOCVEIL_LOG_LEVEL", config.level)
        config.format = os.getenv("DOCVEIL_LOG_FORMAT", config.format)
        config.enable_correlation = (
            os.getenv("DOCVEIL_LOG_CORRELATION", "true").lower() == "true"
        )
        if file_path := os.getenv("DOCVEIL_LOG_FILE"):
            config.output = "file"
            config.file_path = file_path
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return self.model_dump()


_config: LoggingConfig | None = None


def get_config() -> LoggingConfig:
    """Get the global logging configuration."""
    global _config
    if _config is None:
        _config = LoggingConfig.from_env()
    return _config


def set_config(config: LoggingConfig) -> None:
    """Set the global logging configuration."""
    global _config
    _config = config
