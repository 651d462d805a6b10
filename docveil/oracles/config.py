"""Configuration for oracle providers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from ..core.exceptions import ConfigurationError

PROVIDERS = ("openai", "anthropic", "ollama", "presidio")


class OpenAISettings(BaseModel):
    """OpenAI or any OpenAI-compatible chat-completion endpoint."""

    api_key: str | None = Field(default=None, description="API key")
    base_url: str | None = Field(
        default=None, description="Custom endpoint for OpenAI-compatible APIs"
    )
    model: str = Field(default="gpt-4", description="Model name")
    temperature: float = Field(default=0.0, description="Sampling temperature")
    timeout: float | None = Field(default=None, description="Request timeout in seconds")


class AnthropicSettings(BaseModel):
    """Anthropic Claude messages API."""

    api_key: str | None = Field(default=None, description="API key")
    model: str = Field(default="claude-3-sonnet-20240229", description="Model name")
    temperature: float = Field(default=0.0, description="Sampling temperature")
    max_tokens: int = Field(default=4096, description="Maximum tokens in a response")
    timeout: float | None = Field(default=None, description="Request timeout in seconds")


class OllamaSettings(BaseModel):
    """Local Ollama runtime, reached through its OpenAI-compatible API."""

    base_url: str = Field(default="http://localhost:11434", description="Ollama URL")
    model: str = Field(default="mistral", description="Model name")
    temperature: float = Field(default=0.0, description="Sampling temperature")
    timeout: float | None = Field(default=None, description="Request timeout in seconds")


class PresidioSettings(BaseModel):
    """Presidio analyzer-based detection."""

    language: str = Field(default="en", description="Analysis language")
    score_threshold: float = Field(default=0.5, description="Minimum confidence")
    entities: list[str] | None = Field(
        default=None, description="Entity types to detect (None for all)"
    )


class OracleSettings(BaseModel):
    """Which oracle providers are available and which one is the default."""

    default_provider: str = Field(default="openai", description="Provider used when none is named")
    openai: OpenAISettings | None = Field(default=None)
    anthropic: AnthropicSettings | None = Field(default=None)
    ollama: OllamaSettings | None = Field(default=None)
    presidio: PresidioSettings | None = Field(default=None)

    def configured_providers(self) -> list[str]:
        """Names of the providers that have settings."""
        return [name for name in PROVIDERS if getattr(self, name) is not None]

    @classmethod
    def from_file(cls, config_path: Path | str) -> OracleSettings:
        """Load settings from the ``oracles`` section of a YAML file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                config_file=str(config_path),
            )

        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data.get("oracles", {}))

    @classmethod
    def from_env(cls) -> OracleSettings:
        """
        Load settings from environment variables.

        A provider is configured only when its key variable is set:
        ``OPENAI_API_KEY`` or ``OPENAI_BASE_URL`` for openai,
        ``ANTHROPIC_API_KEY`` for anthropic,
        ``OLLAMA_BASE_URL`` for ollama, ``PRESIDIO_LANGUAGE`` or
        ``PRESIDIO_ENABLED=true`` for presidio.
        """
        settings = cls(default_provider=os.getenv("DEFAULT_LLM_PROVIDER", "openai"))

        if os.getenv("OPENAI_API_KEY") or os.getenv("OPENAI_BASE_URL"):
            settings.openai = OpenAISettings(
                api_key=os.getenv("OPENAI_API_KEY"),
                base_url=os.getenv("OPENAI_BASE_URL"),
                model=os.getenv("OPENAI_MODEL", "gpt-4"),
                temperature=float(os.getenv("OPENAI_TEMPERATURE", "0")),
            )

        if api_key := os.getenv("ANTHROPIC_API_KEY"):
            settings.anthropic = AnthropicSettings(
                api_key=api_key,
                model=os.getenv("ANTHROPIC_MODEL", "claude-3-sonnet-20240229"),
                temperature=float(os.getenv("ANTHROPIC_TEMPERATURE", "0")),
            )

        if base_url := os.getenv("OLLAMA_BASE_URL"):
            settings.ollama = OllamaSettings(
                base_url=base_url,
                model=os.getenv("OLLAMA_MODEL", "mistral"),
                temperature=float(os.getenv("OLLAMA_TEMPERATURE", "0")),
            )

        if os.getenv("PRESIDIO_LANGUAGE") or os.getenv("PRESIDIO_ENABLED", "").lower() == "true":
            settings.presidio = PresidioSettings(
                language=os.getenv("PRESIDIO_LANGUAGE", "en"),
            )

        return settings

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary, hiding secrets."""
        data = self.model_dump()
        for provider in ("openai", "anthropic"):
            if data.get(provider) and data[provider].get("api_key"):
                data[provider]["api_key"] = "***"
        return data
