"""Provider name to oracle mapping resolved from configuration."""

import logging
from typing import Callable, Optional

from ..core.exceptions import ConfigurationError
from .base import Oracle
from .config import OracleSettings

logger = logging.getLogger(__name__)

OracleFactory = Callable[[], Oracle]


class OracleRegistry:
    """
    Holds the oracles a caller may choose from.

    Oracles are built on first use and then reused. The registry belongs to
    whoever orchestrates documents; the segmenter, projector and applier
    never see it.

    Examples:
        >>> registry = OracleRegistry.from_settings(OracleSettings.from_env())
        >>> oracle = registry.get("ollama")
    """

    def __init__(self, default_provider: Optional[str] = None) -> None:
        self.default_provider = default_provider
        self._factories: dict[str, OracleFactory] = {}
        self._oracles: dict[str, Oracle] = {}

    def register(self, name: str, factory: OracleFactory) -> None:
        """Register a provider by name, replacing any previous one."""
        self._factories[name] = factory
        self._oracles.pop(name, None)

    def register_oracle(self, oracle: Oracle, name: Optional[str] = None) -> None:
        """Register an already-built oracle."""
        provider = name or oracle.name
        self._factories[provider] = lambda: oracle
        self._oracles[provider] = oracle

    @property
    def providers(self) -> list[str]:
        return list(self._factories)

    def get(self, name: Optional[str] = None) -> Oracle:
        """
        Resolve a provider to its oracle.

        Args:
            name: Provider name (None for the default provider)

        Raises:
            ConfigurationError: If the provider is unknown or not configured
        """
        provider = name or self.default_provider
        if provider is None:
            raise ConfigurationError(
                "No oracle provider requested and no default provider set",
                config_section="oracles",
            )

        if provider not in self._factories:
            error = ConfigurationError(
                f'LLM provider "{provider}" is not configured. '
                f"Available providers: {', '.join(self.providers) or 'none'}",
                config_section="oracles",
            )
            error.add_recovery_suggestion(
                f"Check your environment variables ({provider.upper()}_BASE_URL, "
                f"{provider.upper()}_MODEL)"
            )
            raise error

        if provider not in self._oracles:
            self._oracles[provider] = self._factories[provider]()
        return self._oracles[provider]

    @classmethod
    def from_settings(cls, settings: OracleSettings) -> "OracleRegistry":
        """Build a registry with one entry per configured provider."""
        from .claude import ClaudeOracle
        from .llm import LLMOracle
        from .presidio import PresidioOracle

        registry = cls(default_provider=settings.default_provider)

        if settings.openai is not None:
            openai_settings = settings.openai
            registry.register("openai", lambda: LLMOracle.from_openai_settings(openai_settings))
        if settings.anthropic is not None:
            anthropic_settings = settings.anthropic
            registry.register("anthropic", lambda: ClaudeOracle(anthropic_settings))
        if settings.ollama is not None:
            ollama_settings = settings.ollama
            registry.register("ollama", lambda: LLMOracle.from_ollama_settings(ollama_settings))
        if settings.presidio is not None:
            presidio_settings = settings.presidio
            registry.register("presidio", lambda: PresidioOracle(presidio_settings))

        if not registry.providers:
            logger.warning(
                "No oracle providers configured! Set up at least one provider in the environment"
            )
        else:
            logger.info(
                f"Available providers: {', '.join(registry.providers)}; "
                f"default provider: {settings.default_provider}"
            )
        return registry
