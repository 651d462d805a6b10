"""PII oracles: the collaborators that decide what is sensitive."""

from .base import (
    DETECTION_CATEGORIES,
    Oracle,
    OracleResponse,
    OracleResult,
    PiiDetections,
    parse_oracle_response,
)
from .claude import ClaudeOracle
from .config import (
    AnthropicSettings,
    OllamaSettings,
    OpenAISettings,
    OracleSettings,
    PresidioSettings,
)
from .llm import LLMOracle
from .presidio import PresidioOracle
from .registry import OracleRegistry

__all__ = [
    "DETECTION_CATEGORIES",
    "Oracle",
    "OracleResponse",
    "OracleResult",
    "PiiDetections",
    "parse_oracle_response",
    "OracleSettings",
    "OpenAISettings",
    "AnthropicSettings",
    "OllamaSettings",
    "PresidioSettings",
    "LLMOracle",
    "ClaudeOracle",
    "PresidioOracle",
    "OracleRegistry",
]
