"""Anthropic Claude oracle over the messages API."""

import logging
from typing import Any, Optional

import anthropic

from ..core.exceptions import create_oracle_error
from .base import Oracle, OracleResult, parse_oracle_response
from .config import AnthropicSettings
from .llm import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

ANTHROPIC_URL = "https://api.anthropic.com"


class ClaudeOracle(Oracle):
    """
    Anonymizes chunks by prompting a Claude model for a JSON answer.

    Uses the same prompt and answer format as :class:`LLMOracle`; only the
    transport differs.

    Examples:
        >>> oracle = ClaudeOracle(AnthropicSettings(api_key="sk-ant-..."))
        >>> result = oracle.anonymize_chunk("Contact John Smith at work.")
    """

    name = "anthropic"

    def __init__(self, settings: AnthropicSettings, client: Optional[Any] = None) -> None:
        self.model = settings.model
        self.temperature = settings.temperature
        self.max_tokens = settings.max_tokens
        self.connection_hint = "Check your network connection and API key configuration."

        if client is None:
            client_kwargs: dict[str, Any] = {"api_key": settings.api_key}
            if settings.timeout is not None:
                client_kwargs["timeout"] = settings.timeout
            client = anthropic.Anthropic(**client_kwargs)
        self.client = client

        logger.info(f"anthropic oracle initialized: {self.model}")

    def anonymize_chunk(self, text: str) -> OracleResult:
        """Send one chunk to Claude and parse its JSON answer."""
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=SYSTEM_PROMPT,
                messages=[
                    {"role": "user", "content": f"Anonymize the following text:\n\n{text}"}
                ],
            )
        except anthropic.APITimeoutError as e:
            raise create_oracle_error(
                "Connection timeout to ANTHROPIC. The LLM server is not responding.",
                provider=self.name,
                original_error=e,
            ) from e
        except anthropic.APIConnectionError as e:
            error = create_oracle_error(
                f"Cannot connect to ANTHROPIC at {ANTHROPIC_URL}. {self.connection_hint}",
                provider=self.name,
                original_error=e,
            )
            error.add_context("base_url", ANTHROPIC_URL)
            raise error from e
        except anthropic.AnthropicError as e:
            raise create_oracle_error(
                f"{self.name} request failed: {e}",
                provider=self.name,
                original_error=e,
            ) from e

        # only text blocks carry an answer
        content = "".join(block.text for block in response.content if hasattr(block, "text"))
        result = parse_oracle_response(content, provider=self.name)
        logger.debug(
            f"{self.name} anonymized {len(text)} characters: "
            f"{len(result.replacements)} replacements, {result.detections.total} detections"
        )
        return result
