"""Chat-completion oracle for OpenAI and OpenAI-compatible endpoints."""

import logging
from typing import Any, Optional

import openai

from ..core.exceptions import create_oracle_error
from .base import Oracle, OracleResult, parse_oracle_response
from .config import OllamaSettings, OpenAISettings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert document anonymization assistant. Your task is to:
1. Identify and remove all Personally Identifiable Information (PII) from the text
2. Replace PII with generic placeholders like [NAME], [ADDRESS], [EMAIL], [PHONE], [DATE], [ORGANIZATION]
3. Maintain the document's structure and readability
4. Return the anonymized text, a JSON list of detected PII, and every replacement you made

Keep the original language of the text.

PII includes:
- Personal names
- Physical addresses
- Email addresses
- Phone numbers
- Dates of birth or identifying dates
- Organization names that could identify individuals
- ID numbers (social security, passport, driver's license, etc.)
- Financial information (credit card, bank account numbers)

Each replacement must quote the original text exactly as it appears in the input.

Respond with a JSON object in this exact format:
{
  "anonymizedText": "the anonymized text here",
  "piiDetected": {
    "names": ["list of detected names"],
    "addresses": ["list of detected addresses"],
    "emails": ["list of detected emails"],
    "phoneNumbers": ["list of detected phone numbers"],
    "dates": ["list of detected dates"],
    "organizations": ["list of detected organizations"],
    "other": ["any other PII detected"]
  },
  "replacements": [
    {"original": "exact original text", "anonymized": "placeholder used"}
  ]
}"""

DEFAULT_OPENAI_URL = "https://api.openai.com/v1"


class LLMOracle(Oracle):
    """
    Anonymizes chunks by prompting a chat model for a JSON answer.

    Examples:
        >>> oracle = LLMOracle.from_openai_settings(OpenAISettings(api_key="sk-..."))
        >>> result = oracle.anonymize_chunk("Contact John Smith at work.")
        >>> result.replacements
        [Replacement(original='John Smith', anonymized='[NAME]')]
    """

    def __init__(
        self,
        name: str,
        model: str,
        temperature: float = 0.0,
        client: Optional[Any] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        connection_hint: str = "Check your network connection and API key configuration.",
    ) -> None:
        """
        Initialize the oracle.

        Args:
            name: Provider name used in logs and errors
            model: Chat model name
            temperature: Sampling temperature
            client: Pre-built OpenAI client, mainly for tests
            api_key: API key (some local endpoints accept any value)
            base_url: Endpoint for OpenAI-compatible APIs
            timeout: Request timeout in seconds
            connection_hint: Advice attached to connection failures
        """
        self.name = name
        self.model = model
        self.temperature = temperature
        self.base_url = base_url or DEFAULT_OPENAI_URL
        self.connection_hint = connection_hint

        if client is None:
            client_kwargs: dict[str, Any] = {"api_key": api_key or "not-needed"}
            if base_url:
                client_kwargs["base_url"] = base_url
            if timeout is not None:
                client_kwargs["timeout"] = timeout
            client = openai.OpenAI(**client_kwargs)
        self.client = client

        logger.info(f"{name} oracle initialized: {model} ({self.base_url})")

    @classmethod
    def from_openai_settings(cls, settings: OpenAISettings, client: Optional[Any] = None) -> "LLMOracle":
        return cls(
            name="openai",
            model=settings.model,
            temperature=settings.temperature,
            client=client,
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=settings.timeout,
        )

    @classmethod
    def from_ollama_settings(cls, settings: OllamaSettings, client: Optional[Any] = None) -> "LLMOracle":
        return cls(
            name="ollama",
            model=settings.model,
            temperature=settings.temperature,
            client=client,
            api_key="ollama",
            base_url=f"{settings.base_url.rstrip('/')}/v1",
            timeout=settings.timeout,
            connection_hint="Make sure Ollama is running (ollama serve) and accessible at this URL.",
        )

    def build_messages(self, text: str) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": f"Anonymize the following text:\n\n{text}"},
        ]

    def anonymize_chunk(self, text: str) -> OracleResult:
        """Send one chunk to the chat model and parse its JSON answer."""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=self.build_messages(text),
            )
        except openai.APITimeoutError as e:
            raise create_oracle_error(
                f"Connection timeout to {self.name.upper()}. The LLM server is not responding.",
                provider=self.name,
                original_error=e,
            ) from e
        except openai.APIConnectionError as e:
            error = create_oracle_error(
                f"Cannot connect to {self.name.upper()} at {self.base_url}. {self.connection_hint}",
                provider=self.name,
                original_error=e,
            )
            error.add_context("base_url", self.base_url)
            raise error from e
        except openai.OpenAIError as e:
            raise create_oracle_error(
                f"{self.name} request failed: {e}",
                provider=self.name,
                original_error=e,
            ) from e

        content = response.choices[0].message.content or ""
        result = parse_oracle_response(content, provider=self.name)
        logger.debug(
            f"{self.name} anonymized {len(text)} characters: "
            f"{len(result.replacements)} replacements, {result.detections.total} detections"
        )
        return result
