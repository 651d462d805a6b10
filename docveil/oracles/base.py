"""Oracle interface: the external judge of what counts as PII."""

import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import OracleError
from ..masking.applicator import Replacement

logger = logging.getLogger(__name__)

DETECTION_CATEGORIES = (
    "names",
    "addresses",
    "emails",
    "phone_numbers",
    "dates",
    "organizations",
    "other",
)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


@dataclass
class PiiDetections:
    """Category-tagged PII found in a piece of text."""

    names: list[str] = field(default_factory=list)
    addresses: list[str] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)
    phone_numbers: list[str] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)
    organizations: list[str] = field(default_factory=list)
    other: list[str] = field(default_factory=list)

    def merge(self, other: "PiiDetections") -> None:
        """Append another set of detections, category by category."""
        for category in DETECTION_CATEGORIES:
            getattr(self, category).extend(getattr(other, category))

    @property
    def total(self) -> int:
        return sum(len(getattr(self, category)) for category in DETECTION_CATEGORIES)

    def to_dict(self) -> dict[str, list[str]]:
        """Convert to the camelCase shape used on the wire."""
        return {
            "names": list(self.names),
            "addresses": list(self.addresses),
            "emails": list(self.emails),
            "phoneNumbers": list(self.phone_numbers),
            "dates": list(self.dates),
            "organizations": list(self.organizations),
            "other": list(self.other),
        }


@dataclass
class OracleResult:
    """
    What an oracle returns for one chunk.

    Attributes:
        anonymized_text: The chunk with PII replaced by placeholders
        replacements: Literal ``original -> anonymized`` pairs in discovery order
        detections: PII grouped by category
    """

    anonymized_text: str
    replacements: list[Replacement] = field(default_factory=list)
    detections: PiiDetections = field(default_factory=PiiDetections)


class _DetectionsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    names: list[str] = Field(default_factory=list)
    addresses: list[str] = Field(default_factory=list)
    emails: list[str] = Field(default_factory=list)
    phone_numbers: list[str] = Field(default_factory=list, alias="phoneNumbers")
    dates: list[str] = Field(default_factory=list)
    organizations: list[str] = Field(default_factory=list)
    other: list[str] = Field(default_factory=list)


class _ReplacementModel(BaseModel):
    original: str
    anonymized: str


class OracleResponse(BaseModel):
    """Schema of the JSON object an LLM oracle must answer with."""

    model_config = ConfigDict(populate_by_name=True)

    anonymized_text: str = Field(alias="anonymizedText")
    pii_detected: _DetectionsModel = Field(
        default_factory=_DetectionsModel, alias="piiDetected"
    )
    replacements: list[_ReplacementModel] = Field(default_factory=list)

    def to_result(self) -> OracleResult:
        detections = PiiDetections(**self.pii_detected.model_dump())
        return OracleResult(
            anonymized_text=self.anonymized_text,
            replacements=[
                Replacement(original=r.original, anonymized=r.anonymized)
                for r in self.replacements
            ],
            detections=detections,
        )


def parse_oracle_response(content: str, provider: str = "unknown") -> OracleResult:
    """
    Parse an oracle's raw answer into an :class:`OracleResult`.

    The answer may wrap the JSON object in prose or markdown fences; the
    span from the first ``{`` to the last ``}`` is parsed.

    Raises:
        OracleError: If no JSON object is found or it does not match the schema
    """
    match = _JSON_OBJECT.search(content)
    if not match:
        logger.error(f"No JSON found in {provider} response: {content[:200]!r}")
        raise OracleError(
            "Failed to parse anonymization response: no JSON found in response",
            provider=provider,
        )

    try:
        payload: Any = json.loads(match.group(0))
        return OracleResponse.model_validate(payload).to_result()
    except (json.JSONDecodeError, PydanticValidationError) as e:
        logger.error(f"Failed to parse {provider} response: {e}")
        raise OracleError(
            f"Failed to parse anonymization response: {e}",
            provider=provider,
        ) from e


class Oracle(ABC):
    """
    Decides which substrings of a chunk are sensitive and what replaces them.

    Implementations must be safe to call from several threads at once when
    the engine runs in parallel mode.
    """

    name: str = "oracle"

    @abstractmethod
    def anonymize_chunk(self, text: str) -> OracleResult:
        """
        Anonymize one chunk.

        Raises:
            OracleError: If the call fails or the answer cannot be used
        """
