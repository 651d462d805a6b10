"""Presidio-backed oracle for offline PII detection."""

import logging
import threading
from typing import Any, Optional

from presidio_analyzer import AnalyzerEngine
from presidio_anonymizer import AnonymizerEngine
from presidio_anonymizer.entities import OperatorConfig, RecognizerResult

from ..core.exceptions import create_oracle_error
from ..masking.applicator import Replacement
from .base import Oracle, OracleResult, PiiDetections
from .config import PresidioSettings

logger = logging.getLogger(__name__)

# entity type -> (placeholder, detection category)
ENTITY_PLACEHOLDERS: dict[str, tuple[str, str]] = {
    "PERSON": ("[NAME]", "names"),
    "EMAIL_ADDRESS": ("[EMAIL]", "emails"),
    "PHONE_NUMBER": ("[PHONE]", "phone_numbers"),
    "LOCATION": ("[ADDRESS]", "addresses"),
    "DATE_TIME": ("[DATE]", "dates"),
    "ORGANIZATION": ("[ORGANIZATION]", "organizations"),
}


def placeholder_for(entity_type: str) -> tuple[str, str]:
    """Get the placeholder and detection category for an entity type."""
    return ENTITY_PLACEHOLDERS.get(entity_type, (f"[{entity_type}]", "other"))


def drop_overlaps(results: list[Any]) -> list[Any]:
    """
    Keep non-overlapping analyzer results.

    Earlier starts win; at the same start the longer span wins, then the
    higher score.
    """
    ordered = sorted(results, key=lambda r: (r.start, -(r.end - r.start), -r.score))
    kept: list[Any] = []
    for result in ordered:
        if kept and result.start < kept[-1].end:
            continue
        kept.append(result)
    return kept


class PresidioOracle(Oracle):
    """
    Anonymizes chunks with Presidio's analyzer and anonymizer.

    Engines are created lazily on first use; the analyzer loads an NLP model
    and is expensive to build.

    Examples:
        >>> oracle = PresidioOracle(PresidioSettings(score_threshold=0.6))
        >>> oracle.anonymize_chunk("Email john@example.com today").anonymized_text
        'Email [EMAIL] today'
    """

    name = "presidio"

    def __init__(
        self,
        settings: Optional[PresidioSettings] = None,
        analyzer: Optional[AnalyzerEngine] = None,
        anonymizer: Optional[AnonymizerEngine] = None,
    ) -> None:
        self.settings = settings or PresidioSettings()
        self._analyzer_instance = analyzer
        self._anonymizer_instance = anonymizer
        self._lock = threading.Lock()

    @property
    def analyzer(self) -> AnalyzerEngine:
        """Get the analyzer, creating it if needed."""
        if self._analyzer_instance is None:
            with self._lock:
                if self._analyzer_instance is None:
                    logger.info("Creating Presidio AnalyzerEngine")
                    self._analyzer_instance = AnalyzerEngine()
        return self._analyzer_instance

    @property
    def anonymizer(self) -> AnonymizerEngine:
        """Get the anonymizer, creating it if needed."""
        if self._anonymizer_instance is None:
            with self._lock:
                if self._anonymizer_instance is None:
                    self._anonymizer_instance = AnonymizerEngine()
        return self._anonymizer_instance

    def anonymize_chunk(self, text: str) -> OracleResult:
        """Detect entities in one chunk and replace them with placeholders."""
        try:
            analyzed = self.analyzer.analyze(
                text=text,
                language=self.settings.language,
                entities=self.settings.entities,
                score_threshold=self.settings.score_threshold,
            )
        except Exception as e:
            raise create_oracle_error(
                f"Presidio analysis failed: {e}",
                provider=self.name,
                original_error=e,
            ) from e

        kept = drop_overlaps(list(analyzed))
        if not kept:
            return OracleResult(anonymized_text=text)

        detections = PiiDetections()
        replacements: list[Replacement] = []
        seen: set[str] = set()
        operators: dict[str, OperatorConfig] = {}

        for result in kept:
            original = text[result.start : result.end]
            placeholder, category = placeholder_for(result.entity_type)
            operators[result.entity_type] = OperatorConfig("replace", {"new_value": placeholder})
            getattr(detections, category).append(original)
            if original and original not in seen:
                seen.add(original)
                replacements.append(Replacement(original=original, anonymized=placeholder))

        anonymized = self.anonymizer.anonymize(
            text=text,
            analyzer_results=[
                RecognizerResult(
                    entity_type=r.entity_type, start=r.start, end=r.end, score=r.score
                )
                for r in kept
            ],
            operators=operators,
        )

        logger.debug(
            f"Presidio found {len(kept)} entities in {len(text)} characters"
        )
        return OracleResult(
            anonymized_text=anonymized.text,
            replacements=replacements,
            detections=detections,
        )
