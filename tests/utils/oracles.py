"""Deterministic oracles for engine and CLI tests."""

import threading
from typing import Optional

from docveil.masking.applicator import Replacement, replace_all, sort_replacements
from docveil.oracles.base import Oracle, OracleResult, PiiDetections


class FakeOracle(Oracle):
    """Oracle that anonymizes a fixed set of known strings."""

    name = "fake"

    def __init__(self, mapping: Optional[dict[str, str]] = None) -> None:
        self.mapping = mapping or {}
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def anonymize_chunk(self, text: str) -> OracleResult:
        with self._lock:
            self.calls.append(text)
        found = [
            Replacement(original, anonymized)
            for original, anonymized in self.mapping.items()
            if original in text
        ]
        return OracleResult(
            anonymized_text=replace_all(text, sort_replacements(found)),
            replacements=found,
            detections=PiiDetections(names=[r.original for r in found]),
        )


class FailingOracle(Oracle):
    """Oracle that fails on chunks containing a marker."""

    name = "failing"

    def __init__(self, marker: str = "FAIL", error: Optional[Exception] = None) -> None:
        self.marker = marker
        self.error = error or ConnectionError("connection refused")

    def anonymize_chunk(self, text: str) -> OracleResult:
        if self.marker in text:
            raise self.error
        return OracleResult(anonymized_text=text)
