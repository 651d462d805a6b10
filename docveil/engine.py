"""AnonymizationEngine - high-level API composing chunking, oracles and replacement."""

import contextvars
import logging
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .core.chunking import Chunk, TextSegmenter
from .core.config import ChunkingConfig, EngineConfig
from .core.exceptions import (
    DocVeilError,
    MalformedTreeError,
    ProcessingError,
    ValidationError,
    create_oracle_error,
)
from .core.progress import ProgressReporter, ProgressSink
from .document.projector import RichTextProjector
from .document.tree import tree_shape
from .formats.docx import DocxPackage
from .formats.ooxml import OoxmlDocument
from .formats.parser import parse_document
from .masking.applicator import ApplicationStats, Replacement, ReplacementApplier
from .observability.logging import correlation_context
from .oracles.base import Oracle, OracleResult, PiiDetections
from .oracles.registry import OracleRegistry

logger = logging.getLogger(__name__)

CHUNK_SEPARATOR = "\n\n"


@dataclass
class TextAnonymizationResult:
    """Result of anonymizing flat text."""

    anonymized_text: str
    detections: PiiDetections
    replacements: list[Replacement]
    chunks_processed: int

    def to_dict(self) -> dict:
        return {
            "anonymizedText": self.anonymized_text,
            "piiDetected": self.detections.to_dict(),
            "replacements": [r.to_dict() for r in self.replacements],
            "chunksProcessed": self.chunks_processed,
        }


@dataclass
class DocxAnonymizationResult:
    """Result of anonymizing a ``.docx`` package."""

    data: bytes
    detections: PiiDetections
    replacements: list[Replacement]
    chunks_processed: int
    stats: ApplicationStats = field(default_factory=ApplicationStats)


class AnonymizationEngine:
    """
    Runs one document at a time through the anonymization pipeline.

    The flat text is split into chunks, every chunk goes to the oracle, and
    only once every chunk has an answer are the literal replacements written
    back into the document. Any chunk failure aborts the document and
    nothing is returned or written.

    Examples:
        # Text, with a single oracle
        engine = AnonymizationEngine(oracle=PresidioOracle())
        result = engine.anonymize_text("Call John Smith on 555-123-4567.")

        # Word documents, provider chosen per call, chunks in parallel
        engine = AnonymizationEngine(
            registry=OracleRegistry.from_settings(OracleSettings.from_env()),
            engine_config=EngineConfig(execution_mode="parallel"),
        )
        result = engine.anonymize_docx(data, provider="ollama")
    """

    def __init__(
        self,
        oracle: Optional[Oracle] = None,
        registry: Optional[OracleRegistry] = None,
        chunking_config: Optional[ChunkingConfig] = None,
        engine_config: Optional[EngineConfig] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            oracle: Oracle used when no provider is named
            registry: Provider name to oracle mapping
            chunking_config: Window size and overlap (None for environment)
            engine_config: Sequential or parallel chunk execution
        """
        if oracle is None and registry is None:
            raise ValidationError(
                "AnonymizationEngine needs an oracle or an oracle registry",
                field_name="oracle",
            )
        self._oracle = oracle
        self._registry = registry
        self.segmenter = TextSegmenter(config=chunking_config)
        self.engine_config = engine_config or EngineConfig.from_environment()
        self.projector = RichTextProjector()
        self.applier = ReplacementApplier()

    def resolve_oracle(self, provider: Optional[str] = None) -> Oracle:
        """Pick the oracle for a call."""
        if provider is None and self._oracle is not None:
            return self._oracle
        if self._registry is None:
            raise ValidationError(
                f'Cannot select provider "{provider}" without an oracle registry',
                field_name="provider",
            )
        return self._registry.get(provider)

    def anonymize_text(
        self,
        text: str,
        provider: Optional[str] = None,
        progress: Optional[ProgressSink] = None,
    ) -> TextAnonymizationResult:
        """
        Anonymize flat text chunk by chunk.

        Args:
            text: Text to anonymize
            provider: Oracle provider name (None for the default)
            progress: Optional sink receiving progress events

        Returns:
            TextAnonymizationResult: Anonymized chunks joined by blank lines

        Raises:
            ValidationError: If the text is empty
            OracleError: If any chunk fails
        """
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Text cannot be empty", field_name="text")

        reporter = ProgressReporter(progress)
        with correlation_context():
            try:
                reporter.started()
                oracle = self.resolve_oracle(provider)
                chunks = self.segmenter.chunk(text)
                results = self._process_chunks(oracle, chunks, reporter)
                result = TextAnonymizationResult(
                    anonymized_text=CHUNK_SEPARATOR.join(r.anonymized_text for r in results),
                    detections=_merge_detections(results),
                    replacements=_collect_replacements(results),
                    chunks_processed=len(chunks),
                )
                reporter.completed()
            except Exception as e:
                logger.error(f"Text anonymization failed: {e}")
                reporter.error(str(e))
                raise

        logger.info(
            f"Anonymized {len(text)} characters in {result.chunks_processed} chunks "
            f"({result.detections.total} detections)"
        )
        return result

    def anonymize_document(
        self,
        input_path: Union[str, Path],
        mime_type: Optional[str] = None,
        provider: Optional[str] = None,
        progress: Optional[ProgressSink] = None,
    ) -> TextAnonymizationResult:
        """
        Extract the text of a PDF, Word or text file and anonymize it.

        Unlike :meth:`anonymize_docx`, the result is plain text; no
        formatting is carried over.

        Args:
            input_path: File to read
            mime_type: Explicit MIME type (None to infer it from the suffix)
            provider: Oracle provider name (None for the default)
            progress: Optional sink receiving progress events

        Raises:
            UnsupportedContainerError: If the file type is unsupported or unreadable
            ProcessingError: If no text could be extracted
            OracleError: If any chunk fails
        """
        input_file = Path(input_path)
        text = parse_document(input_file, mime_type=mime_type)
        if not text.strip():
            raise ProcessingError(
                "Could not extract text from document",
                document_path=str(input_file),
                processing_stage="parsing",
            )

        try:
            return self.anonymize_text(text, provider=provider, progress=progress)
        except DocVeilError as e:
            e.add_context("document_path", str(input_file))
            raise

    def anonymize_docx(
        self,
        data: bytes,
        provider: Optional[str] = None,
        progress: Optional[ProgressSink] = None,
    ) -> DocxAnonymizationResult:
        """
        Anonymize a ``.docx`` package while keeping all of its formatting.

        Args:
            data: Raw package bytes
            provider: Oracle provider name (None for the default)
            progress: Optional sink receiving progress events

        Returns:
            DocxAnonymizationResult: New package bytes in which only the main
            document entry differs

        Raises:
            UnsupportedContainerError: If the package is unreadable
            MalformedTreeError: If the document markup is unusable
            ProcessingError: If the document has no text
            OracleError: If any chunk fails
        """
        reporter = ProgressReporter(progress)
        with correlation_context():
            try:
                reporter.started("Parsing document...")
                package = DocxPackage.from_bytes(data)
                document = OoxmlDocument.parse(package.read_main_entry())
                projection = self.projector.project(document.tree)

                if not projection.text.strip():
                    raise ProcessingError(
                        "Could not extract text from document",
                        processing_stage="projection",
                    )

                oracle = self.resolve_oracle(provider)
                chunks = self.segmenter.chunk(projection.text)
                results = self._process_chunks(oracle, chunks, reporter)
                replacements = _collect_replacements(results)

                shape_before = tree_shape(document.tree)
                stats = self.applier.apply(document.tree, replacements)
                if tree_shape(document.tree) != shape_before:
                    raise MalformedTreeError(
                        "Document structure changed while applying replacements",
                        processing_stage="replacement",
                    )

                package.write_main_entry(document.to_bytes())
                result = DocxAnonymizationResult(
                    data=package.to_bytes(),
                    detections=_merge_detections(results),
                    replacements=replacements,
                    chunks_processed=len(chunks),
                    stats=stats,
                )
                reporter.completed()
            except Exception as e:
                logger.error(f"Document anonymization failed: {e}")
                reporter.error(str(e))
                raise

        logger.info(
            f"Anonymized document: {len(replacements)} replacements, "
            f"{stats.runs_modified} runs modified"
        )
        return result

    def anonymize_docx_file(
        self,
        input_path: Union[str, Path],
        output_path: Optional[Union[str, Path]] = None,
        provider: Optional[str] = None,
        progress: Optional[ProgressSink] = None,
    ) -> Path:
        """
        Anonymize a ``.docx`` file on disk.

        Returns:
            Path: Where the anonymized copy was written (default
            ``<stem>_anonymized.docx`` beside the input)
        """
        input_file = Path(input_path)
        output_file = (
            Path(output_path)
            if output_path
            else input_file.parent / f"{input_file.stem}_anonymized{input_file.suffix}"
        )

        try:
            result = self.anonymize_docx(input_file.read_bytes(), provider, progress)
        except DocVeilError as e:
            e.add_context("document_path", str(input_file))
            raise

        output_file.write_bytes(result.data)
        logger.info(f"Wrote anonymized document to {output_file}")
        return output_file

    def _process_chunks(
        self, oracle: Oracle, chunks: list[Chunk], reporter: ProgressReporter
    ) -> list[OracleResult]:
        reporter.total_chunks = len(chunks)
        if self.engine_config.parallel and len(chunks) > 1:
            return self._process_parallel(oracle, chunks, reporter)
        return self._process_sequential(oracle, chunks, reporter)

    def _process_sequential(
        self, oracle: Oracle, chunks: list[Chunk], reporter: ProgressReporter
    ) -> list[OracleResult]:
        results: list[OracleResult] = []
        for chunk in chunks:
            reporter.chunk_processing(chunk.index)
            results.append(_call_oracle(oracle, chunk))
            reporter.chunk_completed(chunk.index, len(results))
        return results

    def _process_parallel(
        self, oracle: Oracle, chunks: list[Chunk], reporter: ProgressReporter
    ) -> list[OracleResult]:
        results: list[Optional[OracleResult]] = [None] * len(chunks)
        completed = 0

        with ThreadPoolExecutor(max_workers=self.engine_config.max_workers) as executor:
            futures: dict[Future, Chunk] = {}
            for chunk in chunks:
                reporter.chunk_processing(chunk.index)
                context = contextvars.copy_context()
                futures[executor.submit(context.run, _call_oracle, oracle, chunk)] = chunk

            pending = set(futures)
            while pending:
                done, pending = wait(pending, return_when=FIRST_EXCEPTION)
                for future in done:
                    chunk = futures[future]
                    error = future.exception()
                    if error is not None:
                        for other in pending:
                            other.cancel()
                        raise error
                    results[chunk.index] = future.result()
                    completed += 1
                    reporter.chunk_completed(chunk.index, completed)

        return [result for result in results if result is not None]


def _call_oracle(oracle: Oracle, chunk: Chunk) -> OracleResult:
    logger.debug(f"Sending chunk {chunk.index} ({chunk.length} characters) to {oracle.name}")
    try:
        return oracle.anonymize_chunk(chunk.text)
    except DocVeilError as e:
        e.add_context("chunk_index", chunk.index)
        raise
    except Exception as e:
        raise create_oracle_error(
            f"Oracle {oracle.name} failed on chunk {chunk.index}: {e}",
            provider=oracle.name,
            chunk_index=chunk.index,
            original_error=e,
        ) from e


def _merge_detections(results: list[OracleResult]) -> PiiDetections:
    merged = PiiDetections()
    for result in results:
        merged.merge(result.detections)
    return merged


def _collect_replacements(results: list[OracleResult]) -> list[Replacement]:
    """Gather replacements across chunks in discovery order, without duplicates."""
    seen: set[Replacement] = set()
    collected: list[Replacement] = []
    for result in results:
        for replacement in result.replacements:
            if replacement not in seen:
                seen.add(replacement)
                collected.append(replacement)
    return collected
