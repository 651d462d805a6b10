"""DocVeil exception hierarchy.

This module provides a structured exception hierarchy that enables precise
error categorization throughout the anonymization pipeline. Every error a
document pipeline can raise is fatal for that document: nothing here is
retried, and no partially anonymized output is produced.
"""

from typing import Any, Dict, List, Optional, Union


class DocVeilError(Exception):
    """Base exception for all DocVeil-related errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error identifier
        context: Additional error context and metadata
        recovery_suggestions: List of suggested recovery actions
        component: Component where the error originated
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        recovery_suggestions: Optional[List[str]] = None,
        component: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._default_error_code()
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        self.component = component or self._infer_component()

    def _default_error_code(self) -> str:
        """Generate default error code based on exception class name."""
        return self.__class__.__name__.upper().replace("ERROR", "_ERROR")

    def _infer_component(self) -> str:
        """Infer component name from exception class."""
        name = self.__class__.__name__.lower()
        if "validation" in name or "configuration" in name:
            return "validation"
        elif "oracle" in name:
            return "oracle"
        elif "tree" in name:
            return "document"
        elif "container" in name:
            return "archive"
        else:
            return "core"

    def add_context(self, key: str, value: Any) -> None:
        """Add additional context to the error."""
        self.context[key] = value

    def add_recovery_suggestion(self, suggestion: str) -> None:
        """Add a recovery suggestion to help users resolve the error."""
        if suggestion not in self.recovery_suggestions:
            self.recovery_suggestions.append(suggestion)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to structured dictionary for logging/reporting."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "component": self.component,
            "context": self.context,
            "recovery_suggestions": self.recovery_suggestions,
        }


class ValidationError(DocVeilError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        expected_type: Optional[str] = None,
        actual_value: Optional[Any] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        if field_name:
            self.add_context("field_name", field_name)
        if expected_type:
            self.add_context("expected_type", expected_type)
        if actual_value is not None:
            self.add_context("actual_value", str(actual_value))


class ConfigurationError(ValidationError):
    """Raised when configuration is invalid or incomplete.

    Also raised when a caller asks for an oracle provider that has not been
    configured.
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        config_section: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        if config_file:
            self.add_context("config_file", config_file)
        if config_section:
            self.add_context("config_section", config_section)


class ProcessingError(DocVeilError):
    """Raised when document processing fails."""

    def __init__(
        self,
        message: str,
        document_path: Optional[str] = None,
        processing_stage: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        if document_path:
            self.add_context("document_path", document_path)
        if processing_stage:
            self.add_context("processing_stage", processing_stage)


class MalformedTreeError(ProcessingError):
    """Raised when a rich-text tree contains a node of an unexpected shape.

    Projection and replacement abort immediately; no partial output exists.
    """

    def __init__(self, message: str, node_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if node_type:
            self.add_context("node_type", node_type)


class UnsupportedContainerError(ProcessingError):
    """Raised when a document package is unreadable or lacks its main entry."""

    def __init__(self, message: str, entry_name: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if entry_name:
            self.add_context("entry_name", entry_name)


class OracleError(DocVeilError):
    """Raised when an oracle call fails or returns unparsable content.

    Aborts the whole document; chunk results gathered so far are discarded.
    """

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        chunk_index: Optional[int] = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        if provider:
            self.add_context("provider", provider)
        if chunk_index is not None:
            self.add_context("chunk_index", chunk_index)


def create_validation_error(
    message: str,
    field_name: str,
    expected: Union[str, type],
    actual: Any,
) -> ValidationError:
    """Create a validation error with standard context."""
    expected_str = expected.__name__ if isinstance(expected, type) else str(expected)

    error = ValidationError(
        message=message,
        field_name=field_name,
        expected_type=expected_str,
        actual_value=actual,
    )

    error.add_recovery_suggestion(f"Ensure {field_name} is of type {expected_str}")
    return error


def create_oracle_error(
    message: str,
    provider: str,
    chunk_index: Optional[int] = None,
    original_error: Optional[Exception] = None,
) -> OracleError:
    """Create an oracle error with standard context."""
    error = OracleError(message=message, provider=provider, chunk_index=chunk_index)

    if original_error:
        error.add_context("original_error", str(original_error))
        error.add_context("original_error_type", type(original_error).__name__)

    error.add_recovery_suggestion(f"Check that the {provider} provider is reachable")
    error.add_recovery_suggestion("Retry the whole document once the provider recovers")

    return error
