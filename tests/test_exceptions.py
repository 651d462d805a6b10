"""Tests for the DocVeil exception hierarchy."""

from docveil.core.exceptions import (
    ConfigurationError,
    DocVeilError,
    MalformedTreeError,
    OracleError,
    ProcessingError,
    UnsupportedContainerError,
    ValidationError,
    create_oracle_error,
    create_validation_error,
)


class TestDocVeilError:
    """Test the base exception class."""

    def test_basic_initialization(self):
        error = DocVeilError("Test error message")
        assert str(error) == "Test error message"
        assert error.error_code == "DOCVEIL_ERROR"
        assert error.context == {}
        assert error.recovery_suggestions == []
        assert error.component == "core"

    def test_full_initialization(self):
        error = DocVeilError(
            "Test error",
            error_code="TEST_001",
            context={"key": "value"},
            recovery_suggestions=["Try again"],
            component="testing",
        )
        assert error.error_code == "TEST_001"
        assert error.context == {"key": "value"}
        assert error.recovery_suggestions == ["Try again"]
        assert error.component == "testing"

    def test_recovery_suggestions_are_unique(self):
        error = DocVeilError("test")
        error.add_recovery_suggestion("Retry")
        error.add_recovery_suggestion("Retry")
        assert error.recovery_suggestions == ["Retry"]

    def test_to_dict(self):
        error = OracleError("Oracle down", provider="ollama", chunk_index=3)
        assert error.to_dict() == {
            "error_type": "OracleError",
            "message": "Oracle down",
            "error_code": "ORACLE_ERROR",
            "component": "oracle",
            "context": {"provider": "ollama", "chunk_index": 3},
            "recovery_suggestions": [],
        }


class TestHierarchy:
    """Test the specialized exceptions."""

    def test_component_inference(self):
        assert ValidationError("x").component == "validation"
        assert ConfigurationError("x").component == "validation"
        assert MalformedTreeError("x").component == "document"
        assert UnsupportedContainerError("x").component == "archive"
        assert ProcessingError("x").component == "core"

    def test_inheritance(self):
        assert issubclass(ConfigurationError, ValidationError)
        assert issubclass(MalformedTreeError, ProcessingError)
        assert issubclass(UnsupportedContainerError, ProcessingError)
        assert issubclass(OracleError, DocVeilError)

    def test_malformed_tree_context(self):
        error = MalformedTreeError(
            "bad node", node_type="dict", processing_stage="projection"
        )
        assert error.context == {"processing_stage": "projection", "node_type": "dict"}
        assert error.error_code == "MALFORMEDTREE_ERROR"

    def test_chunk_index_zero_is_recorded(self):
        assert OracleError("x", chunk_index=0).context["chunk_index"] == 0

    def test_configuration_context(self):
        error = ConfigurationError("x", config_file="a.yaml", config_section="oracles")
        assert error.context == {"config_file": "a.yaml", "config_section": "oracles"}


class TestFactories:
    def test_create_validation_error(self):
        error = create_validation_error("bad size", "chunk_size", int, "abc")
        assert error.context == {
            "field_name": "chunk_size",
            "expected_type": "int",
            "actual_value": "abc",
        }
        assert error.recovery_suggestions == ["Ensure chunk_size is of type int"]

    def test_create_oracle_error(self):
        cause = TimeoutError("took too long")
        error = create_oracle_error("failed", "openai", chunk_index=2, original_error=cause)
        assert error.context["original_error"] == "took too long"
        assert error.context["original_error_type"] == "TimeoutError"
        assert error.context["chunk_index"] == 2
        assert len(error.recovery_suggestions) == 2
