"""Shared fixtures for DocVeil tests."""

import pytest

from docveil.core.config import ChunkingConfig, EngineConfig, reset_chunking_config
from tests.utils.docx_helpers import SECTION_PROPERTIES, build_docx, paragraph
from tests.utils.oracles import FakeOracle


@pytest.fixture(autouse=True)
def isolate_config(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep environment-driven configuration out of the tests."""
    for key in (
        "DOCVEIL_CHUNK_SIZE",
        "DOCVEIL_CHUNK_OVERLAP",
        "DOCVEIL_EXECUTION_MODE",
        "DOCVEIL_MAX_WORKERS",
        "DEFAULT_LLM_PROVIDER",
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "ANTHROPIC_API_KEY",
        "ANTHROPIC_MODEL",
        "ANTHROPIC_TEMPERATURE",
        "OLLAMA_BASE_URL",
        "PRESIDIO_LANGUAGE",
        "PRESIDIO_ENABLED",
    ):
        monkeypatch.delenv(key, raising=False)
    reset_chunking_config()


@pytest.fixture
def name_oracle() -> FakeOracle:
    """Oracle that knows a few names and an email address."""
    return FakeOracle(
        {
            "John Smith": "[NAME]",
            "Jane Doe": "[NAME]",
            "john@example.com": "[EMAIL]",
        }
    )


@pytest.fixture
def small_chunks() -> ChunkingConfig:
    return ChunkingConfig(chunk_size=40, chunk_overlap=5)


@pytest.fixture
def sequential() -> EngineConfig:
    return EngineConfig(execution_mode="sequential")


@pytest.fixture
def sample_docx() -> bytes:
    """A document with formatted runs, styles and an image."""
    return build_docx(
        paragraph("Contact ", "John Smith", " at work.")
        + paragraph("Email john@example.com for ", "details.", bold=True)
        + SECTION_PROPERTIES
    )
