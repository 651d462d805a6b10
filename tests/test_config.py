"""Tests for environment-driven configuration."""

import pytest

from docveil.core.config import (
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    ChunkingConfig,
    EngineConfig,
    get_chunking_config,
    reset_chunking_config,
)


class TestChunkingConfig:
    """Test chunking settings."""

    def test_defaults(self):
        config = ChunkingConfig()
        assert config.chunk_size == DEFAULT_CHUNK_SIZE == 1500
        assert config.chunk_overlap == DEFAULT_CHUNK_OVERLAP == 200

    @pytest.mark.parametrize("size", [0, -5, "100"])
    def test_invalid_size_falls_back(self, size):
        assert ChunkingConfig(chunk_size=size).chunk_size == DEFAULT_CHUNK_SIZE

    def test_invalid_overlap_falls_back(self):
        assert ChunkingConfig(chunk_overlap=-1).chunk_overlap == DEFAULT_CHUNK_OVERLAP

    def test_overlap_may_exceed_size(self):
        config = ChunkingConfig(chunk_size=10, chunk_overlap=50)
        assert config.chunk_overlap == 50

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("DOCVEIL_CHUNK_SIZE", " 800 ")
        monkeypatch.setenv("DOCVEIL_CHUNK_OVERLAP", "0")
        config = ChunkingConfig.from_environment()
        assert config.to_dict() == {"chunk_size": 800, "chunk_overlap": 0}

    @pytest.mark.parametrize("value", ["abc", "0", "-3", ""])
    def test_invalid_environment_values(self, monkeypatch, value):
        monkeypatch.setenv("DOCVEIL_CHUNK_SIZE", value)
        assert ChunkingConfig.from_environment().chunk_size == DEFAULT_CHUNK_SIZE

    def test_global_config_is_cached(self, monkeypatch):
        monkeypatch.setenv("DOCVEIL_CHUNK_SIZE", "300")
        first = get_chunking_config()
        monkeypatch.setenv("DOCVEIL_CHUNK_SIZE", "400")
        assert get_chunking_config() is first
        assert first.chunk_size == 300

        reset_chunking_config()
        assert get_chunking_config().chunk_size == 400


class TestEngineConfig:
    """Test execution settings."""

    def test_defaults(self):
        config = EngineConfig()
        assert config.execution_mode == "sequential"
        assert not config.parallel
        assert config.max_workers is None

    def test_mode_is_case_insensitive(self):
        assert EngineConfig(execution_mode="PARALLEL").parallel

    def test_invalid_mode_falls_back(self):
        assert EngineConfig(execution_mode="turbo").execution_mode == "sequential"

    def test_invalid_workers_fall_back(self):
        assert EngineConfig(max_workers=0).max_workers is None

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("DOCVEIL_EXECUTION_MODE", "parallel")
        monkeypatch.setenv("DOCVEIL_MAX_WORKERS", "4")
        assert EngineConfig.from_environment().to_dict() == {
            "execution_mode": "parallel",
            "max_workers": 4,
        }
