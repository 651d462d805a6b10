"""Runtime configuration from environment variables.

Chunking and execution settings for the anonymization engine. Values are
read from the environment with tolerant parsing: invalid values log a
warning and fall back to the defaults instead of failing at startup.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1500
DEFAULT_CHUNK_OVERLAP = 200

EXECUTION_MODES = ("sequential", "parallel")


def _get_env_string(key: str, default: str) -> str:
    """Get string value from environment with default fallback."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip()


def _get_env_int(
    key: str, default: Optional[int], allow_zero: bool = False
) -> Optional[int]:
    """Get integer value from environment with default fallback."""
    value = os.getenv(key)
    if value is None or not value.strip():
        return default

    try:
        parsed = int(value.strip())
    except ValueError:
        logger.warning(
            f"Environment variable {key}={value} is not a valid integer, "
            f"using default {default}"
        )
        return default

    if parsed < 0 or (parsed == 0 and not allow_zero):
        logger.warning(
            f"Environment variable {key}={value} is out of range, using default {default}"
        )
        return default
    return parsed


@dataclass
class ChunkingConfig:
    """Text segmentation settings.

    Attributes:
        chunk_size: Window length in characters (positive)
        chunk_overlap: Characters shared between consecutive windows (>= 0);
            values at or above chunk_size are allowed, the segmenter's
            half-window advance floor keeps it terminating
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not isinstance(self.chunk_size, int) or self.chunk_size <= 0:
            logger.warning(
                f"chunk_size must be positive integer, got {self.chunk_size}, "
                f"using {DEFAULT_CHUNK_SIZE}"
            )
            self.chunk_size = DEFAULT_CHUNK_SIZE

        if not isinstance(self.chunk_overlap, int) or self.chunk_overlap < 0:
            logger.warning(
                f"chunk_overlap must be non-negative integer, got {self.chunk_overlap}, "
                f"using {DEFAULT_CHUNK_OVERLAP}"
            )
            self.chunk_overlap = DEFAULT_CHUNK_OVERLAP

    @classmethod
    def from_environment(cls) -> "ChunkingConfig":
        """Load chunking settings.

        Environment Variables:
            DOCVEIL_CHUNK_SIZE: Window length (positive integer)
            DOCVEIL_CHUNK_OVERLAP: Overlap between windows (non-negative integer)
        """
        config = cls(
            chunk_size=_get_env_int("DOCVEIL_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
            chunk_overlap=_get_env_int(
                "DOCVEIL_CHUNK_OVERLAP", DEFAULT_CHUNK_OVERLAP, allow_zero=True
            ),
        )
        logger.debug(f"Loaded chunking configuration from environment: {config}")
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for serialization."""
        return {"chunk_size": self.chunk_size, "chunk_overlap": self.chunk_overlap}


@dataclass
class EngineConfig:
    """Execution settings for the per-document oracle calls.

    Attributes:
        execution_mode: "sequential" (one chunk at a time, ordered progress)
            or "parallel" (all chunks submitted to a thread pool)
        max_workers: Thread pool size in parallel mode (None for auto)
    """

    execution_mode: str = "sequential"
    max_workers: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self.execution_mode = self.execution_mode.lower()
        if self.execution_mode not in EXECUTION_MODES:
            logger.warning(
                f"Invalid execution_mode '{self.execution_mode}', using 'sequential'. "
                f"Valid: {EXECUTION_MODES}"
            )
            self.execution_mode = "sequential"

        if self.max_workers is not None:
            if not isinstance(self.max_workers, int) or self.max_workers <= 0:
                logger.warning(
                    f"max_workers must be positive integer or None, got "
                    f"{self.max_workers}, using None"
                )
                self.max_workers = None

    @property
    def parallel(self) -> bool:
        return self.execution_mode == "parallel"

    @classmethod
    def from_environment(cls) -> "EngineConfig":
        """Load execution settings.

        Environment Variables:
            DOCVEIL_EXECUTION_MODE: sequential|parallel
            DOCVEIL_MAX_WORKERS: Thread pool size (positive integer)
        """
        config = cls(
            execution_mode=_get_env_string("DOCVEIL_EXECUTION_MODE", "sequential"),
            max_workers=_get_env_int("DOCVEIL_MAX_WORKERS", None),
        )
        logger.debug(f"Loaded engine configuration from environment: {config}")
        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for serialization."""
        return {
            "execution_mode": self.execution_mode,
            "max_workers": self.max_workers,
        }


# Loaded lazily to support testing
_chunking_config: Optional[ChunkingConfig] = None


def get_chunking_config() -> ChunkingConfig:
    """Get the global chunking configuration, creating it if needed."""
    global _chunking_config
    if _chunking_config is None:
        _chunking_config = ChunkingConfig.from_environment()
    return _chunking_config


def reset_chunking_config() -> None:
    """Reset the global configuration for testing purposes."""
    global _chunking_config
    _chunking_config = None
