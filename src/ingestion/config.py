"""
Configuration for the ingestion pipeline.

Chunk size thresholds are read from the environment (a ``.env`` file is
honoured) and validated before any splitter is built.
"""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from src.splitter.errors import ConfigurationError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Chunking defaults (characters)
DEFAULT_MIN_CHUNK_SIZE = 500
DEFAULT_PREFERRED_CHUNK_SIZE = 1500
DEFAULT_MAX_CHUNK_SIZE = 5000


def _env_int(name: str, default: int) -> int:
    """Read an integer setting from the environment."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigurationError(
            f"Environment variable {name} must be an integer, got: {raw!r}"
        ) from None


SPLITTER_MIN_CHUNK_SIZE = _env_int(
    "SPLITTER_MIN_CHUNK_SIZE", DEFAULT_MIN_CHUNK_SIZE
)
SPLITTER_PREFERRED_CHUNK_SIZE = _env_int(
    "SPLITTER_PREFERRED_CHUNK_SIZE", DEFAULT_PREFERRED_CHUNK_SIZE
)
SPLITTER_MAX_CHUNK_SIZE = _env_int(
    "SPLITTER_MAX_CHUNK_SIZE", DEFAULT_MAX_CHUNK_SIZE
)


class ChunkSizeSettings(BaseModel):
    """Validated chunk size thresholds."""
    min_chunk_size: int
    preferred_chunk_size: int
    max_chunk_size: int


def validate_chunk_sizes(
    min_chunk_size: int,
    preferred_chunk_size: int,
    max_chunk_size: int
) -> ChunkSizeSettings:
    """
    Check that the three thresholds are positive and ordered.

    Args:
        min_chunk_size: Smallest chunk the merger tries to produce
        preferred_chunk_size: Target size for splitting oversized blocks
        max_chunk_size: Hard ceiling for every chunk

    Returns:
        ChunkSizeSettings holding the validated values

    Raises:
        ConfigurationError: If any value is non-positive or
            min <= preferred <= max does not hold
    """
    values = {
        "min_chunk_size": min_chunk_size,
        "preferred_chunk_size": preferred_chunk_size,
        "max_chunk_size": max_chunk_size,
    }
    for name, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(
                f"{name} must be an integer, got: {value!r}"
            )
        if value <= 0:
            raise ConfigurationError(
                f"{name} must be positive, got: {value}"
            )

    if min_chunk_size > max_chunk_size:
        raise ConfigurationError(
            f"min_chunk_size ({min_chunk_size}) must not exceed "
            f"max_chunk_size ({max_chunk_size})"
        )
    if not min_chunk_size <= preferred_chunk_size <= max_chunk_size:
        raise ConfigurationError(
            f"preferred_chunk_size ({preferred_chunk_size}) must lie between "
            f"min_chunk_size ({min_chunk_size}) and "
            f"max_chunk_size ({max_chunk_size})"
        )

    return ChunkSizeSettings(**values)


def load_chunk_settings(
    min_chunk_size: Optional[int] = None,
    preferred_chunk_size: Optional[int] = None,
    max_chunk_size: Optional[int] = None
) -> ChunkSizeSettings:
    """
    Resolve chunk thresholds, falling back to environment defaults.

    Explicit arguments win over the ``SPLITTER_*`` environment values.
    """
    settings = validate_chunk_sizes(
        SPLITTER_MIN_CHUNK_SIZE if min_chunk_size is None else min_chunk_size,
        (
            SPLITTER_PREFERRED_CHUNK_SIZE
            if preferred_chunk_size is None
            else preferred_chunk_size
        ),
        SPLITTER_MAX_CHUNK_SIZE if max_chunk_size is None else max_chunk_size,
    )
    logger.debug(f"Chunk settings resolved: {settings.model_dump()}")
    return settings
