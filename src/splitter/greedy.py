"""
Greedy size optimization of semantic chunks.

Consecutive chunks from the semantic splitter are concatenated in a single
left-to-right pass. A chunk is appended to the running accumulator only if
both belong to compatible sections and the result stays within
``max_chunk_size``. Otherwise the accumulator is emitted as is, even when it
is smaller than ``min_chunk_size``: section boundaries are never crossed to
reach the minimum.

Growing past ``preferred_chunk_size`` does not stop a merge; only
``max_chunk_size`` does.
"""

import logging
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence

from .errors import ConfigurationError
from .models import Chunk, ChunkType, SectionInfo
from .semantic import SemanticMarkdownSplitter

logger = logging.getLogger(__name__)


class MergePolicy(str, Enum):
    """Which section paths may be merged into one chunk."""
    EXACT = "exact"
    DESCENDANT = "descendant"


def paths_compatible(
    current: Sequence[str],
    candidate: Sequence[str],
    policy: MergePolicy = MergePolicy.EXACT
) -> bool:
    """
    Decide whether a chunk may be appended to the accumulator.

    EXACT (the default) only merges chunks of the same section.
    DESCENDANT also lets a section absorb chunks of its subsections, i.e.
    when the candidate path extends the accumulator path.

    Args:
        current: Section path of the accumulator
        candidate: Section path of the next chunk
        policy: Merge policy to apply

    Returns:
        True if the two chunks may be merged
    """
    current = list(current)
    candidate = list(candidate)
    if policy == MergePolicy.EXACT:
        return current == candidate
    return candidate[:len(current)] == current


def common_prefix(first: Sequence[str], second: Sequence[str]) -> List[str]:
    """Longest shared leading part of two paths."""
    prefix = []
    for a, b in zip(first, second):
        if a != b:
            break
        prefix.append(a)
    return prefix


def merge_chunks(current: Chunk, candidate: Chunk) -> Chunk:
    """
    Concatenate two adjacent chunks.

    The separator between them is already part of ``current``. The section
    widens to the common path prefix and the shallower level.
    """
    types: List[ChunkType] = list(current.types)
    for chunk_type in candidate.types:
        if chunk_type not in types:
            types.append(chunk_type)

    return Chunk(
        content=current.content + candidate.content,
        section=SectionInfo(
            path=common_prefix(current.section.path, candidate.section.path),
            level=min(current.section.level, candidate.section.level),
        ),
        types=types,
    )


class GreedyMerger:
    """
    Consolidates semantic chunks into fewer, larger chunks.

    Wraps a SemanticMarkdownSplitter: ``split_text`` runs the semantic
    split and merges its output.
    """

    def __init__(
        self,
        base_splitter: SemanticMarkdownSplitter,
        min_chunk_size: int,
        preferred_chunk_size: int,
        max_chunk_size: int,
        merge_policy: MergePolicy = MergePolicy.EXACT,
    ):
        """
        Initialize the greedy merger.

        Args:
            base_splitter: Splitter producing the leaf chunks
            min_chunk_size: Size below which chunks are merged when possible
            preferred_chunk_size: Target chunk size, never a hard cutoff
            max_chunk_size: Maximum size of a merged chunk
            merge_policy: Section path compatibility rule

        Raises:
            ConfigurationError: If the sizes are non-positive or not
                ordered min <= preferred <= max
        """
        if min(min_chunk_size, preferred_chunk_size, max_chunk_size) <= 0:
            raise ConfigurationError(
                f"Chunk sizes must be positive, got min={min_chunk_size}, "
                f"preferred={preferred_chunk_size}, max={max_chunk_size}"
            )
        if min_chunk_size > max_chunk_size:
            raise ConfigurationError(
                f"min_chunk_size ({min_chunk_size}) must not exceed "
                f"max_chunk_size ({max_chunk_size})"
            )
        if not min_chunk_size <= preferred_chunk_size <= max_chunk_size:
            raise ConfigurationError(
                f"preferred_chunk_size ({preferred_chunk_size}) must lie "
                f"between min_chunk_size ({min_chunk_size}) and "
                f"max_chunk_size ({max_chunk_size})"
            )
        if base_splitter.max_chunk_size > max_chunk_size:
            raise ConfigurationError(
                f"Base splitter ceiling ({base_splitter.max_chunk_size}) "
                f"exceeds max_chunk_size ({max_chunk_size})"
            )

        self.base_splitter = base_splitter
        self.min_chunk_size = min_chunk_size
        self.preferred_chunk_size = preferred_chunk_size
        self.max_chunk_size = max_chunk_size
        self.merge_policy = MergePolicy(merge_policy)

    def _can_append(self, current: Chunk, candidate: Chunk) -> bool:
        if not paths_compatible(
            current.section.path, candidate.section.path, self.merge_policy
        ):
            return False
        return current.size + candidate.size <= self.max_chunk_size

    def merge(self, chunks: Iterable[Chunk]) -> Iterator[Chunk]:
        """
        Greedily merge a stream of chunks.

        Args:
            chunks: Leaf chunks in document order

        Yields:
            Merged chunks in document order
        """
        current: Optional[Chunk] = None
        for candidate in chunks:
            if current is None:
                current = candidate
                continue

            if self._can_append(current, candidate):
                current = merge_chunks(current, candidate)
                continue

            if current.size < self.min_chunk_size:
                logger.debug(
                    f"Emitting undersized chunk ({current.size} < "
                    f"{self.min_chunk_size}) at section boundary "
                    f"{current.section.path}"
                )
            yield current
            current = candidate

        if current is not None:
            yield current

    def split_text(
        self,
        text: str,
        content_type: Optional[str] = None,
        path_prefix: Optional[Sequence[str]] = None
    ) -> List[Chunk]:
        """
        Split text semantically and merge the result.

        Args:
            text: Document body
            content_type: MIME type of the body
            path_prefix: Path prepended to every chunk's section path

        Returns:
            Final list of chunks
        """
        leaves = self.base_splitter.split_text(
            text, content_type=content_type, path_prefix=path_prefix
        )
        chunks = list(self.merge(leaves))
        logger.debug(
            f"Greedy merge produced {len(chunks)} chunks "
            f"(min={self.min_chunk_size}, "
            f"preferred={self.preferred_chunk_size}, "
            f"max={self.max_chunk_size})"
        )
        return chunks
