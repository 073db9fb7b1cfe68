"""
Two-phase chunk splitting for ingestion.

The semantic splitter cuts a document into structural leaf chunks tagged
with section paths; the greedy merger consolidates them into chunks bounded
by minimum, preferred and maximum sizes.
"""

from .errors import ConfigurationError, IngestionError, StructuralParseError
from .greedy import GreedyMerger, MergePolicy, paths_compatible
from .models import Chunk, ChunkType, SectionInfo
from .semantic import SemanticMarkdownSplitter

__all__ = [
    "ConfigurationError",
    "IngestionError",
    "StructuralParseError",
    "GreedyMerger",
    "MergePolicy",
    "paths_compatible",
    "Chunk",
    "ChunkType",
    "SectionInfo",
    "SemanticMarkdownSplitter"
]
