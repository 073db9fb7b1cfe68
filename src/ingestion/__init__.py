"""
Document ingestion pipeline.

This package decodes raw documents, runs the content processing middleware
(front matter, title and link extraction) and hands the body to the
two-phase splitter to produce chunks for the retrieval index.
"""

from .config import (
    ChunkSizeSettings,
    load_chunk_settings,
    validate_chunk_sizes,
    SPLITTER_MIN_CHUNK_SIZE,
    SPLITTER_PREFERRED_CHUNK_SIZE,
    SPLITTER_MAX_CHUNK_SIZE
)
from .context import ProcessingContext, ProcessingError, ScraperOptions
from .extractors import (
    MarkdownLinkExtractorMiddleware,
    MarkdownMetadataExtractorMiddleware
)
from .pipeline import (
    MarkdownPipeline,
    PipelineResult,
    RawContent,
    convert_to_string
)
from .preamble import FrontMatterMiddleware, parse_front_matter
from .preamble_values import PreambleKind, PreambleValue
from .runner import (
    ContentProcessorMiddleware,
    halt,
    proceed,
    run_middleware
)

__all__ = [
    "ChunkSizeSettings",
    "load_chunk_settings",
    "validate_chunk_sizes",
    "SPLITTER_MIN_CHUNK_SIZE",
    "SPLITTER_PREFERRED_CHUNK_SIZE",
    "SPLITTER_MAX_CHUNK_SIZE",
    "ProcessingContext",
    "ProcessingError",
    "ScraperOptions",
    "MarkdownLinkExtractorMiddleware",
    "MarkdownMetadataExtractorMiddleware",
    "MarkdownPipeline",
    "PipelineResult",
    "RawContent",
    "convert_to_string",
    "FrontMatterMiddleware",
    "parse_front_matter",
    "PreambleKind",
    "PreambleValue",
    "ContentProcessorMiddleware",
    "halt",
    "proceed",
    "run_middleware"
]
