"""
Markdown processing pipeline.

Decodes raw content, runs the middleware chain (front matter first, then
title and link extraction) and splits the resulting body in two phases:
semantic splitting followed by greedy size optimization.

Example:
    >>> pipeline = MarkdownPipeline()
    >>> raw = RawContent(
    ...     content=b"---\\nname: Guide\\n---\\n\\n# Intro\\n\\nHello.",
    ...     mime_type="text/markdown",
    ...     source="file:///docs/guide.md",
    ... )
    >>> result = pipeline.process(raw)
    >>> result.title
    'Guide'
"""

import codecs
import logging
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel

from src.splitter import Chunk, GreedyMerger, SemanticMarkdownSplitter
from src.splitter.mime_types import is_markdown

from .config import load_chunk_settings
from .context import ProcessingContext, ProcessingError, ScraperOptions
from .extractors import (
    MarkdownLinkExtractorMiddleware,
    MarkdownMetadataExtractorMiddleware,
)
from .preamble import FrontMatterMiddleware
from .preamble_values import PreambleValue, to_plain
from .runner import ContentProcessorMiddleware, run_middleware

logger = logging.getLogger(__name__)

BYTE_ORDER_MARK = "\ufeff"


class RawContent(BaseModel):
    """Content as delivered by a fetcher."""
    content: Union[bytes, str]
    mime_type: str = "text/markdown"
    charset: Optional[str] = None
    source: str = ""


class PipelineResult(BaseModel):
    """Everything the persistence layer needs for one document."""
    title: Optional[str] = None
    content_type: str
    text_content: str
    links: List[str] = []
    errors: List[ProcessingError] = []
    chunks: List[Chunk] = []
    original_link: Optional[str] = None
    preamble: Dict[str, PreambleValue] = {}

    def to_dict(self) -> Dict[str, Any]:
        """
        JSON-ready representation.

        ``original_link`` is exposed as ``source_link``, the field name
        stored and returned by the search index.
        """
        return {
            "title": self.title,
            "content_type": self.content_type,
            "source_link": self.original_link,
            "text_content": self.text_content,
            "links": list(self.links),
            "errors": [error.model_dump() for error in self.errors],
            "preamble": {
                key: to_plain(value) for key, value in self.preamble.items()
            },
            "chunks": [chunk.to_dict() for chunk in self.chunks],
        }


def convert_to_string(
    content: Union[bytes, str],
    charset: Optional[str] = None
) -> str:
    """
    Decode raw content to text.

    Args:
        content: Raw bytes or already decoded text
        charset: Declared charset; unknown values fall back to UTF-8

    Returns:
        Decoded text without a leading byte order mark, undecodable bytes
        replaced
    """
    if isinstance(content, str):
        return content

    encoding = "utf-8"
    if charset:
        try:
            encoding = codecs.lookup(charset.strip()).name
        except LookupError:
            logger.warning(f"Unknown charset {charset!r}, decoding as UTF-8")
    text = content.decode(encoding, errors="replace")
    if text.startswith(BYTE_ORDER_MARK):
        text = text[len(BYTE_ORDER_MARK):]
    return text


class MarkdownPipeline:
    """
    Pipeline for Markdown documents.

    Uses SemanticMarkdownSplitter for structure-aware chunking followed by
    GreedyMerger for size optimization.
    """

    def __init__(
        self,
        preferred_chunk_size: Optional[int] = None,
        max_chunk_size: Optional[int] = None,
        min_chunk_size: Optional[int] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            preferred_chunk_size: Target chunk size (default from config)
            max_chunk_size: Hard chunk size ceiling (default from config)
            min_chunk_size: Merge threshold (default from config)

        Raises:
            ConfigurationError: If the resolved sizes are invalid
        """
        settings = load_chunk_settings(
            min_chunk_size=min_chunk_size,
            preferred_chunk_size=preferred_chunk_size,
            max_chunk_size=max_chunk_size,
        )
        self.settings = settings

        # Front matter must be first so later stages only see the body
        self.middleware: List[ContentProcessorMiddleware] = [
            FrontMatterMiddleware(),
            MarkdownMetadataExtractorMiddleware(),
            MarkdownLinkExtractorMiddleware(),
        ]

        semantic_splitter = SemanticMarkdownSplitter(
            settings.preferred_chunk_size,
            settings.max_chunk_size,
        )
        self.splitter = GreedyMerger(
            semantic_splitter,
            settings.min_chunk_size,
            settings.preferred_chunk_size,
            settings.max_chunk_size,
        )

    def can_process(self, mime_type: Optional[str]) -> bool:
        """Check whether this pipeline handles the given MIME type."""
        if not mime_type:
            return False
        return is_markdown(mime_type)

    def process(
        self,
        raw_content: RawContent,
        options: Optional[ScraperOptions] = None
    ) -> PipelineResult:
        """
        Process one document.

        Args:
            raw_content: Raw bytes or text with MIME type and source
            options: Read-only options carried on the context

        Returns:
            PipelineResult with title, text, links, errors and chunks

        Raises:
            StructuralParseError: If the document cannot be split
        """
        content = convert_to_string(raw_content.content, raw_content.charset)
        context = ProcessingContext(
            content=content,
            content_type=raw_content.mime_type or "text/markdown",
            source=raw_content.source,
            options=options or ScraperOptions(url=raw_content.source),
        )

        context = run_middleware(self.middleware, context)

        chunks = self.splitter.split_text(
            context.content,
            content_type=context.content_type,
            path_prefix=context.hierarchical_path,
        )

        if context.errors:
            logger.warning(
                f"{len(context.errors)} recoverable errors while processing "
                f"{context.source}"
            )
        logger.info(
            f"Processed {context.source or '<unknown>'}: "
            f"{len(chunks)} chunks, {len(context.links)} links"
        )

        return PipelineResult(
            title=context.title,
            content_type=context.content_type,
            text_content=context.content,
            links=context.links,
            errors=context.errors,
            chunks=chunks,
            original_link=context.original_link,
            preamble=context.preamble or {},
        )
