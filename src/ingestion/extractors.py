"""
Auxiliary Markdown extraction stages.

These stages derive the document title from its first H1 heading and
collect outbound links. Neither touches the content.
"""

import logging
from typing import List, Optional
from urllib.parse import urljoin, urlparse

from markdown_it.token import Token

from src.splitter.mime_types import is_markdown
from src.splitter.parser import create_parser

from .context import ProcessingContext
from .runner import ContentProcessorMiddleware, StageResult, proceed

logger = logging.getLogger(__name__)


def extract_title(tokens: List[Token]) -> Optional[str]:
    """
    Return the text of the first H1 heading.

    Args:
        tokens: Block tokens from markdown-it

    Returns:
        Heading text, or None if the document has no H1
    """
    for i, token in enumerate(tokens):
        if token.type == "heading_open" and token.tag == "h1":
            if i + 1 < len(tokens) and tokens[i + 1].type == "inline":
                title = tokens[i + 1].content.strip()
                if title:
                    return title
    return None


def extract_links(tokens: List[Token], base_url: str = "") -> List[str]:
    """
    Collect link targets in document order.

    Fragment-only and ``mailto:`` links are skipped. Relative links are
    resolved when ``base_url`` is an http(s) URL.
    """
    resolve = urlparse(base_url).scheme in ("http", "https")
    links = []
    for token in tokens:
        if token.type != "inline" or not token.children:
            continue
        for child in token.children:
            if child.type != "link_open":
                continue
            href = str(child.attrGet("href") or "").strip()
            if not href or href.startswith("#"):
                continue
            if href.lower().startswith("mailto:"):
                continue
            links.append(urljoin(base_url, href) if resolve else href)
    return links


class MarkdownMetadataExtractorMiddleware(ContentProcessorMiddleware):
    """Sets the title from the first H1 heading, if no title is set yet."""

    name = "markdown_metadata"

    def __init__(self):
        self.md = create_parser()

    def process(self, context: ProcessingContext) -> StageResult:
        if context.title or not is_markdown(context.content_type):
            return proceed(context)

        title = extract_title(self.md.parse(context.content))
        if title:
            logger.debug(f"Title from heading for {context.source}: {title}")
        return proceed(context.with_title(title))


class MarkdownLinkExtractorMiddleware(ContentProcessorMiddleware):
    """Appends the document's outbound links to the context."""

    name = "markdown_links"

    def __init__(self):
        self.md = create_parser()

    def process(self, context: ProcessingContext) -> StageResult:
        if not is_markdown(context.content_type):
            return proceed(context)

        links = extract_links(
            self.md.parse(context.content), base_url=context.source
        )
        logger.debug(f"Found {len(links)} links in {context.source}")
        return proceed(context.with_links(links))
