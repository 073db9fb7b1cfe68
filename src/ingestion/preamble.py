"""
Front matter extraction for Markdown documents.

A front matter block is a line of exactly ``---``, a YAML body and a closing
``---`` line at the very start of the document:

    ---
    name: Document Title
    uuid: unique-identifier
    link: https://original-source.com/doc
    path: ["Category", "Subcategory", "Topic"]
    date: 2025-11-17
    ---

The block is removed from the content and its keys are stored on the
context. ``name`` becomes the title (if none is set yet), ``link`` the
original source link and ``path`` the hierarchical path prefix used by the
splitter.
"""

import logging
import re
from typing import Any, Dict, Optional

import yaml
from frontmatter.default_handlers import YAMLHandler
from pydantic import BaseModel

from .context import ProcessingContext
from .preamble_values import as_string, as_string_array, classify_mapping
from .runner import ContentProcessorMiddleware, StageResult, proceed

logger = logging.getLogger(__name__)

# Line terminator plus one blank line directly after the closing delimiter
LEADING_NEWLINE_RE = re.compile(r"\r\n|\r|\n")
LEADING_BLANK_LINE_RE = re.compile(r"[ \t]*(?:\r\n|\r|\n)")

PARSE_ERROR_PREFIX = "Failed to parse front matter"


class PreambleHandler(YAMLHandler):
    """YAML handler that only accepts an exact three-dash delimiter line."""
    FM_BOUNDARY = re.compile(r"^---[ \t]*\r?$", re.MULTILINE)


class FrontMatterBlock(BaseModel):
    """Result of splitting a document into front matter and body."""
    data: Dict[str, Any] = {}
    body: str


_handler = PreambleHandler()


def parse_front_matter(text: str) -> Optional[FrontMatterBlock]:
    """
    Split a leading front matter block from text.

    Args:
        text: Full document text

    Returns:
        FrontMatterBlock with the parsed mapping and the remaining body,
        or None if the text does not start with a complete block.
        A block whose YAML is empty yields empty ``data``.

    Raises:
        yaml.YAMLError: If the block is present but its YAML is malformed
            or is not a mapping
    """
    if not text or not _handler.detect(text):
        return None

    try:
        fm_text, body = _handler.split(text)
    except ValueError:
        # Opening delimiter without a closing one
        return None

    loaded = _handler.load(fm_text)
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        # Only key/value declarations form a front matter block
        raise yaml.YAMLError(
            f"expected a mapping of keys, got {type(loaded).__name__}"
        )
    data = dict(loaded)

    # Drop the end of the closing delimiter line and one blank line after it
    match = LEADING_NEWLINE_RE.match(body)
    if match:
        body = body[match.end():]
        blank = LEADING_BLANK_LINE_RE.match(body)
        if blank:
            body = body[blank.end():]

    return FrontMatterBlock(data=data, body=body)


class FrontMatterMiddleware(ContentProcessorMiddleware):
    """
    Extracts YAML front matter and projects known keys into the context.

    Must run first so later stages only see the document body.
    """

    name = "front_matter"

    def process(self, context: ProcessingContext) -> StageResult:
        try:
            block = parse_front_matter(context.content)
        except yaml.YAMLError as e:
            logger.warning(
                f"Invalid front matter in {context.source or '<unknown>'}: {e}"
            )
            return proceed(
                context.with_error(f"{PARSE_ERROR_PREFIX}: {e}", self.name)
            )

        if block is None:
            return proceed(context)

        context = context.with_content(block.body)
        if not block.data:
            logger.debug(f"Empty front matter stripped from {context.source}")
            return proceed(context)

        preamble = classify_mapping(block.data)
        updates: Dict[str, Any] = {"preamble": preamble}

        link = as_string(preamble.get("link"))
        if link:
            updates["original_link"] = link

        path = as_string_array(preamble.get("path"))
        if path is not None:
            updates["hierarchical_path"] = path

        context = context.model_copy(update=updates)
        context = context.with_title(as_string(preamble.get("name")))

        logger.debug(
            f"Front matter keys for {context.source}: {sorted(preamble)}"
        )
        return proceed(context)
