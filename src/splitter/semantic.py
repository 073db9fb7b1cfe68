"""
Structure-aware splitting of Markdown into leaf chunks.

The document is parsed with markdown-it and every top-level block
(heading, paragraph, code fence, table, list, blockquote, ...) becomes one
chunk. Headings maintain a stack of open sections; each chunk is tagged
with the path of open heading titles, prefixed by an optional path coming
from the document's front matter.

A chunk spans from the first line of its block to the first line of the
next block, so the blank lines after a block stay with it and the chunks
of a document join back into the exact input text.

Blocks larger than ``max_chunk_size`` are cut into fragments along
boundaries that are safe for their type (see ``block_splitters``). Nothing
is merged here; that is the greedy merger's job.

Example:
    >>> splitter = SemanticMarkdownSplitter(1500, 5000)
    >>> chunks = list(splitter.split_text("# Topic\\n\\nBody.", path_prefix=["Docs"]))
    >>> [c.section.path for c in chunks]
    [['Docs', 'Topic'], ['Docs', 'Topic']]
"""

import logging
import re
from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple

from .block_splitters import BlockSplitter
from .errors import ConfigurationError, StructuralParseError
from .mime_types import is_markdown
from .models import Chunk, ChunkType, SectionInfo
from .parser import create_parser

logger = logging.getLogger(__name__)

# Same line breaks markdown-it normalizes before computing token.map
LINE_BREAK_RE = re.compile(r"\r\n?|\n")

BLOCK_TYPES = {
    "heading_open": ChunkType.HEADING,
    "paragraph_open": ChunkType.PARAGRAPH,
    "fence": ChunkType.CODE,
    "code_block": ChunkType.CODE,
    "table_open": ChunkType.TABLE,
    "bullet_list_open": ChunkType.LIST,
    "ordered_list_open": ChunkType.LIST,
    "blockquote_open": ChunkType.BLOCKQUOTE,
    "html_block": ChunkType.HTML,
    "hr": ChunkType.RULE,
}


class Block(NamedTuple):
    """A top-level block: first line, type and heading info if any."""
    start_line: int
    type: ChunkType
    heading_level: int = 0
    heading_title: str = ""


def compute_line_starts(text: str) -> List[int]:
    """
    Compute the character offset of every line start.

    Args:
        text: Text to compute offsets for

    Returns:
        Offsets of each line start, followed by ``len(text)``
    """
    offsets = [0]
    for match in LINE_BREAK_RE.finditer(text):
        offsets.append(match.end())
    if offsets[-1] != len(text):
        offsets.append(len(text))
    return offsets


def _plain_text_blocks(text: str) -> List[Block]:
    """Blocks for non-Markdown text: runs of lines separated by blank lines."""
    blocks = []
    previous_blank = True
    for line_no, line in enumerate(LINE_BREAK_RE.split(text)):
        is_blank = not line.strip()
        if not is_blank and previous_blank:
            blocks.append(Block(line_no, ChunkType.TEXT))
        previous_blank = is_blank
    return blocks


class SemanticMarkdownSplitter:
    """
    Splits Markdown into structural leaf chunks tagged with section paths.
    """

    def __init__(self, preferred_chunk_size: int, max_chunk_size: int):
        """
        Initialize the splitter.

        Args:
            preferred_chunk_size: Fragment size used when a block has to
                be cut because it exceeds the ceiling
            max_chunk_size: Hard maximum size of every chunk

        Raises:
            ConfigurationError: If the sizes are non-positive or
                preferred_chunk_size > max_chunk_size
        """
        if preferred_chunk_size <= 0 or max_chunk_size <= 0:
            raise ConfigurationError(
                f"Chunk sizes must be positive, got preferred="
                f"{preferred_chunk_size}, max={max_chunk_size}"
            )
        if preferred_chunk_size > max_chunk_size:
            raise ConfigurationError(
                f"preferred_chunk_size ({preferred_chunk_size}) must not "
                f"exceed max_chunk_size ({max_chunk_size})"
            )

        self.preferred_chunk_size = preferred_chunk_size
        self.max_chunk_size = max_chunk_size
        self.md = create_parser()
        self.block_splitter = BlockSplitter(preferred_chunk_size)

    def _markdown_blocks(self, text: str) -> List[Block]:
        try:
            tokens = self.md.parse(text)
        except Exception as e:
            raise StructuralParseError(
                f"Could not parse Markdown structure: {e}"
            ) from e

        blocks: List[Block] = []
        for i, token in enumerate(tokens):
            if token.level != 0 or token.nesting == -1 or not token.map:
                continue
            start_line = token.map[0]
            # A block starting on an already claimed line belongs to it
            if blocks and start_line <= blocks[-1].start_line:
                continue

            chunk_type = BLOCK_TYPES.get(token.type, ChunkType.TEXT)
            if chunk_type == ChunkType.HEADING:
                title = ""
                if i + 1 < len(tokens) and tokens[i + 1].type == "inline":
                    title = tokens[i + 1].content.strip()
                blocks.append(
                    Block(start_line, chunk_type, int(token.tag[1:]), title)
                )
            else:
                blocks.append(Block(start_line, chunk_type))
        return blocks

    def split_text(
        self,
        text: str,
        content_type: Optional[str] = None,
        path_prefix: Optional[Sequence[str]] = None
    ) -> Iterator[Chunk]:
        """
        Split text into leaf chunks in document order.

        Args:
            text: Document body (front matter already removed)
            content_type: MIME type; non-Markdown text is split on blank
                lines only. None means Markdown.
            path_prefix: Path prepended to every chunk's section path

        Yields:
            Chunk objects whose contents join back into ``text``

        Raises:
            StructuralParseError: If the structure cannot be split
        """
        if not text:
            return

        prefix = list(path_prefix or [])
        if content_type is None or is_markdown(content_type):
            blocks = self._markdown_blocks(text)
        else:
            blocks = _plain_text_blocks(text)

        if not blocks:
            blocks = [Block(0, ChunkType.TEXT)]
        elif blocks[0].start_line != 0:
            # Leading blank lines stay with the first block
            blocks[0] = blocks[0]._replace(start_line=0)

        line_starts = compute_line_starts(text)
        headings: List[Tuple[int, str]] = []
        emitted = 0

        for index, block in enumerate(blocks):
            start = line_starts[block.start_line]
            if index + 1 < len(blocks):
                end = line_starts[blocks[index + 1].start_line]
            else:
                end = len(text)
            content = text[start:end]
            if not content:
                continue

            if block.type == ChunkType.HEADING:
                while headings and headings[-1][0] >= block.heading_level:
                    headings.pop()
                headings.append((block.heading_level, block.heading_title))

            section = SectionInfo(
                # Headings without text still close deeper sections
                path=prefix + [title for _, title in headings if title],
                level=headings[-1][0] if headings else 0,
            )

            for fragment in self._fit(content, block.type):
                emitted += 1
                yield Chunk(
                    content=fragment, section=section, types=[block.type]
                )

        logger.debug(
            f"Semantic split produced {emitted} chunks from "
            f"{len(blocks)} blocks ({len(text)} characters)"
        )

    def _fit(self, content: str, chunk_type: ChunkType) -> List[str]:
        """Cut a block into fragments no larger than the ceiling."""
        if len(content) <= self.max_chunk_size:
            return [content]

        logger.debug(
            f"Splitting oversized {chunk_type.value} block "
            f"({len(content)} > {self.max_chunk_size} characters)"
        )
        fragments = self.block_splitter.split(content, chunk_type)

        if "".join(fragments) != content:
            raise StructuralParseError(
                f"Fragments of a {chunk_type.value} block do not cover it"
            )
        oversized = [f for f in fragments if len(f) > self.max_chunk_size]
        if oversized:
            raise StructuralParseError(
                f"Could not split {chunk_type.value} block below "
                f"{self.max_chunk_size} characters"
            )
        return fragments
