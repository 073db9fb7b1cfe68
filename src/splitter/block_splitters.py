"""
Last-resort splitting of single blocks that exceed the size ceiling.

Each block type gets a RecursiveCharacterTextSplitter with separators that
are safe for that type: code is cut on line boundaries, lists between
items, tables between rows and prose between paragraphs, lines, sentences
and words. Characters are the final fallback so that every fragment fits.

The splitters keep separators attached to the end of the preceding piece,
never strip whitespace and never overlap, so the fragments of a block join
back into the block exactly.
"""

import re
from typing import Dict, List

from langchain_text_splitters import RecursiveCharacterTextSplitter

from .models import ChunkType

LINE = re.escape("\n")
WORD = re.escape(" ")
LIST_ITEM = r"\n(?=[ \t]*(?:[-*+]|\d{1,9}[.)])(?:[ \t]|$))"
SENTENCE_END = r"(?<=[.!?])[ \t]+"

SEPARATORS: Dict[ChunkType, List[str]] = {
    ChunkType.CODE: [LINE, WORD, ""],
    ChunkType.TABLE: [LINE, ""],
    ChunkType.LIST: [LIST_ITEM, LINE, WORD, ""],
    ChunkType.HTML: [LINE, WORD, ""],
}
TEXT_SEPARATORS = [r"\n[ \t]*\n", LINE, SENTENCE_END, WORD, ""]


def build_block_splitter(
    chunk_type: ChunkType,
    chunk_size: int
) -> RecursiveCharacterTextSplitter:
    """
    Create the splitter used for oversized blocks of one type.

    Args:
        chunk_type: Type of the block being split
        chunk_size: Target fragment size in characters

    Returns:
        Configured RecursiveCharacterTextSplitter
    """
    return RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=0,
        separators=SEPARATORS.get(chunk_type, TEXT_SEPARATORS),
        keep_separator="end",
        is_separator_regex=True,
        strip_whitespace=False,
        length_function=len,
    )


class BlockSplitter:
    """Splits oversized blocks with one cached splitter per block type."""

    def __init__(self, chunk_size: int):
        self.chunk_size = chunk_size
        self._splitters: Dict[ChunkType, RecursiveCharacterTextSplitter] = {}

    def split(self, text: str, chunk_type: ChunkType) -> List[str]:
        """
        Split a block into fragments of at most ``chunk_size`` characters.

        Args:
            text: Exact text of the block
            chunk_type: Type deciding which boundaries are safe

        Returns:
            Fragments in order; joined they equal ``text``
        """
        if len(text) <= self.chunk_size:
            return [text]
        splitter = self._splitters.get(chunk_type)
        if splitter is None:
            splitter = build_block_splitter(chunk_type, self.chunk_size)
            self._splitters[chunk_type] = splitter
        return splitter.split_text(text)
