"""
Chunk data model shared by the semantic splitter and the greedy merger.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict


class ChunkType(str, Enum):
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    CODE = "code"
    TABLE = "table"
    LIST = "list"
    BLOCKQUOTE = "blockquote"
    HTML = "html"
    RULE = "rule"
    TEXT = "text"


class SectionInfo(BaseModel):
    """Position of a chunk in the document's heading hierarchy."""
    model_config = ConfigDict(frozen=True)

    path: List[str] = []
    level: int = 0


class Chunk(BaseModel):
    """
    A contiguous span of a document.

    ``content`` is the exact source text of the span, including any blank
    lines that follow it, so joining all chunks of a document in order
    gives back the document.
    """
    model_config = ConfigDict(frozen=True)

    content: str
    section: SectionInfo = SectionInfo()
    types: List[ChunkType] = []

    @property
    def size(self) -> int:
        """Length used for every size threshold (characters)."""
        return len(self.content)

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "section": {
                "path": list(self.section.path),
                "level": self.section.level,
            },
            "types": [t.value for t in self.types],
        }
