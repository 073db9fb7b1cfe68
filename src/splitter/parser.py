"""
Shared markdown-it configuration.

CommonMark plus GFM tables and strikethrough, so that tables are parsed as
block nodes instead of paragraphs.
"""

from markdown_it import MarkdownIt


def create_parser() -> MarkdownIt:
    """Build the Markdown parser used for splitting and extraction."""
    return MarkdownIt("commonmark").enable(["table", "strikethrough"])
