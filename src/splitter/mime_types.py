"""MIME type helpers."""

from typing import Optional

MARKDOWN_MIME_TYPES = ("text/markdown", "text/x-markdown")


def normalize_mime_type(mime_type: Optional[str]) -> str:
    """Lower-case a MIME type and drop parameters such as ``charset``."""
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


def is_markdown(mime_type: Optional[str]) -> bool:
    """Check whether a MIME type denotes Markdown content."""
    return normalize_mime_type(mime_type) in MARKDOWN_MIME_TYPES
