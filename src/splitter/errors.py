"""
Exception types for chunk splitting and ingestion.

Recoverable content problems (for example a malformed front matter block)
are never raised; they are recorded as ``ProcessingError`` entries on the
processing context. The exceptions below are the fatal cases.
"""


class IngestionError(Exception):
    """Base class for fatal ingestion errors."""


class ConfigurationError(IngestionError, ValueError):
    """Invalid splitter configuration, raised before any document is processed."""


class StructuralParseError(IngestionError):
    """
    The document structure could not be split.

    The whole document must be treated as failed; this is never absorbed
    into the context's error list.
    """
