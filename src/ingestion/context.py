"""
Per-document processing state threaded through the middleware chain.

A ``ProcessingContext`` is immutable: every stage receives one and returns
a new one (``model_copy``) instead of mutating shared state, so a document's
state is only ever owned by the stage currently running.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from .preamble_values import PreambleValue


class ScraperOptions(BaseModel):
    """Read-only options describing where a document comes from."""
    model_config = ConfigDict(frozen=True)

    url: str = ""
    library: str = ""
    version: str = ""


class ProcessingError(BaseModel):
    """A recoverable problem recorded by a stage."""
    model_config = ConfigDict(frozen=True)

    message: str
    stage: str = ""
    source: str = ""


class ProcessingContext(BaseModel):
    """
    State of one document while it moves through the pipeline.

    Attributes:
        content: Current text of the document
        content_type: MIME-like tag guiding stage applicability
        source: Origin identifier, used for diagnostics only
        title: Document title, set at most once
        preamble: Parsed front matter, only set when it had keys
        hierarchical_path: Path prefix for every chunk of the document
        original_link: Link to the original source of the document
        links: Outbound references, append-only
        errors: Recoverable errors, append-only
        options: Read-only processing options
    """
    model_config = ConfigDict(frozen=True)

    content: str
    content_type: str = "text/markdown"
    source: str = ""
    title: Optional[str] = None
    preamble: Optional[Dict[str, PreambleValue]] = None
    hierarchical_path: Optional[List[str]] = None
    original_link: Optional[str] = None
    links: List[str] = []
    errors: List[ProcessingError] = []
    options: ScraperOptions = ScraperOptions()

    def with_content(self, content: str) -> "ProcessingContext":
        return self.model_copy(update={"content": content})

    def with_title(self, title: Optional[str]) -> "ProcessingContext":
        """Return a copy with ``title`` set, unless one is already set."""
        if self.title or not title:
            return self
        return self.model_copy(update={"title": title})

    def with_error(
        self, message: str, stage: str = ""
    ) -> "ProcessingContext":
        """Return a copy with one more error record appended."""
        error = ProcessingError(
            message=message, stage=stage, source=self.source
        )
        return self.model_copy(update={"errors": [*self.errors, error]})

    def with_links(self, links: List[str]) -> "ProcessingContext":
        """Return a copy with new links appended, skipping known ones."""
        merged = list(self.links)
        seen = set(merged)
        for link in links:
            if link not in seen:
                seen.add(link)
                merged.append(link)
        if len(merged) == len(self.links):
            return self
        return self.model_copy(update={"links": merged})
