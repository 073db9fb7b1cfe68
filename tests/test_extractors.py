"""
Tests for title and link extraction stages.
"""

from src.ingestion.extractors import (
    MarkdownLinkExtractorMiddleware,
    MarkdownMetadataExtractorMiddleware,
)
from tests.conftest import make_context


def _title(markdown, **overrides):
    context, _ = MarkdownMetadataExtractorMiddleware().process(
        make_context(markdown, **overrides)
    )
    return context.title


def _links(markdown, source="http://example.com", **overrides):
    context, should_continue = MarkdownLinkExtractorMiddleware().process(
        make_context(markdown, source=source, **overrides)
    )
    assert should_continue is True
    return context.links


class TestTitleExtraction:

    def test_first_h1(self):
        assert _title("Intro text\n\n# Hello World\n\n# Second") == "Hello World"

    def test_setext_h1(self):
        assert _title("Main Title\n==========\n\nBody.") == "Main Title"

    def test_only_lower_headings(self):
        assert _title("## Section\n\nText.") is None

    def test_heading_inside_code_is_ignored(self):
        assert _title("```\n# not a title\n```\n") is None

    def test_existing_title_is_kept(self):
        assert _title("# From Heading", title="From Front Matter") == "From Front Matter"

    def test_non_markdown_content_is_skipped(self):
        assert _title("# Heading", content_type="text/plain") is None


class TestLinkExtraction:

    def test_links_in_document_order(self):
        markdown = (
            "See [first](https://one.example/a) and <https://two.example>.\n\n"
            "- [third](https://three.example/c)\n"
        )
        assert _links(markdown) == [
            "https://one.example/a",
            "https://two.example",
            "https://three.example/c",
        ]

    def test_relative_links_resolved_against_http_source(self):
        links = _links(
            "[up](../b.md) [same](c.md)",
            source="https://docs.example.com/guide/intro.md",
        )
        assert links == [
            "https://docs.example.com/b.md",
            "https://docs.example.com/guide/c.md",
        ]

    def test_relative_links_kept_for_file_sources(self):
        assert _links("[x](other.md)", source="file:///docs/a.md") == ["other.md"]

    def test_fragment_and_mailto_links_skipped(self):
        markdown = "[top](#top) [mail](mailto:someone@example.com) [ok](https://ok.example)"
        assert _links(markdown) == ["https://ok.example"]

    def test_duplicates_removed(self):
        markdown = "[a](https://a.example) [again](https://a.example)"
        assert _links(markdown) == ["https://a.example"]

    def test_existing_links_are_kept(self):
        links = _links(
            "[b](https://b.example)", links=["https://a.example"]
        )
        assert links == ["https://a.example", "https://b.example"]

    def test_non_markdown_content_is_skipped(self):
        assert _links("[a](https://a.example)", content_type="text/html") == []
