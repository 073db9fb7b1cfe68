# Shared fixtures for ingestion and splitter tests

import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.ingestion.context import ProcessingContext, ScraperOptions  # noqa: E402
from src.splitter import GreedyMerger, SemanticMarkdownSplitter  # noqa: E402

# Small sizes so that splitting and merging are exercised on short samples
MIN_SIZE = 40
PREFERRED_SIZE = 80
MAX_SIZE = 160


def make_context(content, source="http://example.com", **overrides):
    """Minimal context for running a single stage."""
    fields = {
        "content": content,
        "content_type": "text/markdown",
        "source": source,
        "options": ScraperOptions(
            url=source, library="test-lib", version="1.0.0"
        ),
    }
    fields.update(overrides)
    return ProcessingContext(**fields)


@pytest.fixture
def semantic_splitter():
    return SemanticMarkdownSplitter(PREFERRED_SIZE, MAX_SIZE)


@pytest.fixture
def greedy_merger(semantic_splitter):
    return GreedyMerger(semantic_splitter, MIN_SIZE, PREFERRED_SIZE, MAX_SIZE)


SAMPLE_DOCUMENTS = {
    "empty": "",
    "whitespace_only": "  \n\n\t\n",
    "no_headings": (
        "First paragraph of plain text.\n\n"
        "Second paragraph, a little longer than the first one.\n\n"
        "Third."
    ),
    "nested_headings": (
        "# Guide\n\n"
        "Intro text for the guide.\n\n"
        "## Install\n\n"
        "Run the installer.\n\n"
        "### Linux\n\n"
        "Use the package manager.\n\n"
        "### macOS\n\n"
        "Use the disk image.\n\n"
        "## Usage\n\n"
        "Start the program.\n\n"
        "# Reference\n\n"
        "See the API docs.\n"
    ),
    "code_table_list": (
        "# Examples\n\n"
        "```python\n"
        "def add(a, b):\n"
        "    return a + b\n"
        "```\n\n"
        "| name | value |\n"
        "|------|-------|\n"
        "| a    | 1     |\n"
        "| b    | 2     |\n\n"
        "- first item\n"
        "- second item\n"
        "- third item\n\n"
        "> A quoted remark\n"
        "> spanning two lines.\n\n"
        "---\n\n"
        "<div>raw html</div>\n"
    ),
    "long_paragraph": (
        "## Long\n\n"
        + " ".join(
            f"Sentence number {i} talks about chunking." for i in range(20)
        )
        + "\n"
    ),
    "long_code": (
        "```text\n"
        + "".join(f"line {i:03d} of a long code listing\n" for i in range(20))
        + "```\n"
    ),
    "crlf": "# Title\r\n\r\nBody line one.\r\nBody line two.\r\n\r\n## Sub\r\n\r\nMore.\r\n",
    "leading_blank_lines": "\n\n\n# Heading\n\nText after blank lines.\n",
    "setext": "Main Title\n==========\n\nBody.\n\nSub Title\n---------\n\nMore body.\n",
    "heading_in_code": "```\n# not a heading\n```\n\nAfter the fence.\n",
}
