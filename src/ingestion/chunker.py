"""
Command-line chunker for Markdown files.

Runs each input file through the MarkdownPipeline (front matter
extraction, semantic splitting, greedy merging) and writes the result as
JSON next to the input file.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from src.splitter.errors import ConfigurationError

from .context import ScraperOptions
from .pipeline import MarkdownPipeline, PipelineResult, RawContent

# Initialize logger
logger = logging.getLogger(__name__)

MIME_TYPES_BY_SUFFIX = {
    ".md": "text/markdown",
    ".markdown": "text/markdown",
    ".txt": "text/plain",
}


def chunk_file(
    file_path: Path,
    pipeline: MarkdownPipeline,
    options: Optional[ScraperOptions] = None,
) -> PipelineResult:
    """
    Chunk a single file.

    Args:
        file_path: Path to the Markdown file
        pipeline: Pipeline used for processing
        options: Optional processing options

    Returns:
        PipelineResult for the file

    Raises:
        FileNotFoundError: If the file does not exist
        StructuralParseError: If the document cannot be split
    """
    file_path = Path(file_path)
    if not file_path.exists():
        error_msg = f"File not found: {file_path}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    logger.info(f"Processing file: {file_path}")
    raw_content = RawContent(
        content=file_path.read_bytes(),
        mime_type=MIME_TYPES_BY_SUFFIX.get(
            file_path.suffix.lower(), "text/markdown"
        ),
        charset="utf-8",
        source=file_path.resolve().as_uri(),
    )
    logger.debug(f"Read {len(raw_content.content)} bytes from file")

    return pipeline.process(raw_content, options)


def setup_logging(log_file: str = "ingestion.log") -> None:
    """
    Configure logging to output to both console and file.

    Args:
        log_file: Path to the log file (default: ingestion.log)
    """
    root_logger = logging.getLogger("src")

    # Clear any existing handlers
    root_logger.handlers.clear()
    root_logger.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Console handler - INFO level
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler - DEBUG level
    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    logger.debug(
        f"Logging configured: console (INFO), file (DEBUG): {log_file}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Chunk Markdown files for a retrieval index",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m src.ingestion.chunker docs/guide.md
  python -m src.ingestion.chunker docs/*.md --max-size 4000
  python -m src.ingestion.chunker guide.md --min-size 200 -o guide.json
        """,
    )

    parser.add_argument(
        "inputs",
        type=Path,
        nargs="+",
        help="Markdown files to chunk",
    )
    parser.add_argument(
        "--min-size",
        type=int,
        default=None,
        help="Minimum chunk size (default: SPLITTER_MIN_CHUNK_SIZE)",
    )
    parser.add_argument(
        "--preferred-size",
        type=int,
        default=None,
        help="Preferred chunk size (default: SPLITTER_PREFERRED_CHUNK_SIZE)",
    )
    parser.add_argument(
        "--max-size",
        type=int,
        default=None,
        help="Maximum chunk size (default: SPLITTER_MAX_CHUNK_SIZE)",
    )
    parser.add_argument(
        "--library",
        type=str,
        default="",
        help="Library name recorded in the processing options",
    )
    parser.add_argument(
        "--version",
        type=str,
        default="",
        help="Library version recorded in the processing options",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help=(
            "Output JSON file path, only valid with a single input "
            "(default: input filename with .json extension)"
        ),
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default="ingestion.log",
        help="Path to log file (default: ingestion.log)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line interface for the chunker.

    Returns:
        Exit code (0 for success, 1 if any document failed)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.output is not None and len(args.inputs) > 1:
        parser.error("--output can only be used with a single input file")

    setup_logging(log_file=args.log_file)

    try:
        pipeline = MarkdownPipeline(
            preferred_chunk_size=args.preferred_size,
            max_chunk_size=args.max_size,
            min_chunk_size=args.min_size,
        )
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.info(
        f"Chunk sizes: min={pipeline.settings.min_chunk_size}, "
        f"preferred={pipeline.settings.preferred_chunk_size}, "
        f"max={pipeline.settings.max_chunk_size}"
    )

    failed = 0
    for input_path in args.inputs:
        options = ScraperOptions(
            url=input_path.resolve().as_uri(),
            library=args.library,
            version=args.version,
        )
        try:
            result = chunk_file(input_path, pipeline, options)
        except FileNotFoundError as e:
            logger.error(f"File error: {e}")
            failed += 1
            continue
        except Exception as e:
            logger.exception(f"Failed to process {input_path}: {e}")
            failed += 1
            continue

        for error in result.errors:
            logger.warning(f"{input_path}: {error.message}")

        output_path = args.output or input_path.with_suffix(".json")
        try:
            logger.info(
                f"Saving {len(result.chunks)} chunks to: {output_path}"
            )
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to save chunks to {output_path}: {e}")
            failed += 1

    if failed:
        logger.error(f"{failed} of {len(args.inputs)} documents failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
