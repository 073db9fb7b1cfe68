"""
Middleware chain execution.

Stages run strictly in order. Each stage returns the updated context
together with an explicit "proceed" flag; returning ``halt(context)`` ends
the chain normally. Recoverable problems are recorded on the context and
the stage still proceeds. An exception raised by a stage aborts the whole
document and propagates to the caller.
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, Tuple

from .context import ProcessingContext

logger = logging.getLogger(__name__)

StageResult = Tuple[ProcessingContext, bool]


def proceed(context: ProcessingContext) -> StageResult:
    """Continue with the next stage."""
    return context, True


def halt(context: ProcessingContext) -> StageResult:
    """Stop the chain after the current stage."""
    return context, False


class ContentProcessorMiddleware(ABC):
    """A single stage of the content processing chain."""

    name: str = "middleware"

    @abstractmethod
    def process(self, context: ProcessingContext) -> StageResult:
        """
        Process a document context.

        Args:
            context: Context produced by the previous stage

        Returns:
            Tuple of (updated_context, proceed)
        """


def run_middleware(
    stages: Iterable[ContentProcessorMiddleware],
    context: ProcessingContext
) -> ProcessingContext:
    """
    Run stages in order against one document context.

    Args:
        stages: Ordered stages to execute
        context: Initial context for the document

    Returns:
        The context returned by the last stage that ran

    Raises:
        Exception: Whatever a stage raised; the document is failed
    """
    for stage in stages:
        logger.debug(f"Running stage {stage.name} for {context.source}")
        try:
            context, should_continue = stage.process(context)
        except Exception:
            logger.error(
                f"Stage {stage.name} failed for {context.source}"
            )
            raise

        if not should_continue:
            logger.debug(
                f"Stage {stage.name} stopped the chain for {context.source}"
            )
            break

    return context
