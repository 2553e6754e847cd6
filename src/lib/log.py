"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the verbosity of the
GenerationContext currently being evaluated without passing it around.

Features:
- Context-aware logging tied to GenerationContext verbosity
- Rich formatting with timestamps, colors, and metadata
- Follows asyncio tasks (contextvars are copied into each task)
- Falls back to the configured default verbosity outside an evaluation

Usage:
    from cardmacros.lib.log import LOG, state_connectToLogger

    # At start of an evaluation:
    state_connectToLogger(context)

    # Anywhere in that context, including macro producers:
    LOG("This message appears if verbosity >= 1", level=1)
    LOG("Debug details appear if verbosity >= 2", level=2)
    LOG("Verbose trace appears if verbosity >= 3", level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

from ..config import appsettings

# Context variable to hold the current GenerationContext
_generation_context: ContextVar[Optional[Any]] = ContextVar('generation_context', default=None)

# Configure loguru with cardmacros-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a GenerationContext to the logging context.

    Call this at the start of an evaluation to make the context's verbosity
    available to LOG() calls made anywhere below it, including inside the
    asyncio tasks spawned while draining the task queue.

    Args:
        state: GenerationContext (or any object with a verbosity attribute)
    """
    _generation_context.set(state)


def verbosity_current() -> int:
    """Verbosity of the connected context, or the configured default"""
    state = _generation_context.get()
    if state is not None and hasattr(state, 'verbosity'):
        return state.verbosity
    return appsettings.verbosity


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Example:
        LOG("Evaluating card decision_1", level=1)
        LOG("Queued 4 macro tasks", level=2)
        LOG("Placeholder macro-17 resolved", level=3)
    """
    if verbosity_current() >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def LOG_exception(message: str, error: BaseException) -> None:
    """Log an unexpected failure with its traceback, regardless of verbosity"""
    logger.opt(exception=error, depth=1).error(message)
