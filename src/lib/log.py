"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the current program
state's verbosity level without requiring explicit state passing.

Features:
- Context-aware logging tied to ProgramState / ServerConfig verbosity
- Rich formatting with timestamps, colors, and metadata
- Safe across threads and asyncio tasks using contextvars
- Works throughout lib modules without passing state

Usage:
    from lib.log import LOG, state_connectToLogger

    # At start of pipeline function or server startup:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("This message appears if verbosity >= 1", level=1)
    LOG("Debug details appear if verbosity >= 2", level=2)
    LOG("Verbose trace appears if verbosity >= 3", level=3)

Failures that must always be seen (render errors behind the HTTP boundary,
websocket writer errors) use ``logger.error`` directly.
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current program state
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Configure loguru with deck-specific format
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
    Connect a program state to the logging context.

    Call this at the start of each pipeline function (or once before the
    server event loop starts) to make the state's verbosity setting
    available to LOG() calls throughout that context.

    Args:
        state: Object with a verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Example:
        LOG("Rendered 12 slides", level=1)
        LOG("Connection 3 registered", level=2)
        LOG("Highlighting block as 'rust'", level=3)
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.debug(message, **kwargs)


def uvicornLevel_get(verbosity: int) -> str:
    """Map a deck verbosity to the uvicorn access/error log level"""
    if verbosity >= 3:
        return "debug"
    if verbosity >= 2:
        return "info"
    return "warning"
