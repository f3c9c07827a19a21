"""
============================================================================
PING ORCHESTRATOR - LOGGING UTILITY
============================================================================
Logging system built on loguru with console, rotated file and error
file sinks.

Nothing is configured on import: the application calls setup_logging()
once the settings are loaded. Until then loguru's default stderr sink
is used, which is what the tests see.
============================================================================
"""

from __future__ import annotations

import sys
import time
from functools import wraps
from typing import TYPE_CHECKING, List, Optional

from loguru import logger

if TYPE_CHECKING:
    from config.settings import LoggingSettings


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<magenta>{thread.name}</magenta> | <cyan>{extra[name]}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {thread.name} | "
    "{extra[name]}:{function}:{line} - {message}"
)


# ============================================================================
# LOGGER CONFIGURATION
# ============================================================================

def setup_logging(config: "LoggingSettings") -> None:
    """
    Configure logging system with multiple handlers.

    Args:
        config: Logging section of the application settings
    """
    # Remove default loguru handler
    logger.remove()
    logger.configure(extra={"name": "-"})

    log_level = config.level.value if hasattr(config.level, "value") else str(config.level)

    # Console Handler
    if config.console_enabled:
        logger.add(
            sys.stdout,
            format=CONSOLE_FORMAT,
            level=log_level,
            colorize=config.console_colored,
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

    # File Handler
    if config.file_enabled:
        logger.add(
            config.file_path,
            format=FILE_FORMAT,
            level=log_level,
            rotation=config.file_rotation,
            retention=config.file_retention,
            compression=config.file_compression,
            serialize=config.json_enabled,
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

    # Error log file (separate file for errors)
    if config.error_file_enabled:
        logger.add(
            config.error_file_path,
            format=FILE_FORMAT,
            level="ERROR",
            rotation="1 day",
            retention="7 days",
            compression=config.file_compression,
            backtrace=True,
            diagnose=False,
            enqueue=True,
        )

    logger.info("Logging system initialized")
    logger.info(f"Log level: {log_level}")
    logger.info(f"Console logging: {config.console_enabled}")
    logger.info(f"File logging: {config.file_enabled}")


def get_logger(name: Optional[str] = None):
    """
    Get logger instance with optional name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger instance
    """
    if name:
        return logger.bind(name=name)
    return logger


# ============================================================================
# ERROR CHAINS
# ============================================================================

def _message_of(error: BaseException) -> str:
    message = getattr(error, "message", None)
    if message:
        return str(message)
    return str(error) or error.__class__.__name__


def error_stack(error: BaseException) -> List[str]:
    """
    Flatten an exception and its causes into log lines.

    The first line is "Error: <message>", followed by one
    "-> Cause: <message>" line per wrapped exception, outermost first.
    Explicit ``cause`` attributes are followed before ``__cause__`` and
    ``__context__``.
    """
    lines = [f"Error: {_message_of(error)}"]
    seen = {id(error)}
    current = error

    while True:
        nxt = getattr(current, "cause", None) or current.__cause__
        if nxt is None and not current.__suppress_context__:
            nxt = current.__context__
        if nxt is None or id(nxt) in seen:
            break
        seen.add(id(nxt))
        lines.append(f"-> Cause: {_message_of(nxt)}")
        current = nxt

    return lines


# ============================================================================
# LOG DECORATORS
# ============================================================================

def log_execution_time(func):
    """
    Decorator to log function execution time.

    Args:
        func: Function to decorate

    Returns:
        Decorated function
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
            execution_time = time.perf_counter() - start_time
            logger.debug(
                f"Function {func.__name__} executed in {execution_time:.4f} seconds"
            )
            return result
        except Exception as e:
            execution_time = time.perf_counter() - start_time
            logger.debug(
                f"Function {func.__name__} failed after {execution_time:.4f} seconds: {e!r}"
            )
            raise

    return wrapper
