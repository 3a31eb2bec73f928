"""
Logging Configuration for dts.

Provides centralized logger setup. Modules log through
``logging.getLogger(__name__)``; this module attaches handlers to the
``dts`` package logger and to the debug trace logger.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# Log directory priority:
# 1. DTS_LOG_DIR (explicit)
# 2. CWD/.dts
def _get_log_directory() -> Path:
    """Get the log directory path."""
    log_dir = os.getenv("DTS_LOG_DIR")
    if not log_dir:
        log_dir = os.path.join(os.getcwd(), ".dts")
    return Path(log_dir)


def _ensure_log_directory() -> Path:
    """Ensure log directory exists and return its path."""
    log_dir = _get_log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def debug_log_enabled() -> bool:
    """File logging is enabled when DTS_DEBUG_LOG is set to a non-empty value."""
    return bool(os.getenv("DTS_DEBUG_LOG"))


def _get_log_level() -> int:
    """Resolve DTS_LOG_LEVEL (a level name such as DEBUG), default WARNING."""
    name = os.getenv("DTS_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def _create_file_handler(log_filename: str) -> Optional[logging.FileHandler]:
    """
    Create a file handler for the specified log file.

    Args:
        log_filename: Name of the log file (e.g., 'debug_trace.log')

    Returns:
        Configured FileHandler, or None if file logging is disabled
    """
    if not debug_log_enabled():
        return None

    log_path = _ensure_log_directory() / log_filename
    handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


class FlushingStreamHandler(logging.StreamHandler):
    """StreamHandler that flushes after every emit."""
    def emit(self, record):
        super().emit(record)
        self.flush()


def _create_stderr_handler(level: int) -> logging.StreamHandler:
    """Create a stderr handler for console output with auto-flush."""
    handler = FlushingStreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging() -> logging.Logger:
    """
    Configure the ``dts`` package logger from the environment.

    Safe to call repeatedly; handlers are only attached once.

    Returns:
        The configured ``dts`` logger
    """
    logger = logging.getLogger("dts")

    if not logger.handlers:
        level = _get_log_level()
        logger.setLevel(level)
        logger.addHandler(_create_stderr_handler(level))

    return logger


def get_debug_trace_logger() -> logging.Logger:
    """
    Get the debug trace logger.

    Used to trace pipeline compilation and chain execution. Output goes to
    .dts/debug_trace.log (when DTS_DEBUG_LOG is set) and stderr.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("dts.debug_trace")

    # Only configure once
    if not logger.handlers:
        logger.setLevel(logging.DEBUG)
        logger.propagate = False  # Don't propagate to the package logger

        file_handler = _create_file_handler("debug_trace.log")
        if file_handler:
            logger.addHandler(file_handler)

        logger.addHandler(_create_stderr_handler(logging.DEBUG))

    return logger


def configure_logger_for_debug_trace(logger_name: str) -> logging.Logger:
    """
    Configure a logger to also write to the debug trace handlers.

    Args:
        logger_name: Name of the logger to configure (e.g., __name__)

    Returns:
        Configured logger instance
    """
    debug_trace_logger = get_debug_trace_logger()
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)  # Enable all log levels
    for handler in debug_trace_logger.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    return logger
