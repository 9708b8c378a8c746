#!/usr/bin/env python3
"""
ws-loadtest Logging Configuration

Centralized logging setup so every simulated client reports errors the same way.
Console output always; a log file only when LOADTEST_LOG_DIR is set.

Usage:
    from shared.log import get_logger

    logger = get_logger(__name__)
    logger.info("Starting load test...")
    logger.error("Connection refused", extra={"client": 7})
"""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Optional
import os


# ========================================
#           LOGGING FORMATTERS
# ========================================

class GenericFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        # Prefix with the simulated client index when the caller passed one
        client = getattr(record, 'client', None)
        if client is not None:
            return f"[client={client}] " + super().format(record)
        return super().format(record)


class ColoredFormatter(GenericFormatter):
    """Colored formatter for console output"""

    # ANSI Color codes
    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'       # Reset
    }

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


# ========================================
#           LOGGING CONFIGURATION
# ========================================

_loggers_configured = set()

DEFAULT_FORMAT = '[%(levelname)-8s][%(asctime)s][%(name)-5s]: %(message)s'


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger for the given module.

    Args:
        name: Usually __name__ from the calling module
        level: Override log level ("DEBUG", "INFO", "WARNING", "ERROR")

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Only configure each logger once
    if name not in _loggers_configured:
        _configure_logger(logger, level)
        _loggers_configured.add(name)

    return logger


def _configure_logger(logger: logging.Logger, level: Optional[str] = None) -> None:
    """Configure a logger with appropriate handlers and formatters"""

    logger.setLevel(_get_log_level(level))

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    _add_console_handler(logger, colored=True)
    log_dir = os.getenv('LOADTEST_LOG_DIR')
    if log_dir:
        _add_file_handler(logger, Path(log_dir))

    # Prevent duplicate messages from parent loggers
    logger.propagate = False


def _get_log_level(level: Optional[str] = None) -> int:
    """Determine appropriate log level"""

    level = level or os.getenv('LOADTEST_LOG_LEVEL')
    if level:
        return getattr(logging, level.upper(), logging.INFO)
    return logging.INFO


def _add_console_handler(logger: logging.Logger, colored: bool = True) -> None:
    """Add console handler with appropriate formatter"""

    handler = logging.StreamHandler(sys.stdout)

    if colored and _supports_color():
        formatter = ColoredFormatter(fmt=DEFAULT_FORMAT, datefmt='%H:%M:%S')
    else:
        formatter = GenericFormatter(fmt=DEFAULT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _add_file_handler(logger: logging.Logger, log_dir: Path) -> None:
    """Add file handler writing to <log_dir>/loadtest.log"""

    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / "loadtest.log")

    formatter = GenericFormatter(
        fmt='%(asctime)s | %(name)-30s | %(levelname)-8s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    handler.setFormatter(formatter)
    logger.addHandler(handler)


def _supports_color() -> bool:
    """Check if terminal supports color output"""

    # stdout must be a terminal
    if not (hasattr(sys.stdout, "isatty") and sys.stdout.isatty()):
        return False

    # TERM should not be dumb
    if os.getenv("TERM", "") == "dumb":
        return False

    if sys.platform == "win32":
        # On modern Windows terminals, ANSI colors are supported
        return os.getenv("ANSICON") is not None or os.getenv("WT_SESSION") is not None or os.getenv("TERM_PROGRAM") == "vscode"

    return True


# ========================================
#           CONVENIENCE FUNCTIONS
# ========================================

def set_level(level: str) -> None:
    """Apply a level to every logger handed out by get_logger so far."""
    log_level = _get_log_level(level)
    logging.getLogger().setLevel(log_level)
    for name in _loggers_configured:
        logging.getLogger(name).setLevel(log_level)
