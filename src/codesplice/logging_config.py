"""
Centralized Logging Configuration

The core modules only ever call ``logging.getLogger(__name__)``; hosts decide
where the output goes by calling one of the helpers below.

Usage:
    from codesplice.logging_config import configure_logging, setup_structured_logging

    # Traditional logging
    configure_logging(log_level="DEBUG")

    # JSON logging (for services embedding the pipeline)
    setup_structured_logging()

Environment Variables:
    CODESPLICE_LOG_DIR - Directory for the optional log file
    CODESPLICE_LOG_LEVEL - Default log level, read through codesplice.config.settings
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import settings

LOGGER_NAME = "codesplice"

# Attributes every LogRecord has; anything else came in through ``extra=``
_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "message",
    "taskName",
}


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Each log entry includes timestamp, level, logger name, message, and any
    extra fields added to the log record.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted log string
        """
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def _resolve_level(log_level: Optional[str]) -> int:
    if log_level is None:
        log_level = settings.log_level
    return getattr(logging, log_level.upper(), logging.INFO)


def setup_structured_logging(log_level: Optional[str] = None) -> logging.Logger:
    """Configure structured JSON logging for the ``codesplice`` logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            defaults to settings.log_level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = _resolve_level(log_level)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter())
    handler.setLevel(level)
    logger.addHandler(handler)
    return logger


def configure_logging(
    log_level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    log_to_console: bool = True,
    log_to_file: bool = False,
    log_filename: Optional[str] = None,
) -> logging.Logger:
    """
    Configure logging for the ``codesplice`` package.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL);
            defaults to settings.log_level
        log_dir: Log directory (defaults to CODESPLICE_LOG_DIR or ./logs)
        log_to_console: Whether to log to console
        log_to_file: Whether to log to file
        log_filename: Custom log filename (defaults to a timestamped name)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()
    logger.setLevel(_resolve_level(log_level))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_to_file:
        if log_dir is None:
            log_dir = Path(os.environ.get("CODESPLICE_LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)

        if log_filename is None:
            log_filename = f"codesplice_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

        log_path = log_dir / log_filename
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        logger.info(f"Logging to: {log_path}")

    return logger
