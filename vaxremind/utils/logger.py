"""Logging configuration and utilities for the reminder service."""

import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger


def setup_logger(
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    logs_dir: Optional[Path] = None,
) -> None:
    """Configure loguru logger with console and file outputs.

    Sets up structured logging with:
    - Console output with colors and proper formatting
    - File output with daily rotation, 30-day retention, and compression
    - Different log levels for console (INFO) and file (DEBUG)

    Args:
        console_level: Log level for console output (default: INFO)
        file_level: Log level for file output (default: DEBUG)
        logs_dir: Directory for log files (default: project_root/logs)
    """
    # Remove default handler
    logger.remove()

    # Console handler with colors and formatting
    logger.add(
        sys.stderr,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        ),
        level=console_level,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    # Ensure logs directory exists
    if logs_dir is None:
        logs_dir = Path(__file__).parent.parent.parent / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    # File handler with rotation and compression
    logger.add(
        logs_dir / "reminders_{time:YYYY-MM-DD}.log",
        format=(
            "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{name}:{function}:{line} | "
            "{message}"
        ),
        level=file_level,
        rotation="00:00",  # Rotate at midnight
        retention="30 days",
        compression="zip",
        backtrace=True,
        diagnose=False,
        enqueue=True,  # Thread-safe logging
    )

    logger.info("Logger configured successfully")
    logger.debug(f"Console log level: {console_level}")
    logger.debug(f"File log level: {file_level}")
    logger.debug(f"Logs directory: {logs_dir}")


def log_operation(operation: str, **fields: Any) -> None:
    """Log a structured operation record.

    Fields are bound to the record so file sinks and serializers can
    pick them up, and rendered in the message for the console.

    Args:
        operation: Operation name (e.g. "reminder_run", "delivery")
        **fields: Key/value context for the operation
    """
    rendered = ", ".join(f"{key}={value}" for key, value in fields.items())
    logger.bind(operation=operation, **fields).info(f"[{operation}] {rendered}")


def mask_destination(destination: Optional[str]) -> str:
    """Mask a phone number or email address for logs.

    Examples:
        >>> mask_destination("+254712345678")
        '+25471*****78'
        >>> mask_destination("jane.doe@example.com")
        'j***@example.com'
    """
    if not destination:
        return "<none>"
    if "@" in destination:
        local, _, domain = destination.partition("@")
        return f"{local[:1]}***@{domain}"
    if len(destination) <= 4:
        return "*" * len(destination)
    visible = max(len(destination) - 7, 2)
    return destination[:visible] + "*" * (len(destination) - visible - 2) + destination[-2:]


def get_logger():
    """Get the configured logger instance."""
    return logger


__all__ = ["setup_logger", "get_logger", "log_operation", "mask_destination", "logger"]
