"""Utilities for the reminder service."""

from .logger import get_logger, log_operation, logger, mask_destination, setup_logger

__all__ = [
    "get_logger",
    "log_operation",
    "logger",
    "mask_destination",
    "setup_logger",
]
