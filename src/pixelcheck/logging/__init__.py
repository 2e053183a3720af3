"""Logging module for pixelcheck."""

from .logger import (
    PerformanceLogger,
    SelectionLogger,
    get_logger,
    performance_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "SelectionLogger",
    "PerformanceLogger",
    "performance_logger",
]
