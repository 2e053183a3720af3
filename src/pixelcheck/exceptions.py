"""Exception hierarchy for pixelcheck.

This module re-exports all exceptions from domain-specific modules
for convenience.
"""

from .base_exceptions import PixelCheckException
from .capture_exceptions import (
    BitmapDecodeError,
    CaptureException,
    CaptureUnavailable,
    capture_error_context,
)
from .selection_exceptions import InvalidSelectionError, SelectionException

__all__ = [
    "PixelCheckException",
    "CaptureException",
    "CaptureUnavailable",
    "BitmapDecodeError",
    "capture_error_context",
    "SelectionException",
    "InvalidSelectionError",
]
