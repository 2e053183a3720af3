"""Capture exceptions.

Only ``CaptureUnavailable`` ever reaches a caller of the capture pipeline.
It is raised after the tool UI has been restored, never before.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from .base_exceptions import PixelCheckException


class CaptureException(PixelCheckException):
    """Base exception for capture pipeline errors."""

    pass


class CaptureUnavailable(CaptureException):
    """Raised when the privileged capture surface cannot be reached."""

    def __init__(self, reason: str, operation: str | None = None, **kwargs: Any) -> None:
        """Initialize with capture details."""
        message = "Capture surface unavailable"
        if operation is not None:
            message += f" during {operation}"
        message += f": {reason}"

        super().__init__(
            message,
            error_code="CAPTURE_UNAVAILABLE",
            context={"reason": reason, "operation": operation, **kwargs},
        )
        self.reason = reason


class BitmapDecodeError(CaptureException):
    """Raised when a captured payload is not a decodable image."""

    def __init__(self, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Could not decode captured bitmap: {reason}",
            error_code="BITMAP_DECODE_FAILED",
            context={"reason": reason, **kwargs},
        )


@contextmanager
def capture_error_context(operation: str, **details: Any) -> Iterator[None]:
    """Context manager that reports any foreign failure as ``CaptureUnavailable``.

    Usage:
        with capture_error_context("capture_visible", url=page.url):
            data = await page.screenshot()

    Args:
        operation: Capture operation being performed
        **details: Additional details about the operation

    Raises:
        CaptureUnavailable: Wraps exceptions with capture context
    """
    try:
        yield
    except PixelCheckException:
        raise
    except Exception as e:
        raise CaptureUnavailable(str(e) or type(e).__name__, operation=operation, **details) from e
