"""Selection exceptions.

Expected edge conditions of selection (no element under the pointer, a drag
below the minimum size) are not exceptions; they are absorbed by the
hit-tester and the controller. What remains here are caller mistakes.
"""

from typing import Any

from .base_exceptions import PixelCheckException


class SelectionException(PixelCheckException):
    """Base exception for selection errors."""

    pass


class InvalidSelectionError(SelectionException):
    """Raised when a selection operation is requested in the wrong state."""

    def __init__(self, operation: str, state: str, **kwargs: Any) -> None:
        """Initialize with the rejected operation and the current state."""
        super().__init__(
            f"Cannot {operation} while selection is {state}",
            error_code="INVALID_SELECTION_STATE",
            context={"operation": operation, "state": state, **kwargs},
        )
