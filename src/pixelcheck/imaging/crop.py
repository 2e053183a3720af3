"""
Crop engine.

Maps a page-coordinate rectangle into device pixels inside a viewport grab
and copies the covered pixels out unscaled. Source rectangles that fall
partly or fully outside the grab are clamped to its edges; the uncovered part
of the destination stays transparent.
"""

from dataclasses import dataclass

import numpy as np

from ..logging import get_logger
from ..model.geometry import PageRect, ViewportState
from ..model.screenshot import DeviceBitmap

logger = get_logger(__name__)


@dataclass(frozen=True)
class SourceRect:
    """Integer rectangle in device pixels of the raw grab."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True, eq=False)
class CropResult:
    """Cropped pixels plus the bookkeeping needed to place overlays on them.

    Attributes:
        pixels: Destination RGBA array sized to the requested rect
        requested: Source rectangle before clamping
        clamped: Portion of ``requested`` that lies inside the grab
        device_pixel_ratio: Ratio used for the mapping
    """

    pixels: np.ndarray
    requested: SourceRect
    clamped: SourceRect
    device_pixel_ratio: float

    @property
    def destination_offset(self) -> tuple[int, int]:
        """Where the clamped pixels start inside the destination."""
        return (self.clamped.x - self.requested.x, self.clamped.y - self.requested.y)


def source_rect(rect: PageRect, scroll: tuple[float, float], dpr: float) -> SourceRect:
    """Device-pixel sampling rectangle for ``rect`` given the scroll offset."""
    scroll_x, scroll_y = scroll
    return SourceRect(
        x=round((rect.x - scroll_x) * dpr),
        y=round((rect.y - scroll_y) * dpr),
        width=round(rect.width * dpr),
        height=round(rect.height * dpr),
    )


def clamp_rect(rect: SourceRect, width: int, height: int) -> SourceRect:
    """Clip ``rect`` to ``[0, width] x [0, height]``; may come back empty."""
    left = min(max(rect.x, 0), width)
    top = min(max(rect.y, 0), height)
    right = max(min(rect.right, width), left)
    bottom = max(min(rect.bottom, height), top)
    return SourceRect(left, top, right - left, bottom - top)


def crop_bitmap(bitmap: DeviceBitmap, rect: PageRect, viewport: ViewportState) -> CropResult:
    """Crop ``rect`` out of a viewport grab.

    Args:
        bitmap: Raw grab of the visible viewport at device resolution
        rect: Area to crop, in page coordinates
        viewport: Scroll offset at grab time

    Returns:
        CropResult whose pixels are exactly ``rect`` times the device pixel ratio
    """
    dpr = bitmap.device_pixel_ratio
    requested = source_rect(rect, (viewport.scroll_x, viewport.scroll_y), dpr)
    clamped = clamp_rect(requested, bitmap.width, bitmap.height)

    destination = np.zeros((max(requested.height, 0), max(requested.width, 0), 4), dtype=np.uint8)
    if not clamped.is_empty:
        offset_x = clamped.x - requested.x
        offset_y = clamped.y - requested.y
        destination[
            offset_y : offset_y + clamped.height, offset_x : offset_x + clamped.width
        ] = bitmap.pixels[clamped.y : clamped.bottom, clamped.x : clamped.right]

    if clamped != requested:
        logger.debug(
            "crop_clamped",
            requested=(requested.x, requested.y, requested.width, requested.height),
            clamped=(clamped.x, clamped.y, clamped.width, clamped.height),
        )

    return CropResult(
        pixels=destination, requested=requested, clamped=clamped, device_pixel_ratio=dpr
    )
