"""Highlight compositing with OpenCV."""

from dataclasses import dataclass

import cv2
import numpy as np

from ..model.geometry import PageRect
from .aspect import rgba_tuple

DEFAULT_FILL = "rgba(59, 130, 246, 0.2)"
DEFAULT_BORDER = "#3b82f6"
DEFAULT_BORDER_WIDTH = 3.0


@dataclass(frozen=True)
class HighlightBox:
    """Highlight rectangle in device pixels of the final frame."""

    x: float
    y: float
    width: float
    height: float


def highlight_box(
    element_rect: PageRect,
    crop_rect: PageRect,
    padding_offset: tuple[int, int],
    dpr: float,
) -> HighlightBox:
    """Place the element inside a padded frame.

    The element's offset inside the crop is measured in page coordinates and
    then shifted by the padding offset, since padding moves the frame origin.

    Args:
        element_rect: Element bounds in page coordinates
        crop_rect: Area that was cropped, in page coordinates
        padding_offset: Content offset inside the padded frame, device pixels
        dpr: Device pixel ratio
    """
    return HighlightBox(
        x=padding_offset[0] + (element_rect.x - crop_rect.x) * dpr,
        y=padding_offset[1] + (element_rect.y - crop_rect.y) * dpr,
        width=element_rect.width * dpr,
        height=element_rect.height * dpr,
    )


def draw_highlight(
    pixels: np.ndarray,
    box: HighlightBox,
    dpr: float = 1.0,
    fill: str = DEFAULT_FILL,
    border: str = DEFAULT_BORDER,
    border_width: float = DEFAULT_BORDER_WIDTH,
) -> np.ndarray:
    """Return a copy of ``pixels`` with a translucent box and solid border.

    The input array is never modified.
    """
    output = np.ascontiguousarray(pixels, dtype=np.uint8).copy()
    height, width = output.shape[:2]

    x1 = round(box.x)
    y1 = round(box.y)
    x2 = round(box.x + box.width)
    y2 = round(box.y + box.height)

    fill_r, fill_g, fill_b, fill_a = rgba_tuple(fill)
    alpha = fill_a / 255
    left, top = max(x1, 0), max(y1, 0)
    right, bottom = min(x2, width), min(y2, height)
    if right > left and bottom > top and alpha > 0:
        roi = output[top:bottom, left:right]
        tint = np.empty_like(roi)
        tint[:, :] = (fill_r, fill_g, fill_b, 255)
        output[top:bottom, left:right] = cv2.addWeighted(tint, alpha, roi, 1 - alpha, 0)

    thickness = max(1, round(border_width * dpr))
    cv2.rectangle(output, (x1, y1), (x2 - 1, y2 - 1), rgba_tuple(border), thickness)
    return output
