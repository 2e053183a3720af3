"""Compose a capture with an annotation layer drawn on top of it."""

import cv2
import numpy as np
from PIL import Image


def compose_annotated(base: np.ndarray, overlay: np.ndarray | None = None) -> np.ndarray:
    """Alpha-composite ``overlay`` over ``base``.

    When an overlay is given the result takes the overlay's size, so the base
    is resized to match it; without one a copy of the base comes back.
    """
    if overlay is None or overlay.shape[0] == 0 or overlay.shape[1] == 0:
        return base.copy()

    target_height, target_width = overlay.shape[:2]
    if base.shape[:2] != (target_height, target_width):
        base = cv2.resize(base, (target_width, target_height), interpolation=cv2.INTER_LINEAR)

    composed = Image.alpha_composite(
        Image.fromarray(np.ascontiguousarray(base, dtype=np.uint8)),
        Image.fromarray(np.ascontiguousarray(overlay, dtype=np.uint8)),
    )
    return np.array(composed, dtype=np.uint8)
