"""
Aspect normalizer.

Pads a crop to a canonical aspect ratio by re-centering it on a larger
canvas filled with a neutral color. Content pixels are never rescaled.
"""

from dataclasses import dataclass

import numpy as np

from ..compare.color import parse_color
from ..logging import get_logger

logger = get_logger(__name__)

DEFAULT_RATIO = 16 / 9
DEFAULT_MIN_FRAME = (300.0, 168.0)
DEFAULT_FILL = "#f3f4f6"


@dataclass(frozen=True, eq=False)
class PaddedImage:
    """A frame with the original content placed at ``offset``.

    Attributes:
        pixels: Padded RGBA frame
        offset_x: Device-pixel column where the content starts
        offset_y: Device-pixel row where the content starts
        content_width: Width of the unpadded content in device pixels
        content_height: Height of the unpadded content in device pixels
    """

    pixels: np.ndarray
    offset_x: int
    offset_y: int
    content_width: int
    content_height: int

    @property
    def offset(self) -> tuple[int, int]:
        return (self.offset_x, self.offset_y)

    def content(self) -> np.ndarray:
        """View of the original, unpadded pixels inside the frame."""
        return self.pixels[
            self.offset_y : self.offset_y + self.content_height,
            self.offset_x : self.offset_x + self.content_width,
        ]


def rgba_tuple(color: str) -> tuple[int, int, int, int]:
    """CSS color to an 8-bit RGBA tuple.

    Raises:
        ValueError: If the color cannot be parsed
    """
    parsed = parse_color(color)
    if parsed is None:
        raise ValueError(f"Unrecognized color: {color!r}")
    return (parsed.r, parsed.g, parsed.b, round(parsed.a * 255))


def frame_size(
    width: int,
    height: int,
    ratio: float = DEFAULT_RATIO,
    min_size: tuple[int, int] = (0, 0),
) -> tuple[int, int]:
    """Smallest frame of aspect ``ratio`` that holds ``width`` x ``height``.

    The wider axis keeps its size and the other is extended. ``min_size`` is
    a floor applied afterwards; the frame is only ever grown.
    """
    if width <= 0 or height <= 0:
        frame_width, frame_height = width, height
    elif width / height > ratio:
        frame_width, frame_height = width, round(width / ratio)
    else:
        frame_width, frame_height = round(height * ratio), height

    min_width, min_height = min_size
    frame_width = max(frame_width, min_width, width)
    frame_height = max(frame_height, min_height, height)
    return frame_width, frame_height


def normalize_aspect(
    pixels: np.ndarray,
    dpr: float = 1.0,
    ratio: float = DEFAULT_RATIO,
    min_frame: tuple[float, float] = DEFAULT_MIN_FRAME,
    fill: str = DEFAULT_FILL,
) -> PaddedImage:
    """Pad ``pixels`` to ``ratio`` and center them.

    Args:
        pixels: Cropped RGBA array at device resolution
        dpr: Device pixel ratio, used to scale the minimum frame
        ratio: Target width / height
        min_frame: Minimum frame size in logical pixels
        fill: CSS color of the padding

    Returns:
        PaddedImage with the content offset inside the frame
    """
    height, width = pixels.shape[:2]
    min_size = (round(min_frame[0] * dpr), round(min_frame[1] * dpr))
    frame_width, frame_height = frame_size(width, height, ratio, min_size)

    frame = np.empty((frame_height, frame_width, 4), dtype=np.uint8)
    frame[:, :] = rgba_tuple(fill)

    offset_x = (frame_width - width) // 2
    offset_y = (frame_height - height) // 2
    frame[offset_y : offset_y + height, offset_x : offset_x + width] = pixels

    logger.debug(
        "aspect_normalized",
        content=(width, height),
        frame=(frame_width, frame_height),
        offset=(offset_x, offset_y),
    )
    return PaddedImage(
        pixels=frame,
        offset_x=offset_x,
        offset_y=offset_y,
        content_width=width,
        content_height=height,
    )
