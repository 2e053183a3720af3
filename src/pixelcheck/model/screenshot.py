"""Bitmap and screenshot models produced by the capture pipeline."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

import numpy as np


class CaptureKind(Enum):
    """What a screenshot was taken of."""

    ELEMENT = "element"
    REGION = "region"
    FULL_SURFACE = "full_surface"


@dataclass(frozen=True)
class PageMetadata:
    """Descriptive facts about the page a screenshot came from."""

    url: str
    device_class: str
    browser_name: str
    screen_resolution: str
    viewport_size: str

    def to_dict(self) -> dict[str, str]:
        return {
            "url": self.url,
            "device_class": self.device_class,
            "browser_name": self.browser_name,
            "screen_resolution": self.screen_resolution,
            "viewport_size": self.viewport_size,
        }


@dataclass(frozen=True, eq=False)
class DeviceBitmap:
    """RGBA pixels at device resolution.

    Attributes:
        pixels: ``(height, width, 4)`` uint8 array
        device_pixel_ratio: Device pixels per logical pixel
    """

    pixels: np.ndarray
    device_pixel_ratio: float = 1.0

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def logical_width(self) -> float:
        return self.width / self.device_pixel_ratio

    @property
    def logical_height(self) -> float:
        return self.height / self.device_pixel_ratio


@dataclass(frozen=True, eq=False)
class Screenshot:
    """One finished capture, ready to be encoded or attached."""

    pixels: np.ndarray
    kind: CaptureKind
    page_metadata: PageMetadata
    highlighted: bool = False
    device_pixel_ratio: float = 1.0
    captured_at: datetime = field(default_factory=datetime.now)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def to_png(self) -> bytes:
        from ..imaging.codec import encode_png

        return encode_png(self.pixels)

    def to_data_url(self) -> str:
        from ..imaging.codec import to_data_url

        return to_data_url(self.pixels)

    def to_dict(self) -> dict[str, Any]:
        """Metadata view without the pixel payload."""
        return {
            "kind": self.kind.value,
            "width": self.width,
            "height": self.height,
            "highlighted": self.highlighted,
            "device_pixel_ratio": self.device_pixel_ratio,
            "captured_at": self.captured_at.isoformat(),
            "page_metadata": self.page_metadata.to_dict(),
        }
