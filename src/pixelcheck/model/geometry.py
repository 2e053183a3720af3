"""
Geometry models shared by selection, capture and imaging.

Two coordinate spaces are in play: client (viewport-relative, what
``getBoundingClientRect`` reports) and page (client plus the current scroll
offset). Device pixels are page/client values multiplied by the device pixel
ratio and only appear inside the imaging package.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Point:
    """A 2D point in logical pixels."""

    x: float
    y: float


@dataclass(frozen=True)
class ClientRect:
    """Viewport-relative rectangle."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains_point(self, x: float, y: float) -> bool:
        """Inclusive bounds test, as used for the floating toolbar fallback."""
        return self.x <= x <= self.right and self.y <= y <= self.bottom

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClientRect":
        return cls(
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            height=float(data["height"]),
        )


@dataclass(frozen=True)
class PageRect:
    """Rectangle in page coordinates. Width and height are never negative."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"PageRect dimensions must be non-negative, got {self.width}x{self.height}"
            )

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def area(self) -> float:
        return self.width * self.height

    def grow(self, margin: float) -> "PageRect":
        """Expand on every side by ``margin`` logical pixels."""
        return PageRect(
            self.x - margin,
            self.y - margin,
            self.width + 2 * margin,
            self.height + 2 * margin,
        )

    def translate(self, dx: float, dy: float) -> "PageRect":
        return PageRect(self.x + dx, self.y + dy, self.width, self.height)

    def intersection(self, other: "PageRect") -> "PageRect | None":
        """Overlapping area of two rectangles, or None when they are disjoint."""
        left = max(self.x, other.x)
        top = max(self.y, other.y)
        right = min(self.right, other.right)
        bottom = min(self.bottom, other.bottom)
        if right <= left or bottom <= top:
            return None
        return PageRect(left, top, right - left, bottom - top)

    def to_client(self, scroll_x: float, scroll_y: float) -> ClientRect:
        return ClientRect(self.x - scroll_x, self.y - scroll_y, self.width, self.height)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_points(cls, a: Point, b: Point) -> "PageRect":
        """Normalized rectangle spanning two corner points in any order."""
        return cls(
            x=min(a.x, b.x),
            y=min(a.y, b.y),
            width=abs(b.x - a.x),
            height=abs(b.y - a.y),
        )

    @classmethod
    def from_client(cls, rect: ClientRect, scroll_x: float, scroll_y: float) -> "PageRect":
        return cls(rect.x + scroll_x, rect.y + scroll_y, max(rect.width, 0), max(rect.height, 0))


@dataclass(frozen=True)
class ViewportState:
    """Scroll offset, viewport size and pixel density of the page at one moment."""

    scroll_x: float
    scroll_y: float
    width: float
    height: float
    device_pixel_ratio: float = 1.0
    screen_width: int = 0
    screen_height: int = 0

    @property
    def visible_rect(self) -> PageRect:
        """Page-coordinate rectangle currently on screen."""
        return PageRect(self.scroll_x, self.scroll_y, self.width, self.height)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ViewportState":
        return cls(
            scroll_x=float(data.get("scrollX", 0)),
            scroll_y=float(data.get("scrollY", 0)),
            width=float(data["width"]),
            height=float(data["height"]),
            device_pixel_ratio=float(data.get("devicePixelRatio", 1) or 1),
            screen_width=int(data.get("screenWidth", 0)),
            screen_height=int(data.get("screenHeight", 0)),
        )
