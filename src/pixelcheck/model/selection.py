"""Selection targets: the closed set of things a capture can be taken of."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .geometry import ClientRect, PageRect


class SelectionMode(Enum):
    """How the user is picking the capture subject."""

    ELEMENT = "element"
    REGION = "region"
    FULL_SURFACE = "full_surface"


@dataclass(frozen=True)
class ElementTarget:
    """A single page element.

    Attributes:
        handle: Opaque node handle owned by the page surface
        rect: Element bounds in page coordinates at selection time
        client_rect: Element bounds relative to the viewport at selection time
    """

    handle: Any
    rect: PageRect
    client_rect: ClientRect


@dataclass(frozen=True)
class RegionTarget:
    """A user-drawn rectangle in page coordinates."""

    rect: PageRect


@dataclass(frozen=True)
class FullSurfaceTarget:
    """The whole visible viewport."""


SelectionTarget = Union[ElementTarget, RegionTarget, FullSurfaceTarget]
