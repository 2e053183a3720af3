"""Data models for pixelcheck."""

from .geometry import ClientRect, PageRect, Point, ViewportState
from .properties import (
    ColorComponents,
    ComparisonResult,
    PropertyComparison,
    PropertyOrigin,
    PropertySample,
    ValueClass,
)
from .screenshot import CaptureKind, DeviceBitmap, PageMetadata, Screenshot
from .selection import (
    ElementTarget,
    FullSurfaceTarget,
    RegionTarget,
    SelectionMode,
    SelectionTarget,
)

__all__ = [
    "Point",
    "ClientRect",
    "PageRect",
    "ViewportState",
    "SelectionMode",
    "SelectionTarget",
    "ElementTarget",
    "RegionTarget",
    "FullSurfaceTarget",
    "CaptureKind",
    "DeviceBitmap",
    "PageMetadata",
    "Screenshot",
    "ColorComponents",
    "ComparisonResult",
    "PropertyComparison",
    "PropertyOrigin",
    "PropertySample",
    "ValueClass",
]
