"""pixelcheck: pixel-accurate element capture and style comparison for web pages.

Select an element or region on a live page, capture it without the tool's
own UI in the picture, and compare computed styles against reference values
with per-class tolerances.
"""

from .capture import CaptureOrchestrator, UISuppressor, describe_page, element_target
from .compare import compare_samples, compare_values, extract_properties, samples_from_mapping
from .config import PixelCheckSettings, get_settings
from .dom import ICaptureSurface, IPageSurface, VirtualCaptureSurface, VirtualPage
from .exceptions import (
    BitmapDecodeError,
    CaptureException,
    CaptureUnavailable,
    InvalidSelectionError,
    PixelCheckException,
    SelectionException,
)
from .model import (
    ComparisonResult,
    ElementTarget,
    FullSurfaceTarget,
    PageRect,
    RegionTarget,
    Screenshot,
    SelectionMode,
    ViewportState,
)
from .selection import HitTester, SelectionController, SelectionSession, SelectionState

__version__ = "0.1.0"

__all__ = [
    # Selection
    "SelectionController",
    "SelectionSession",
    "SelectionState",
    "HitTester",
    "SelectionMode",
    "ElementTarget",
    "RegionTarget",
    "FullSurfaceTarget",
    # Capture
    "CaptureOrchestrator",
    "UISuppressor",
    "describe_page",
    "element_target",
    "Screenshot",
    # Comparison
    "compare_values",
    "compare_samples",
    "extract_properties",
    "samples_from_mapping",
    "ComparisonResult",
    # Surfaces
    "IPageSurface",
    "ICaptureSurface",
    "VirtualPage",
    "VirtualCaptureSurface",
    # Geometry
    "PageRect",
    "ViewportState",
    # Config
    "PixelCheckSettings",
    "get_settings",
    # Exceptions
    "PixelCheckException",
    "CaptureException",
    "CaptureUnavailable",
    "BitmapDecodeError",
    "SelectionException",
    "InvalidSelectionError",
]
