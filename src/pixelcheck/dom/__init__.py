"""Page surfaces: the DOM and capture interfaces plus their implementations.

The Playwright-backed classes live in ``playwright_surface``, ``overlay`` and
``event_bridge`` and are imported from there directly.
"""

from .interfaces import (
    ELEMENT_HIGHLIGHTER,
    FLOATING_TOOLBAR,
    SELECTION_OVERLAY,
    TOOL_HOST_TAG,
    TOOL_MARKER_ATTRIBUTE,
    ICaptureSurface,
    IPageSurface,
    NodePosition,
    PageInfo,
)
from .virtual import (
    VirtualCaptureSurface,
    VirtualNode,
    VirtualPage,
    VirtualToolUI,
    install_tool_ui,
)

__all__ = [
    "IPageSurface",
    "ICaptureSurface",
    "NodePosition",
    "PageInfo",
    "TOOL_MARKER_ATTRIBUTE",
    "TOOL_HOST_TAG",
    "FLOATING_TOOLBAR",
    "SELECTION_OVERLAY",
    "ELEMENT_HIGHLIGHTER",
    "VirtualPage",
    "VirtualNode",
    "VirtualCaptureSurface",
    "VirtualToolUI",
    "install_tool_ui",
]
