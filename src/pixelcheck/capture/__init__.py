"""Capture: UI suppression, the capture bracket and page metadata."""

from .metadata import describe_page, detect_browser, detect_device_class
from .orchestrator import CaptureOrchestrator, element_target
from .suppression import HIDDEN_STYLES, SuppressionCommand, UISuppressor

__all__ = [
    "CaptureOrchestrator",
    "element_target",
    "UISuppressor",
    "SuppressionCommand",
    "HIDDEN_STYLES",
    "describe_page",
    "detect_browser",
    "detect_device_class",
]
