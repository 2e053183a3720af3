"""Configuration package.

Usage:
    from pixelcheck.config import get_settings

    settings = get_settings()
    margin = settings.element_margin
"""

from .settings import (
    DevelopmentSettings,
    PixelCheckSettings,
    ProductionSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "PixelCheckSettings",
    "DevelopmentSettings",
    "ProductionSettings",
    "get_settings",
    "reset_settings",
]
