"""Configuration management for pixelcheck using pydantic-settings.

Supports environment variables (``PIXELCHECK_`` prefix), ``.env`` files and
type validation. Every tunable constant of the capture-and-compare pipeline
lives here so tests and the CLI can override it in one place.
"""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PixelCheckSettings(BaseSettings):
    """Main configuration settings for pixelcheck."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PIXELCHECK_",
        case_sensitive=False,
        extra="forbid",
    )

    # Core settings
    debug_mode: bool = Field(False, description="Enable debug logging and features")
    log_level: str = Field("INFO", description="Log level when debug mode is off")
    log_path: Path = Field(Path("./logs"), description="Directory for log files")
    log_to_file: bool = Field(False, description="Write a daily log file under log_path")

    # Selection settings
    min_region_size: float = Field(
        10.0, ge=0.0, description="Region drags must exceed this many logical px on both axes"
    )
    frame_interval: float = Field(
        1 / 60, gt=0.0, description="Seconds between coalesced hit tests (one animation frame)"
    )
    toolbar_grace_period: float = Field(
        0.25, ge=0.0, description="Seconds pointer events are ignored after a toolbar click"
    )

    # Capture settings
    element_margin: float = Field(
        40.0, ge=0.0, description="Logical px of context captured around a selected element"
    )
    clip_element_to_viewport: bool = Field(
        True, description="Clip element capture areas to the visible viewport"
    )
    settle_delay: float = Field(
        0.025, ge=0.0, description="Seconds to wait between UI suppression and the grab"
    )
    suppression_z_index: int = Field(
        999999, description="Fixed/absolute nodes at or above this z-index are hidden for capture"
    )
    normalize_regions: bool = Field(
        False, description="Pad region captures to the canonical aspect ratio as well"
    )

    # Aspect normalization and highlight settings
    aspect_width: int = Field(16, gt=0, description="Canonical frame aspect ratio numerator")
    aspect_height: int = Field(9, gt=0, description="Canonical frame aspect ratio denominator")
    min_frame_width: float = Field(300.0, ge=0.0, description="Minimum frame width in logical px")
    min_frame_height: float = Field(
        168.0, ge=0.0, description="Minimum frame height in logical px"
    )
    padding_color: str = Field("#f3f4f6", description="Fill color for aspect padding")
    highlight_fill: str = Field(
        "rgba(59, 130, 246, 0.2)", description="Translucent fill of the highlight rectangle"
    )
    highlight_border: str = Field("#3b82f6", description="Border color of the highlight rectangle")
    highlight_border_width: float = Field(
        3.0, gt=0.0, description="Highlight border width in logical px"
    )

    @property
    def aspect_ratio(self) -> float:
        """Canonical frame aspect ratio as a float."""
        return self.aspect_width / self.aspect_height


class DevelopmentSettings(PixelCheckSettings):
    """Development-specific settings."""

    model_config = SettingsConfigDict(env_file=".env.development")

    debug_mode: bool = True
    log_level: str = "DEBUG"


class ProductionSettings(PixelCheckSettings):
    """Production-specific settings."""

    model_config = SettingsConfigDict(env_file=".env.production")

    debug_mode: bool = False
    log_level: str = "INFO"


class TestSettings(PixelCheckSettings):
    """Test-specific settings."""

    model_config = SettingsConfigDict(env_file=".env.test")

    settle_delay: float = 0.0
    log_path: Path = Path("./test_logs")


# Singleton instance
_settings: PixelCheckSettings | None = None


def get_settings(env: str | None = None) -> PixelCheckSettings:
    """Get the singleton settings instance.

    Args:
        env: Environment name ('development', 'production', 'test')

    Returns:
        PixelCheckSettings instance
    """
    global _settings

    if _settings is None:
        env_name = env or os.getenv("PIXELCHECK_ENV", "production")
        if env_name == "development":
            _settings = DevelopmentSettings()
        elif env_name == "production":
            _settings = ProductionSettings()
        elif env_name == "test":
            _settings = TestSettings()
        else:
            _settings = PixelCheckSettings()

    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None
