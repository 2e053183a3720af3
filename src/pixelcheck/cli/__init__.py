"""pixelcheck Command Line Interface.

Provides CLI commands for:
- Comparing a single pair of style values
- Comparing implementation and reference property maps from a JSON file
- Capturing an element, region or the viewport of a web page

Usage:
    python -m pixelcheck.cli --help
    python -m pixelcheck.cli compare "16px" "16"
    python -m pixelcheck.cli capture https://example.com --selector "#hero"

Or via the installed entry point:
    pixelcheck --help
"""

from .main import main

__all__ = ["main"]
