"""Property comparison: tolerant matching of implementation vs reference styles."""

from .color import extract_color, is_color, parse_color
from .comparator import (
    compare_values,
    format_color_for_display,
    format_numeric_for_display,
    normalize_value,
)
from .properties import (
    CSS_PROPERTIES,
    compare_samples,
    extract_properties,
    samples_from_mapping,
)

__all__ = [
    "compare_values",
    "format_color_for_display",
    "format_numeric_for_display",
    "normalize_value",
    "is_color",
    "parse_color",
    "extract_color",
    "CSS_PROPERTIES",
    "extract_properties",
    "compare_samples",
    "samples_from_mapping",
]
