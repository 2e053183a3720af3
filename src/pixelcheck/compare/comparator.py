"""
Tolerant comparison of CSS property values.

Compares an implementation value with a reference (design) value, deciding
equivalence by value class: exact text, colors, numbers with units, and
font-family lists. Comparison is pure and never raises; anything that cannot
be classified comes back as a non-match with zero confidence.
"""

import math
import re

from ..model.properties import ComparisonResult, ValueClass, format_number
from .color import is_color, parse_color

COLOR_CHANNEL_TOLERANCE = 2
COLOR_ALPHA_TOLERANCE = 0.01
NUMERIC_RELATIVE_TOLERANCE = 0.02
NUMERIC_MIN_TOLERANCE = 1.0

COLOR_CONFIDENCE = 0.95
NUMERIC_CONFIDENCE = 0.9
FONT_FAMILY_CONFIDENCE = 0.8

_UNITS = "px|em|rem|%|vh|vw|pt|pc|in|mm|cm|ex|ch|vmin|vmax"
_NUMERIC_PATTERN = re.compile(rf"^(-?\d*\.?\d+)({_UNITS})?$")
_WHITESPACE = re.compile(r"\s+")
_HAS_LETTER = re.compile(r"[a-zA-Z]")


def normalize_value(value: str) -> str:
    """Trim, lowercase and collapse whitespace."""
    return _WHITESPACE.sub(" ", value.strip().lower())


def is_numeric(value: str) -> bool:
    return _NUMERIC_PATTERN.match(value.strip()) is not None


def is_font_family(value: str) -> bool:
    return bool(_HAS_LETTER.search(value)) and not is_color(value) and not is_numeric(value)


def parse_numeric(value: str) -> tuple[float, str] | None:
    """Split ``"12.5px"`` into ``(12.5, "px")``; None when not numeric."""
    match = _NUMERIC_PATTERN.match(value.strip())
    if not match:
        return None
    return float(match.group(1)), match.group(2) or ""


def _round_half_up(value: float, precision: int) -> float:
    factor = 10**precision
    return math.floor(value * factor + 0.5) / factor


def extract_font_names(font_family: str) -> list[str]:
    names = (part.strip().replace('"', "").replace("'", "") for part in font_family.split(","))
    return [name for name in names if name]


def _compare_colors(left: str, right: str) -> ComparisonResult | None:
    """Color comparison; None when either side only looks like a color."""
    left_rgba = parse_color(left)
    right_rgba = parse_color(right)
    if left_rgba is None or right_rgba is None:
        return None

    is_match = (
        abs(left_rgba.r - right_rgba.r) <= COLOR_CHANNEL_TOLERANCE
        and abs(left_rgba.g - right_rgba.g) <= COLOR_CHANNEL_TOLERANCE
        and abs(left_rgba.b - right_rgba.b) <= COLOR_CHANNEL_TOLERANCE
        # tiny epsilon so 0.5 vs 0.51 is not lost to float error
        and abs(left_rgba.a - right_rgba.a) <= COLOR_ALPHA_TOLERANCE + 1e-9
    )
    return ComparisonResult(
        is_match,
        left_rgba.to_css(),
        right_rgba.to_css(),
        COLOR_CONFIDENCE if is_match else 0.0,
        ValueClass.COLOR,
    )


def _compare_numeric(left: str, right: str) -> ComparisonResult:
    left_num = parse_numeric(left)
    right_num = parse_numeric(right)
    if left_num is None or right_num is None:
        return ComparisonResult(False, left, right, 0.0, ValueClass.NUMERIC)

    # Judge the reported two-decimal values so re-comparing them agrees
    left_value, left_unit = _round_half_up(left_num[0], 2), left_num[1]
    right_value, right_unit = _round_half_up(right_num[0], 2), right_num[1]
    # Units are not converted: 16 and 16px compare equal
    tolerance = max(NUMERIC_MIN_TOLERANCE, abs(left_value) * NUMERIC_RELATIVE_TOLERANCE)
    is_match = abs(left_value - right_value) <= tolerance
    return ComparisonResult(
        is_match,
        f"{format_number(left_value)}{left_unit}",
        f"{format_number(right_value)}{right_unit}",
        NUMERIC_CONFIDENCE if is_match else 0.0,
        ValueClass.NUMERIC,
    )


def _compare_font_families(left: str, right: str) -> ComparisonResult:
    left_fonts = extract_font_names(left)
    right_fonts = extract_font_names(right)
    right_lower = {font.lower() for font in right_fonts}
    has_match = any(font.lower() in right_lower for font in left_fonts)
    return ComparisonResult(
        has_match,
        ", ".join(left_fonts),
        ", ".join(right_fonts),
        FONT_FAMILY_CONFIDENCE if has_match else 0.0,
        ValueClass.FONT_FAMILY,
    )


def compare_values(left: str | None, right: str | None) -> ComparisonResult:
    """Compare an implementation value against a reference value.

    Args:
        left: Implementation value (e.g. a computed style)
        right: Reference value (e.g. from a design file)

    Returns:
        ComparisonResult with normalized forms and a confidence in [0, 1]
    """
    if not left or not right:
        return ComparisonResult(False, left or "", right or "", 0.0, ValueClass.EMPTY)

    normalized_left = normalize_value(left)
    normalized_right = normalize_value(right)
    if normalized_left == normalized_right:
        return ComparisonResult(True, normalized_left, normalized_right, 1.0, ValueClass.EXACT)

    if is_color(left) and is_color(right):
        color_result = _compare_colors(left, right)
        if color_result is not None:
            return color_result

    if is_numeric(left) and is_numeric(right):
        return _compare_numeric(left, right)

    if is_font_family(left) and is_font_family(right):
        return _compare_font_families(left, right)

    return ComparisonResult(False, normalized_left, normalized_right, 0.0, ValueClass.UNKNOWN)


def format_color_for_display(value: str, mode: str = "absolute") -> str:
    """Render a color as ``rgba(...)`` in absolute mode; other text passes through."""
    if mode != "absolute" or not is_color(value):
        return value
    parsed = parse_color(value)
    return parsed.to_css() if parsed is not None else value


def format_numeric_for_display(value: str, precision: int = 2) -> str:
    parsed = parse_numeric(value)
    if parsed is None:
        return value
    number, unit = parsed
    return f"{format_number(_round_half_up(number, precision))}{unit}"
