"""CSS color recognition and parsing.

Supports hex (3, 4, 6 and 8 digits), ``rgb()``/``rgba()`` in comma or
space syntax, ``hsl()``/``hsla()`` and a small table of named colors.
"""

import colorsys
import re

from ..model.properties import ColorComponents

NAMED_COLORS: dict[str, ColorComponents] = {
    "transparent": ColorComponents(0, 0, 0, 0.0),
    "black": ColorComponents(0, 0, 0),
    "white": ColorComponents(255, 255, 255),
    "red": ColorComponents(255, 0, 0),
    "green": ColorComponents(0, 128, 0),
    "blue": ColorComponents(0, 0, 255),
    "yellow": ColorComponents(255, 255, 0),
    "orange": ColorComponents(255, 165, 0),
    "purple": ColorComponents(128, 0, 128),
    "pink": ColorComponents(255, 192, 203),
    "gray": ColorComponents(128, 128, 128),
    "grey": ColorComponents(128, 128, 128),
}

_HEX_PATTERN = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$")
_RGB_PATTERN = re.compile(
    r"^rgba?\(\s*(\d+(?:\.\d+)?)\s*[,\s]\s*(\d+(?:\.\d+)?)\s*[,\s]\s*(\d+(?:\.\d+)?)"
    r"\s*(?:[,/]\s*(\d*\.?\d+)(%?))?\s*\)$"
)
_HSL_PATTERN = re.compile(
    r"^hsla?\(\s*(-?\d*\.?\d+)(?:deg)?\s*[,\s]\s*(\d*\.?\d+)%\s*[,\s]\s*(\d*\.?\d+)%"
    r"\s*(?:[,/]\s*(\d*\.?\d+)(%?))?\s*\)$"
)
_IS_COLOR_PATTERNS = (
    re.compile(r"^#[0-9a-fA-F]{3,8}$"),
    re.compile(r"^rgba?\(", re.IGNORECASE),
    re.compile(r"^hsla?\(", re.IGNORECASE),
    re.compile(r"^(" + "|".join(NAMED_COLORS) + r")$", re.IGNORECASE),
)
_EMBEDDED_COLOR = re.compile(r"rgba?\([^)]*\)|hsla?\([^)]*\)|#[0-9a-fA-F]{3,8}\b")


def is_color(value: str) -> bool:
    """Whether ``value`` looks like a single CSS color."""
    stripped = value.strip()
    return any(pattern.search(stripped) for pattern in _IS_COLOR_PATTERNS)


def _parse_alpha(raw: str | None, percent: str | None) -> float:
    if not raw:
        return 1.0
    alpha = float(raw)
    if percent:
        alpha /= 100.0
    return max(0.0, min(1.0, alpha))


def _channel(raw: str) -> int:
    return max(0, min(255, int(float(raw))))


def parse_color(value: str) -> ColorComponents | None:
    """Parse a CSS color into RGBA components.

    Args:
        value: Color text such as ``#fff``, ``rgb(0 0 0 / 50%)`` or ``red``

    Returns:
        ColorComponents, or None if the text is not a color this module understands
    """
    color = value.strip().lower()

    match = _RGB_PATTERN.match(color)
    if match:
        r, g, b, alpha, percent = match.groups()
        return ColorComponents(_channel(r), _channel(g), _channel(b), _parse_alpha(alpha, percent))

    match = _HEX_PATTERN.match(color)
    if match:
        digits = match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(ch * 2 for ch in digits)
        r = int(digits[0:2], 16)
        g = int(digits[2:4], 16)
        b = int(digits[4:6], 16)
        a = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
        return ColorComponents(r, g, b, a)

    match = _HSL_PATTERN.match(color)
    if match:
        hue, saturation, lightness, alpha, percent = match.groups()
        red, green, blue = colorsys.hls_to_rgb(
            (float(hue) % 360) / 360.0,
            min(float(lightness), 100.0) / 100.0,
            min(float(saturation), 100.0) / 100.0,
        )
        return ColorComponents(
            round(red * 255), round(green * 255), round(blue * 255), _parse_alpha(alpha, percent)
        )

    return NAMED_COLORS.get(color)


def extract_color(value: str) -> ColorComponents | None:
    """Find and parse the first color inside a compound value like a border shorthand."""
    direct = parse_color(value)
    if direct is not None:
        return direct
    match = _EMBEDDED_COLOR.search(value)
    if match:
        return parse_color(match.group(0))
    return None
