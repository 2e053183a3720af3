"""Page metadata: device class, browser name and sizes."""

import re
from collections.abc import Sequence

from ..dom.interfaces import PageInfo
from ..model.geometry import ViewportState
from ..model.screenshot import PageMetadata

# Order matters: the first matching rule wins
_BRAND_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("dia",), "Dia"),
    (("arc",), "Arc"),
    (("edge",), "Microsoft Edge"),
    (("chrome",), "Google Chrome"),
    (("opera", "opr"), "Opera"),
)

_DEVICE_RULES: tuple[tuple[str, str], ...] = (
    (r"Mobi|Android", "Mobile"),
    (r"Tablet|iPad", "Tablet"),
    (r"Mac", "Desktop: macOS"),
    (r"Win", "Desktop: Windows"),
    (r"Linux", "Desktop: Linux"),
)


def detect_device_class(user_agent: str) -> str:
    for pattern, label in _DEVICE_RULES:
        if re.search(pattern, user_agent, re.IGNORECASE):
            return label
    return "Desktop"


def detect_browser(user_agent: str, brands: Sequence[str] = ()) -> str:
    """Browser name from client-hint brands, falling back to the UA string."""
    brand_names = [brand.lower() for brand in brands]
    for needles, label in _BRAND_RULES:
        if any(needle in brand for brand in brand_names for needle in needles):
            return label

    def has(pattern: str) -> bool:
        return re.search(pattern, user_agent, re.IGNORECASE) is not None

    if has(r"Dia"):
        return "Dia"
    if has(r"Arc"):
        return "Arc"
    if has(r"Edg"):
        return "Microsoft Edge"
    if has(r"OPR|Opera"):
        return "Opera"
    if has(r"Firefox"):
        return "Mozilla Firefox"
    if has(r"Chrome|CriOS"):
        return "Google Chrome (iOS)" if has(r"CriOS") else "Google Chrome"
    if has(r"Safari"):
        return "Apple Safari"
    return "Unknown Browser"


def format_size(width: float, height: float) -> str:
    return f"{int(width)}×{int(height)}px"


def describe_page(info: PageInfo, viewport: ViewportState) -> PageMetadata:
    return PageMetadata(
        url=info.url,
        device_class=detect_device_class(info.user_agent),
        browser_name=detect_browser(info.user_agent, info.brands),
        screen_resolution=format_size(viewport.screen_width, viewport.screen_height),
        viewport_size=format_size(viewport.width, viewport.height),
    )
