"""Tests for page metadata detection."""

import pytest

from pixelcheck.capture.metadata import (
    describe_page,
    detect_browser,
    detect_device_class,
    format_size,
)
from pixelcheck.dom.interfaces import PageInfo
from pixelcheck.model.geometry import ViewportState

CHROME_LINUX = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/126.0.0.0 Safari/537.36"
)
EDGE_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/126.0.0.0 Safari/537.36 Edg/126.0.0.0"
)
SAFARI_MAC = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.5 Safari/605.1.15"
)
FIREFOX_LINUX = "Mozilla/5.0 (X11; Linux x86_64; rv:127.0) Gecko/20100101 Firefox/127.0"
CHROME_IPHONE = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_5 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) CriOS/126.0.6478.54 Mobile/15E148 Safari/604.1"
)
SAFARI_IPAD = (
    "Mozilla/5.0 (iPad; CPU OS 17_5 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.5 Safari/605.1.15"
)


class TestDeviceClass:
    """Test detect_device_class."""

    @pytest.mark.parametrize(
        "user_agent,expected",
        [
            (CHROME_IPHONE, "Mobile"),
            (SAFARI_IPAD, "Tablet"),
            (SAFARI_MAC, "Desktop: macOS"),
            (EDGE_WINDOWS, "Desktop: Windows"),
            (CHROME_LINUX, "Desktop: Linux"),
            ("curl/8.5.0", "Desktop"),
        ],
    )
    def test_device_class(self, user_agent, expected):
        assert detect_device_class(user_agent) == expected


class TestBrowser:
    """Test detect_browser."""

    @pytest.mark.parametrize(
        "brands,expected",
        [
            (("Not/A)Brand", "Chromium", "Google Chrome"), "Google Chrome"),
            (("Chromium", "Microsoft Edge", "Not-A.Brand"), "Microsoft Edge"),
            (("Opera", "Chromium"), "Opera"),
            (("Arc", "Chromium"), "Arc"),
        ],
    )
    def test_brands_take_precedence(self, brands, expected):
        """Test that client hints win over the UA string."""
        assert detect_browser(CHROME_LINUX, brands) == expected

    @pytest.mark.parametrize(
        "user_agent,expected",
        [
            (CHROME_LINUX, "Google Chrome"),
            (EDGE_WINDOWS, "Microsoft Edge"),
            (FIREFOX_LINUX, "Mozilla Firefox"),
            (SAFARI_MAC, "Apple Safari"),
            (CHROME_IPHONE, "Google Chrome (iOS)"),
            ("curl/8.5.0", "Unknown Browser"),
        ],
    )
    def test_user_agent_fallback(self, user_agent, expected):
        assert detect_browser(user_agent) == expected

    def test_unknown_brands_fall_back_to_user_agent(self):
        assert detect_browser(FIREFOX_LINUX, ("Not A;Brand",)) == "Mozilla Firefox"


class TestDescribePage:
    """Test describe_page."""

    def test_sizes_use_multiplication_sign(self):
        assert format_size(1280, 720) == "1280×720px"
        assert format_size(390.6, 844.2) == "390×844px"

    def test_describe_page(self):
        info = PageInfo(url="https://shop.test/cart", user_agent=SAFARI_MAC)
        viewport = ViewportState(
            scroll_x=0,
            scroll_y=0,
            width=1440,
            height=900,
            device_pixel_ratio=2.0,
            screen_width=1512,
            screen_height=982,
        )

        metadata = describe_page(info, viewport)

        assert metadata.url == "https://shop.test/cart"
        assert metadata.device_class == "Desktop: macOS"
        assert metadata.browser_name == "Apple Safari"
        assert metadata.screen_resolution == "1512×982px"
        assert metadata.viewport_size == "1440×900px"
