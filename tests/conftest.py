"""Pytest configuration and fixtures."""

import os

import pytest

# Quiet structlog output and pick the test settings profile before any
# pixelcheck module creates its logger
os.environ.setdefault("PIXELCHECK_DISABLE_CONSOLE_LOGGING", "1")
os.environ.setdefault("PIXELCHECK_ENV", "test")

from pixelcheck.config import get_settings, reset_settings  # noqa: E402
from pixelcheck.dom import VirtualNode, VirtualPage, install_tool_ui  # noqa: E402

HEADER_COLOR = (30, 58, 138)
CARD_COLOR = (249, 115, 22)
BUTTON_COLOR = (34, 197, 94)
TOOLBAR_COLOR = (17, 24, 39)
WIDGET_COLOR = (255, 0, 255)


class FakeClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def fresh_settings():
    """Give every test a fresh settings singleton."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    return get_settings("test")


def build_page(**kwargs) -> VirtualPage:
    """A page with a header, a card and a button inside the card.

    Layout (page coordinates, logical px):
        header  (0, 0, 1280, 80)
        card    (100, 120, 300, 200)
        button  (140, 200, 120, 40), child of card
    """
    kwargs.setdefault("document_size", (1280, 2000))
    page = VirtualPage(**kwargs)
    page.body.append(
        VirtualNode("header", name="header", rect=(0, 0, 1280, 80), style={"background-color": "#1e3a8a"})
    )
    card = page.body.append(
        VirtualNode(
            "div",
            name="card",
            rect=(100, 120, 300, 200),
            style={"background-color": "#f97316"},
            computed={"font-family": '"Inter", sans-serif', "font-size": "16px", "color": "rgb(17, 24, 39)"},
        )
    )
    card.append(
        VirtualNode("button", name="button", rect=(140, 200, 120, 40), style={"background-color": "#22c55e"})
    )
    return page


@pytest.fixture
def page():
    return build_page()


@pytest.fixture
def tool_ui(page):
    """The tool UI injected into ``page``; toolbar at (520, 652, 240, 44)."""
    return install_tool_ui(page)


def find(page: VirtualPage, name: str) -> VirtualNode:
    for node in page.walk():
        if node.name == name:
            return node
    raise KeyError(name)


@pytest.fixture
def card(page):
    return find(page, "card")


@pytest.fixture
def button(page):
    return find(page, "button")


@pytest.fixture
def widget(page):
    """A third-party fixed widget stacked above everything but the tool UI."""
    return page.body.append(
        VirtualNode(
            "div",
            name="chat-widget",
            rect=(1180, 620, 80, 80),
            style={
                "position": "fixed",
                "z-index": "1000000",
                "background-color": "#ff00ff",
                "opacity": "1",
            },
        )
    )


@pytest.fixture
def clock():
    return FakeClock()
