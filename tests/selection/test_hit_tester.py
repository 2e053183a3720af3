"""Tests for the hit-tester."""

import pytest

from pixelcheck.dom import FLOATING_TOOLBAR, TOOL_MARKER_ATTRIBUTE, VirtualNode, VirtualPage
from pixelcheck.model.geometry import ClientRect
from pixelcheck.selection.events import EventType, SelectionEvent
from pixelcheck.selection.hit_tester import HitTester
from pixelcheck.selection.session import SelectionSession


async def make_tester(page) -> HitTester:
    return HitTester(await SelectionSession.discover(page))


class TestSessionDiscovery:
    """Test SelectionSession.discover."""

    @pytest.mark.asyncio
    async def test_finds_overlays_toolbar_and_host(self, page, tool_ui):
        session = await SelectionSession.discover(page)

        assert session.overlays == [tool_ui.overlay, tool_ui.highlighter]
        assert session.floating_control is tool_ui.toolbar
        assert await session.hosts() == [tool_ui.host]
        assert await session.transparent_nodes() == [
            tool_ui.overlay,
            tool_ui.highlighter,
            tool_ui.host,
        ]

    @pytest.mark.asyncio
    async def test_page_without_tool_ui(self, page):
        session = await SelectionSession.discover(page)

        assert session.overlays == []
        assert session.floating_control is None
        assert await session.transparent_nodes() == []


class TestHitTest:
    """Test HitTester.hit_test."""

    @pytest.mark.asyncio
    async def test_resolves_element_beneath_overlay(self, page, tool_ui, card):
        """Test that the full-viewport overlay does not hide the page."""
        tester = await make_tester(page)

        node = await tester.hit_test(150, 150)

        assert node is card
        assert tester.session.current_element is card
        assert tester.session.current_rect == ClientRect(100, 120, 300, 200)

    @pytest.mark.asyncio
    async def test_innermost_element_wins(self, page, tool_ui, button):
        tester = await make_tester(page)

        assert await tester.hit_test(150, 210) is button

    @pytest.mark.asyncio
    async def test_overlay_style_restored_after_hit_test(self, page, tool_ui):
        tester = await make_tester(page)
        overlay_before = dict(tool_ui.overlay.style)

        await tester.hit_test(150, 150)

        assert tool_ui.overlay.style == overlay_before
        assert tool_ui.host.style["pointer-events"] == "none"

    @pytest.mark.asyncio
    async def test_document_body_rejected(self, page, tool_ui, card):
        """Test that empty page space is not selectable and clears the cache."""
        tester = await make_tester(page)
        await tester.hit_test(150, 150)

        assert await tester.hit_test(1000, 500) is None
        assert tester.session.current_element is None
        assert tester.session.current_rect is None

    @pytest.mark.asyncio
    async def test_toolbar_rejected(self, page, tool_ui):
        """Test that the shadow-hosted toolbar is never a selection target."""
        tester = await make_tester(page)

        assert await tester.hit_test(600, 670) is None

    @pytest.mark.asyncio
    async def test_light_dom_toolbar_rejected_by_ancestor(self):
        """Test the marked-ancestor rule for a toolbar outside any shadow root."""
        page = VirtualPage()
        toolbar = page.body.append(
            VirtualNode(
                "div",
                rect=(20, 20, 200, 40),
                attributes={TOOL_MARKER_ATTRIBUTE: FLOATING_TOOLBAR},
            )
        )
        toolbar.append(VirtualNode("button", rect=(30, 25, 30, 30)))
        tester = await make_tester(page)

        assert await tester.hit_test(40, 40) is None
        assert await tester.hit_test(150, 40) is None

    @pytest.mark.asyncio
    async def test_composed_path_containing_toolbar(self, page, tool_ui, card):
        tester = await make_tester(page)

        assert await tester.hit_test(150, 150, path=[card, tool_ui.toolbar]) is None
        assert await tester.hit_test(150, 150, path=[card, page.body]) is card

    @pytest.mark.asyncio
    async def test_bounds_fallback_without_path(self, page, tool_ui):
        """Test the toolbar bounds check when the toolbar lets points through."""
        footer = page.body.append(
            VirtualNode("footer", rect=(0, 640, 1280, 80), style={"background-color": "#000"})
        )
        tool_ui.toolbar.style["pointer-events"] = "none"
        tester = await make_tester(page)

        assert await tester.hit_test(600, 670) is None
        assert await tester.hit_test(600, 670, path=[footer, page.body]) is footer
        assert await tester.hit_test(100, 670) is footer


class TestFloatingControlTargeting:
    """Test HitTester.targets_floating_control."""

    @pytest.mark.asyncio
    async def test_retargeted_click_on_toolbar(self, page, tool_ui):
        """Test a click whose target was retargeted to the tool host."""
        tester = await make_tester(page)
        event = SelectionEvent(EventType.CLICK, 600, 670, target=tool_ui.host)

        assert await tester.targets_floating_control(event)

    @pytest.mark.asyncio
    async def test_path_walk(self, page, tool_ui, card):
        tester = await make_tester(page)
        event = SelectionEvent(EventType.CLICK, 150, 150, target=card, path=(tool_ui.toolbar,))

        assert await tester.targets_floating_control(event)

    @pytest.mark.asyncio
    async def test_click_on_page(self, page, tool_ui, card):
        tester = await make_tester(page)
        event = SelectionEvent(EventType.CLICK, 150, 150, target=tool_ui.host)

        assert not await tester.targets_floating_control(event)
