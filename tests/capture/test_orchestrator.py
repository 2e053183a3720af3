"""Tests for the capture orchestrator."""

import asyncio

import numpy as np
import pytest
from conftest import CARD_COLOR, TOOLBAR_COLOR, WIDGET_COLOR, build_page, find

from pixelcheck.capture.orchestrator import CaptureOrchestrator, element_target
from pixelcheck.dom import VirtualCaptureSurface, VirtualNode, install_tool_ui
from pixelcheck.exceptions import CaptureUnavailable
from pixelcheck.logging import PerformanceLogger
from pixelcheck.model.geometry import PageRect
from pixelcheck.model.screenshot import CaptureKind
from pixelcheck.model.selection import FullSurfaceTarget, RegionTarget

PADDING = [243, 244, 246, 255]
BORDER = [59, 130, 246, 255]


def contains_color(pixels: np.ndarray, rgb) -> bool:
    return bool(np.all(pixels[..., :3] == np.array(rgb, dtype=np.uint8), axis=-1).any())


class SlowCaptureSurface(VirtualCaptureSurface):
    """Capture surface that records how many grabs overlap."""

    def __init__(self, page) -> None:
        super().__init__(page)
        self.active = 0
        self.max_active = 0

    async def capture_visible(self) -> bytes:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(0.01)
            return await super().capture_visible()
        finally:
            self.active -= 1


@pytest.fixture
def surface(page):
    return VirtualCaptureSurface(page)


@pytest.fixture
def orchestrator(page, surface, settings):
    return CaptureOrchestrator(page, surface, settings, perf=PerformanceLogger())


class TestToolUIExclusion:
    """Test that the tool UI never appears in a capture."""

    @pytest.mark.asyncio
    async def test_full_surface_excludes_toolbar_and_overlays(
        self, page, tool_ui, widget, surface, orchestrator
    ):
        assert contains_color(page.render(), TOOLBAR_COLOR)

        shots = await orchestrator.capture(FullSurfaceTarget())

        assert len(shots) == 1
        pixels = shots[0].pixels
        assert shots[0].kind == CaptureKind.FULL_SURFACE
        assert pixels.shape == (720, 1280, 4)
        assert not contains_color(pixels, TOOLBAR_COLOR)
        assert not contains_color(pixels, WIDGET_COLOR)
        assert surface.tool_roots_at_capture == [0]

    @pytest.mark.asyncio
    async def test_page_restored_after_capture(self, page, tool_ui, widget, orchestrator):
        structure = page.structure()
        widget_style = dict(widget.style)

        await orchestrator.capture(FullSurfaceTarget())

        assert page.structure() == structure
        assert widget.style == widget_style
        assert await page.tool_roots() == [tool_ui.host]

    @pytest.mark.asyncio
    async def test_unavailable_surface_raises_after_restore(self, page, tool_ui, widget, settings):
        """Test that a lost capture surface surfaces only once the UI is back."""
        structure = page.structure()
        widget_style = dict(widget.style)
        surface = VirtualCaptureSurface(page, failure=RuntimeError("Extension context invalidated"))
        orchestrator = CaptureOrchestrator(page, surface, settings)

        with pytest.raises(CaptureUnavailable) as exc_info:
            await orchestrator.capture(FullSurfaceTarget())

        assert exc_info.value.reason == "Extension context invalidated"
        assert exc_info.value.context["operation"] == "capture_visible"
        assert surface.tool_roots_at_capture == [0]
        assert page.structure() == structure
        assert widget.style == widget_style


class TestElementCapture:
    """Test element captures."""

    @pytest.mark.asyncio
    async def test_plain_and_highlighted(self, page, tool_ui, card, orchestrator):
        """Test margin, padding and highlight placement for an element."""
        target = await element_target(page, card)

        plain, highlighted = await orchestrator.capture(target)

        assert (plain.kind, highlighted.kind) == (CaptureKind.ELEMENT, CaptureKind.ELEMENT)
        assert not plain.highlighted and highlighted.highlighted
        assert plain.captured_at == highlighted.captured_at
        # 380x280 crop centered in a 498x280 frame
        assert plain.pixels.shape == (280, 498, 4)
        assert plain.pixels[0, 0].tolist() == PADDING
        assert plain.pixels[40, 99, :3].tolist() == list(CARD_COLOR)
        assert highlighted.pixels[40, 99].tolist() == BORDER
        assert plain.pixels[40, 99, :3].tolist() == list(CARD_COLOR)

    @pytest.mark.asyncio
    async def test_metadata(self, page, tool_ui, card, orchestrator):
        plain, _ = await orchestrator.capture(await element_target(page, card))

        assert plain.page_metadata.to_dict() == {
            "url": "https://example.test/",
            "device_class": "Desktop: Linux",
            "browser_name": "Google Chrome",
            "screen_resolution": "1280×720px",
            "viewport_size": "1280×720px",
        }

    @pytest.mark.asyncio
    async def test_area_clipped_to_viewport(self, page, orchestrator):
        """Test an element whose margin pokes out of the left edge."""
        chip = page.body.append(
            VirtualNode("span", rect=(10, 300, 100, 50), style={"background-color": "#22c55e"})
        )

        plain, highlighted = await orchestrator.capture(await element_target(page, chip))

        # clipped area (0, 260, 150, 130) centered in the 300x168 minimum frame
        assert plain.pixels.shape == (168, 300, 4)
        assert plain.pixels[19, 74].tolist() == PADDING
        assert plain.pixels[19, 75].tolist() == [255, 255, 255, 255]
        assert highlighted.pixels[59, 85].tolist() == BORDER

    @pytest.mark.asyncio
    async def test_element_outside_viewport_is_blank(self, page, orchestrator):
        """Test that an element scrolled out of view yields a transparent frame."""
        below = page.body.append(
            VirtualNode("section", rect=(100, 1500, 100, 50), style={"background-color": "#22c55e"})
        )

        plain, _ = await orchestrator.capture(await element_target(page, below))

        assert plain.pixels.shape == (168, 300, 4)
        assert not plain.pixels[19:149, 60:240].any()

    def test_capture_area_without_clipping(self, page, surface, settings):
        orchestrator = CaptureOrchestrator(
            page, surface, settings.model_copy(update={"clip_element_to_viewport": False})
        )
        viewport = asyncio.run(page.viewport_state())
        chip = page.body.append(VirtualNode("span", rect=(10, 300, 100, 50)))
        target = asyncio.run(element_target(page, chip))

        assert orchestrator.capture_area(target, viewport) == PageRect(-30, 260, 180, 130)


class TestRegionCapture:
    """Test region captures."""

    @pytest.mark.asyncio
    async def test_region_at_device_resolution(self, settings):
        page = build_page(device_pixel_ratio=2.0)
        install_tool_ui(page)
        page.scroll_to(0, 100)
        orchestrator = CaptureOrchestrator(page, VirtualCaptureSurface(page), settings)

        (shot,) = await orchestrator.capture(RegionTarget(PageRect(100, 120, 300, 200)))

        assert shot.kind == CaptureKind.REGION
        assert shot.device_pixel_ratio == 2.0
        assert shot.pixels.shape == (400, 600, 4)
        assert shot.pixels[0, 0, :3].tolist() == list(CARD_COLOR)

    @pytest.mark.asyncio
    async def test_region_padding_when_enabled(self, page, surface, settings):
        orchestrator = CaptureOrchestrator(
            page, surface, settings.model_copy(update={"normalize_regions": True})
        )

        (shot,) = await orchestrator.capture(RegionTarget(PageRect(100, 120, 300, 200)))

        assert shot.pixels.shape == (200, 356, 4)
        assert shot.pixels[0, 0].tolist() == PADDING


class TestSerialization:
    """Test capture serialization and timing."""

    @pytest.mark.asyncio
    async def test_concurrent_captures_do_not_overlap(self, page, tool_ui, settings):
        surface = SlowCaptureSurface(page)
        orchestrator = CaptureOrchestrator(page, surface, settings)

        results = await asyncio.gather(
            orchestrator.capture(FullSurfaceTarget()),
            orchestrator.capture(RegionTarget(PageRect(0, 0, 200, 100))),
        )

        assert surface.max_active == 1
        assert surface.tool_roots_at_capture == [0, 0]
        assert [len(r) for r in results] == [1, 1]
        assert await page.tool_roots() == [tool_ui.host]

    @pytest.mark.asyncio
    async def test_phase_timings_recorded(self, page, card, orchestrator):
        await orchestrator.capture(await element_target(page, find(page, "button")))

        for phase in ("grab", "decode", "compose"):
            assert orchestrator.perf.get_stats(phase)["count"] == 1
