"""
Capture orchestrator.

Runs the capture bracket for one finalized selection: suppress the tool UI,
let the page settle, grab the visible surface, restore the UI, then crop,
normalize and highlight. The UI is always restored before any error leaves
this module.
"""

import asyncio
from typing import Any

import numpy as np

from ..capture_exceptions import capture_error_context
from ..config import PixelCheckSettings, get_settings
from ..dom.interfaces import ICaptureSurface, IPageSurface
from ..imaging.aspect import PaddedImage, normalize_aspect
from ..imaging.codec import decode_bitmap
from ..imaging.crop import crop_bitmap
from ..imaging.highlight import draw_highlight, highlight_box
from ..logging import PerformanceLogger, get_logger, performance_logger
from ..model.geometry import PageRect, ViewportState
from ..model.screenshot import CaptureKind, DeviceBitmap, PageMetadata, Screenshot
from ..model.selection import ElementTarget, FullSurfaceTarget, RegionTarget, SelectionTarget
from .metadata import describe_page
from .suppression import UISuppressor

logger = get_logger(__name__)


async def element_target(surface: IPageSurface, node: Any) -> ElementTarget:
    """Build an ``ElementTarget`` for ``node`` at the current scroll position."""
    client_rect = await surface.bounding_rect(node)
    viewport = await surface.viewport_state()
    return ElementTarget(
        handle=node,
        rect=PageRect.from_client(client_rect, viewport.scroll_x, viewport.scroll_y),
        client_rect=client_rect,
    )


class CaptureOrchestrator:
    """Produces screenshots for selection targets.

    Captures on one orchestrator are serialized.

    Args:
        page: Page surface holding the tool UI
        capture_surface: Surface that grabs the visible viewport
        settings: Capture settings
        perf: Timing recorder for capture phases
    """

    def __init__(
        self,
        page: IPageSurface,
        capture_surface: ICaptureSurface,
        settings: PixelCheckSettings | None = None,
        perf: PerformanceLogger | None = None,
    ) -> None:
        self.page = page
        self.capture_surface = capture_surface
        self.settings = settings or get_settings()
        self.perf = perf or performance_logger
        self._lock = asyncio.Lock()

    async def capture(self, target: SelectionTarget) -> list[Screenshot]:
        """Capture ``target``.

        Returns:
            ``[plain, highlighted]`` for elements, ``[screenshot]`` otherwise

        Raises:
            CaptureUnavailable: If the surface could not be grabbed; raised
                only after the tool UI has been restored
        """
        async with self._lock:
            viewport = await self.page.viewport_state()
            metadata = describe_page(await self.page.page_info(), viewport)

            data = await self._grab()
            with self.perf.timed("decode"):
                bitmap = await asyncio.to_thread(
                    decode_bitmap, data, viewport.device_pixel_ratio
                )

            with self.perf.timed("compose", kind=type(target).__name__):
                if isinstance(target, ElementTarget):
                    screenshots = self._element_screenshots(target, bitmap, viewport, metadata)
                elif isinstance(target, RegionTarget):
                    screenshots = [
                        self._area_screenshot(
                            target.rect, bitmap, viewport, metadata, CaptureKind.REGION
                        )
                    ]
                elif isinstance(target, FullSurfaceTarget):
                    screenshots = [
                        self._area_screenshot(
                            viewport.visible_rect,
                            bitmap,
                            viewport,
                            metadata,
                            CaptureKind.FULL_SURFACE,
                        )
                    ]
                else:
                    raise TypeError(f"Unsupported selection target: {target!r}")

            logger.info(
                "capture_completed",
                kind=screenshots[0].kind.value,
                count=len(screenshots),
                width=screenshots[0].width,
                height=screenshots[0].height,
            )
            return screenshots

    async def _grab(self) -> bytes:
        suppressor = UISuppressor(self.page, self.settings.suppression_z_index)
        with capture_error_context("capture_visible"):
            with self.perf.timed("grab"):
                async with suppressor.suppressed():
                    if self.settings.settle_delay > 0:
                        await asyncio.sleep(self.settings.settle_delay)
                    return await self.capture_surface.capture_visible()

    def _area_screenshot(
        self,
        rect: PageRect,
        bitmap: DeviceBitmap,
        viewport: ViewportState,
        metadata: PageMetadata,
        kind: CaptureKind,
    ) -> Screenshot:
        pixels = crop_bitmap(bitmap, rect, viewport).pixels
        if kind == CaptureKind.REGION and self.settings.normalize_regions:
            pixels = self._normalize(pixels, bitmap.device_pixel_ratio).pixels
        return Screenshot(
            pixels=pixels,
            kind=kind,
            page_metadata=metadata,
            device_pixel_ratio=bitmap.device_pixel_ratio,
        )

    def _normalize(self, pixels: np.ndarray, dpr: float) -> PaddedImage:
        return normalize_aspect(
            pixels,
            dpr=dpr,
            ratio=self.settings.aspect_ratio,
            min_frame=(self.settings.min_frame_width, self.settings.min_frame_height),
            fill=self.settings.padding_color,
        )

    def capture_area(self, target: ElementTarget, viewport: ViewportState) -> PageRect:
        """Element rect grown by the margin and clipped to the visible viewport."""
        area = target.rect.grow(self.settings.element_margin)
        if not self.settings.clip_element_to_viewport:
            return area
        clipped = area.intersection(viewport.visible_rect)
        if clipped is None:
            # Nothing visible; the crop clamp leaves a transparent frame
            logger.debug("element_outside_viewport", rect=target.rect.to_dict())
            return area
        return clipped

    def _element_screenshots(
        self,
        target: ElementTarget,
        bitmap: DeviceBitmap,
        viewport: ViewportState,
        metadata: PageMetadata,
    ) -> list[Screenshot]:
        dpr = bitmap.device_pixel_ratio
        area = self.capture_area(target, viewport)
        padded = self._normalize(crop_bitmap(bitmap, area, viewport).pixels, dpr)

        plain = Screenshot(
            pixels=padded.pixels,
            kind=CaptureKind.ELEMENT,
            page_metadata=metadata,
            device_pixel_ratio=dpr,
        )
        box = highlight_box(target.rect, area, padded.offset, dpr)
        highlighted = Screenshot(
            pixels=draw_highlight(
                padded.pixels,
                box,
                dpr=dpr,
                fill=self.settings.highlight_fill,
                border=self.settings.highlight_border,
                border_width=self.settings.highlight_border_width,
            ),
            kind=CaptureKind.ELEMENT,
            page_metadata=metadata,
            highlighted=True,
            device_pixel_ratio=dpr,
            captured_at=plain.captured_at,
        )
        return [plain, highlighted]
