"""Browser session driving a single capture from the command line."""

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from ..capture.orchestrator import CaptureOrchestrator, element_target
from ..capture_exceptions import CaptureUnavailable, capture_error_context
from ..compare.properties import extract_properties
from ..config import PixelCheckSettings
from ..dom.event_bridge import PageEventBridge
from ..dom.overlay import ToolOverlay
from ..dom.playwright_surface import PlaywrightCaptureSurface, PlaywrightPageSurface
from ..logging import get_logger
from ..model.screenshot import Screenshot
from ..model.selection import ElementTarget, SelectionMode, SelectionTarget
from ..selection.controller import SelectionController, SelectionState
from ..selection.session import SelectionSession

logger = get_logger(__name__)


@dataclass
class CaptureJob:
    """What to open and what to capture.

    Exactly one of ``target``, ``selector`` and ``pick`` is set.
    """

    url: str
    viewport: tuple[int, int] = (1280, 720)
    scale: float = 1.0
    target: SelectionTarget | None = None
    selector: str | None = None
    pick: SelectionMode | None = None
    properties_path: Path | None = None
    timeout: float = 120.0


async def pick_target(
    page: Page,
    surface: PlaywrightPageSurface,
    overlay: ToolOverlay,
    mode: SelectionMode,
    settings: PixelCheckSettings,
    timeout: float,
) -> SelectionTarget | None:
    """Let the user select interactively; None if cancelled or timed out."""
    session = await SelectionSession.discover(surface)
    controller = SelectionController(
        session,
        settings=settings,
        on_highlight=overlay.move_highlight,
        cancel_policy=lambda: SelectionState.CLOSED,
    )
    bridge = PageEventBridge(page, controller)
    await bridge.attach()
    await controller.start(mode)

    try:
        return await asyncio.wait_for(controller.wait_finalized(), timeout)
    except asyncio.TimeoutError:
        logger.warning("selection_timed_out", timeout=timeout, events=bridge.delivered)
        controller.close()
        return None


async def resolve_target(
    page: Page,
    surface: PlaywrightPageSurface,
    overlay: ToolOverlay,
    job: CaptureJob,
    settings: PixelCheckSettings,
) -> SelectionTarget | None:
    if job.target is not None:
        return job.target
    if job.selector is not None:
        with capture_error_context("query_selector", selector=job.selector):
            handle = await page.query_selector(job.selector)
            if handle is None:
                logger.warning("selector_not_found", selector=job.selector)
                return None
            await handle.scroll_into_view_if_needed()
        return await element_target(surface, handle)
    if job.pick is not None:
        return await pick_target(page, surface, overlay, job.pick, settings, job.timeout)
    raise ValueError("capture job names no target")


async def write_properties(
    surface: PlaywrightPageSurface, target: ElementTarget, path: Path
) -> None:
    samples = await extract_properties(surface, target.handle)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps({s.name: s.raw_value for s in samples}, indent=2), encoding="utf-8"
    )
    logger.info("properties_written", path=str(path), count=len(samples))


async def run_capture(job: CaptureJob, settings: PixelCheckSettings) -> list[Screenshot]:
    """Open ``job.url``, resolve the target and capture it.

    Returns:
        The screenshots, or an empty list when nothing was selected

    Raises:
        CaptureUnavailable: If the browser or page could not be driven
    """
    width, height = job.viewport
    async with async_playwright() as playwright:
        try:
            browser = await playwright.chromium.launch(headless=job.pick is None)
        except PlaywrightError as e:
            raise CaptureUnavailable(str(e), operation="launch") from e

        try:
            context = await browser.new_context(
                viewport={"width": width, "height": height}, device_scale_factor=job.scale
            )
            page = await context.new_page()
            try:
                await page.goto(job.url, wait_until="load")
            except PlaywrightError as e:
                raise CaptureUnavailable(str(e), operation="goto", url=job.url) from e

            surface = PlaywrightPageSurface(page)
            overlay = ToolOverlay(page)
            await overlay.install()
            target = await resolve_target(page, surface, overlay, job, settings)
            if target is None:
                return []

            orchestrator = CaptureOrchestrator(surface, PlaywrightCaptureSurface(page), settings)
            screenshots = await orchestrator.capture(target)

            if job.properties_path is not None and isinstance(target, ElementTarget):
                await write_properties(surface, target, job.properties_path)
            return screenshots
        finally:
            await browser.close()
