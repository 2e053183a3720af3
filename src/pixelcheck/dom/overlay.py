"""Injection of the tool UI into a live page."""

from playwright.async_api import Page

from ..capture_exceptions import capture_error_context
from ..logging import get_logger
from ..model.geometry import ClientRect
from .interfaces import (
    ELEMENT_HIGHLIGHTER,
    FLOATING_TOOLBAR,
    SELECTION_OVERLAY,
    TOOL_HOST_TAG,
    TOOL_MARKER_ATTRIBUTE,
)

logger = get_logger(__name__)

_INSTALL = """([tag, attribute, markers]) => {
    if (document.querySelector(tag)) return false;
    const host = document.createElement(tag);
    host.style.cssText = 'position:fixed;inset:0;z-index:2147483647;pointer-events:none;';
    const root = host.attachShadow({mode: 'open'});

    const overlay = document.createElement('div');
    overlay.setAttribute(attribute, markers.overlay);
    overlay.style.cssText = 'position:fixed;inset:0;pointer-events:auto;cursor:crosshair;';

    const highlighter = document.createElement('div');
    highlighter.setAttribute(attribute, markers.highlighter);
    highlighter.style.cssText = 'position:fixed;display:none;pointer-events:none;'
        + 'border:2px solid #3b82f6;background:rgba(59,130,246,0.1);box-sizing:border-box;';

    const toolbar = document.createElement('div');
    toolbar.setAttribute(attribute, markers.toolbar);
    toolbar.style.cssText = 'position:fixed;left:50%;bottom:24px;transform:translateX(-50%);'
        + 'width:240px;height:44px;border-radius:12px;background:#111827;pointer-events:auto;';

    root.append(overlay, highlighter, toolbar);
    document.documentElement.appendChild(host);
    return true;
}"""

_MOVE_HIGHLIGHT = """([tag, attribute, marker, rect]) => {
    const host = document.querySelector(tag);
    const box = host && host.shadowRoot.querySelector(`[${attribute}="${marker}"]`);
    if (!box) return;
    if (!rect) {
        box.style.display = 'none';
        return;
    }
    Object.assign(box.style, {
        display: 'block',
        left: `${rect.x}px`,
        top: `${rect.y}px`,
        width: `${rect.width}px`,
        height: `${rect.height}px`,
    });
}"""


_REMOVE = "(tag) => document.querySelectorAll(tag).forEach((n) => n.remove())"


class ToolOverlay:
    """The selection overlay, hover box and floating toolbar for one page.

    The UI lives in an open shadow root under a ``pixelcheck-ui`` host so
    page styles cannot reach it.
    """

    def __init__(self, page: Page) -> None:
        self.page = page

    async def install(self) -> bool:
        """Inject the UI; returns False if it was already present."""
        markers = {
            "overlay": SELECTION_OVERLAY,
            "highlighter": ELEMENT_HIGHLIGHTER,
            "toolbar": FLOATING_TOOLBAR,
        }
        with capture_error_context("install_overlay"):
            installed = await self.page.evaluate(
                _INSTALL, [TOOL_HOST_TAG, TOOL_MARKER_ATTRIBUTE, markers]
            )
        logger.debug("tool_overlay_installed", installed=installed)
        return bool(installed)

    async def move_highlight(self, rect: ClientRect | None) -> None:
        """Show the hover box over ``rect`` (client coordinates), or hide it."""
        with capture_error_context("move_highlight"):
            await self.page.evaluate(
                _MOVE_HIGHLIGHT,
                [
                    TOOL_HOST_TAG,
                    TOOL_MARKER_ATTRIBUTE,
                    ELEMENT_HIGHLIGHTER,
                    rect.to_dict() if rect else None,
                ],
            )

    async def remove(self) -> None:
        with capture_error_context("remove_overlay"):
            await self.page.evaluate(_REMOVE, TOOL_HOST_TAG)
        logger.debug("tool_overlay_removed")
