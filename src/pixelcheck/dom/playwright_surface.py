"""
Live page surfaces backed by Playwright.

Node handles are Playwright ``ElementHandle``/``JSHandle`` objects. Each
primitive runs as a single in-page script, so edits that must be undone
within one step (like making overlays transparent to point queries) never
span an await. Any Playwright failure, including a closed page, is reported
as ``CaptureUnavailable``.
"""

from collections.abc import Sequence
from typing import Any

from playwright.async_api import ElementHandle, JSHandle, Page

from ..capture_exceptions import capture_error_context
from ..logging import get_logger
from ..model.geometry import ClientRect, ViewportState
from .interfaces import (
    TOOL_HOST_TAG,
    TOOL_MARKER_ATTRIBUTE,
    ICaptureSurface,
    IPageSurface,
    NodePosition,
    PageInfo,
)

logger = get_logger(__name__)

_ELEMENT_FROM_POINT = """([x, y, nodes]) => {
    const saved = nodes.map((n) => n.style.getPropertyValue('pointer-events'));
    const priorities = nodes.map((n) => n.style.getPropertyPriority('pointer-events'));
    nodes.forEach((n) => n.style.setProperty('pointer-events', 'none', 'important'));
    try {
        return document.elementFromPoint(x, y);
    } finally {
        nodes.forEach((n, i) => {
            if (saved[i]) n.style.setProperty('pointer-events', saved[i], priorities[i]);
            else n.style.removeProperty('pointer-events');
        });
    }
}"""

_ROOT_HOST = """(node) => {
    const root = node.getRootNode();
    return root instanceof ShadowRoot ? root.host : null;
}"""

_CLOSEST_MARKED = """(node, [attribute, value]) => {
    let current = node;
    while (current && current.nodeType === Node.ELEMENT_NODE) {
        if (current.getAttribute(attribute) === value) return current;
        current = current.parentElement;
    }
    return null;
}"""

_QUERY_MARKED = """([attribute, value]) => {
    const selector = `[${attribute}="${value}"]`;
    const search = (root) => {
        const found = root.querySelector(selector);
        if (found) return found;
        for (const el of root.querySelectorAll('*')) {
            if (el.shadowRoot) {
                const inner = search(el.shadowRoot);
                if (inner) return inner;
            }
        }
        return null;
    };
    return search(document);
}"""

_BOUNDING_RECT = """(node) => {
    const r = node.getBoundingClientRect();
    return {x: r.left, y: r.top, width: r.width, height: r.height};
}"""

_VIEWPORT_STATE = """() => ({
    scrollX: window.scrollX,
    scrollY: window.scrollY,
    width: window.innerWidth,
    height: window.innerHeight,
    devicePixelRatio: window.devicePixelRatio || 1,
    screenWidth: screen.width,
    screenHeight: screen.height,
})"""

_PAGE_INFO = """() => {
    const data = navigator.userAgentData;
    const brands = (data && (data.brands || data.uaList)) || [];
    return {
        url: location.href,
        userAgent: navigator.userAgent,
        brands: brands.map((b) => b.brand),
    };
}"""

_TOOL_ROOTS = """([tag, attribute]) => {
    const selector = `${tag}, [${attribute}]`;
    return Array.from(document.querySelectorAll(selector)).filter(
        (el) => !el.parentElement || !el.parentElement.closest(selector)
    );
}"""

_DETACH = """(node) => {
    const position = [node.parentNode, node.nextSibling];
    node.remove();
    return position;
}"""

_REATTACH = """(node, [parent, sibling]) => {
    if (sibling && sibling.parentNode === parent) parent.insertBefore(node, sibling);
    else parent.appendChild(node);
}"""

_STACKED_CANDIDATES = """(minZ) => Array.from(document.querySelectorAll('*')).filter((el) => {
    const style = window.getComputedStyle(el);
    const z = parseInt(style.zIndex, 10);
    return !Number.isNaN(z) && z >= minZ
        && (style.position === 'fixed' || style.position === 'absolute');
})"""

_INLINE_STYLE = """(node, props) => Object.fromEntries(
    props.map((p) => [p, node.style.getPropertyValue(p)])
)"""

_INLINE_PRIORITY = """(node, props) => Object.fromEntries(
    props.map((p) => [p, node.style.getPropertyPriority(p)])
)"""

_SET_INLINE_STYLE = """(node, [styles, important]) => {
    for (const [prop, value] of Object.entries(styles)) {
        if (value) node.style.setProperty(prop, value, important ? 'important' : '');
        else node.style.removeProperty(prop);
    }
}"""

_COMPUTED_STYLE = """(node, props) => {
    const style = window.getComputedStyle(node);
    return Object.fromEntries(props.map((p) => [p, style.getPropertyValue(p)]));
}"""


async def handles_from_array(array: JSHandle) -> list[Any]:
    """Split a JS array handle into per-item handles, in index order."""
    properties = await array.get_properties()
    items = sorted(
        ((int(key), handle) for key, handle in properties.items() if key.isdigit()),
        key=lambda item: item[0],
    )
    handles = []
    for _, handle in items:
        element = handle.as_element()
        handles.append(element if element is not None else handle)
    await array.dispose()
    return handles


class PlaywrightPageSurface(IPageSurface):
    """``IPageSurface`` for a live Playwright page."""

    def __init__(self, page: Page) -> None:
        self.page = page

    async def element_from_point(
        self, x: float, y: float, transparent: Sequence[Any] = ()
    ) -> ElementHandle | None:
        with capture_error_context("element_from_point", x=x, y=y):
            handle = await self.page.evaluate_handle(_ELEMENT_FROM_POINT, [x, y, list(transparent)])
            return handle.as_element()

    async def is_document_body(self, node: ElementHandle) -> bool:
        with capture_error_context("is_document_body"):
            return bool(
                await node.evaluate("(n) => n === document.body || n === document.documentElement")
            )

    async def same_node(self, a: Any, b: Any) -> bool:
        if a is None or b is None:
            return False
        with capture_error_context("same_node"):
            return bool(await a.evaluate("(a, b) => a === b", b))

    async def root_host(self, node: ElementHandle) -> ElementHandle | None:
        with capture_error_context("root_host"):
            return (await node.evaluate_handle(_ROOT_HOST)).as_element()

    async def closest_marked(self, node: ElementHandle, marker: str) -> ElementHandle | None:
        with capture_error_context("closest_marked", marker=marker):
            handle = await node.evaluate_handle(_CLOSEST_MARKED, [TOOL_MARKER_ATTRIBUTE, marker])
            return handle.as_element()

    async def marker_of(self, node: ElementHandle) -> str | None:
        with capture_error_context("marker_of"):
            return await node.get_attribute(TOOL_MARKER_ATTRIBUTE)

    async def query_marked(self, marker: str) -> ElementHandle | None:
        with capture_error_context("query_marked", marker=marker):
            handle = await self.page.evaluate_handle(_QUERY_MARKED, [TOOL_MARKER_ATTRIBUTE, marker])
            return handle.as_element()

    async def bounding_rect(self, node: ElementHandle) -> ClientRect:
        with capture_error_context("bounding_rect"):
            return ClientRect.from_dict(await node.evaluate(_BOUNDING_RECT))

    async def viewport_state(self) -> ViewportState:
        with capture_error_context("viewport_state"):
            return ViewportState.from_dict(await self.page.evaluate(_VIEWPORT_STATE))

    async def page_info(self) -> PageInfo:
        with capture_error_context("page_info"):
            data = await self.page.evaluate(_PAGE_INFO)
        return PageInfo(
            url=data["url"], user_agent=data["userAgent"], brands=tuple(data.get("brands", []))
        )

    async def tool_roots(self) -> list[Any]:
        with capture_error_context("tool_roots"):
            array = await self.page.evaluate_handle(
                _TOOL_ROOTS, [TOOL_HOST_TAG, TOOL_MARKER_ATTRIBUTE]
            )
            return await handles_from_array(array)

    async def detach(self, node: ElementHandle) -> NodePosition:
        with capture_error_context("detach"):
            parent, next_sibling = await handles_from_array(await node.evaluate_handle(_DETACH))
        return NodePosition(parent=parent, next_sibling=next_sibling)

    async def reattach(self, node: ElementHandle, position: NodePosition) -> None:
        with capture_error_context("reattach"):
            await node.evaluate(_REATTACH, [position.parent, position.next_sibling])

    async def stacked_candidates(self, min_z_index: int) -> list[Any]:
        with capture_error_context("stacked_candidates"):
            array = await self.page.evaluate_handle(_STACKED_CANDIDATES, min_z_index)
            return await handles_from_array(array)

    async def inline_style(self, node: ElementHandle, properties: Sequence[str]) -> dict[str, str]:
        with capture_error_context("inline_style"):
            return await node.evaluate(_INLINE_STYLE, list(properties))

    async def inline_priority(
        self, node: ElementHandle, properties: Sequence[str]
    ) -> dict[str, str]:
        with capture_error_context("inline_priority"):
            return await node.evaluate(_INLINE_PRIORITY, list(properties))

    async def set_inline_style(
        self, node: ElementHandle, styles: dict[str, str], important: bool = False
    ) -> None:
        with capture_error_context("set_inline_style"):
            await node.evaluate(_SET_INLINE_STYLE, [styles, important])

    async def computed_style(
        self, node: ElementHandle, properties: Sequence[str]
    ) -> dict[str, str]:
        with capture_error_context("computed_style"):
            return await node.evaluate(_COMPUTED_STYLE, list(properties))


class PlaywrightCaptureSurface(ICaptureSurface):
    """Grabs the visible viewport through Playwright at device scale."""

    def __init__(self, page: Page) -> None:
        self.page = page

    async def capture_visible(self) -> bytes:
        with capture_error_context("capture_visible"):
            if self.page.is_closed():
                raise RuntimeError("page is closed")
            data = await self.page.screenshot(type="png", scale="device", full_page=False)
        logger.debug("surface_captured", bytes=len(data))
        return data
