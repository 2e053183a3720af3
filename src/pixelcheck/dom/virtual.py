"""
In-memory page model.

Implements ``IPageSurface`` and ``ICaptureSurface`` over a small DOM: light
tree, open shadow roots, z-index paint order, inherited ``pointer-events``
and ``visibility``, ``display: none``, fixed positioning, a scroll offset and
a device pixel ratio. A rasterizer paints node backgrounds so captures can be
inspected pixel by pixel. Used by the test suite and for offline replay.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Union

import numpy as np

from ..compare.color import parse_color
from ..imaging.codec import encode_png
from ..model.geometry import ClientRect, ViewportState
from .interfaces import (
    ELEMENT_HIGHLIGHTER,
    FLOATING_TOOLBAR,
    SELECTION_OVERLAY,
    TOOL_HOST_TAG,
    TOOL_MARKER_ATTRIBUTE,
    ICaptureSurface,
    IPageSurface,
    NodePosition,
    PageInfo,
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/126.0.0.0 Safari/537.36"
)

_COMPUTED_DEFAULTS = {
    "display": "block",
    "position": "static",
    "visibility": "visible",
    "opacity": "1",
    "z-index": "auto",
    "pointer-events": "auto",
}


class VirtualShadowRoot:
    """Open shadow root attached to a host node."""

    def __init__(self, host: "VirtualNode") -> None:
        self.host = host
        self.children: list[VirtualNode] = []

    def append(self, child: "VirtualNode") -> "VirtualNode":
        child.parent = self
        self.children.append(child)
        return child


class VirtualNode:
    """A DOM element.

    Args:
        tag: Element tag name
        name: Label used in reprs and structure snapshots (defaults to tag)
        rect: ``(x, y, width, height)``; page coordinates, or viewport
            coordinates when the node or an ancestor is ``position: fixed``
        style: Inline style properties
        attributes: Element attributes
        computed: Extra computed style values (e.g. from stylesheets)
    """

    def __init__(
        self,
        tag: str,
        *,
        name: str | None = None,
        rect: tuple[float, float, float, float] | None = None,
        style: dict[str, str] | None = None,
        attributes: dict[str, str] | None = None,
        computed: dict[str, str] | None = None,
    ) -> None:
        self.tag = tag
        self.name = name or tag
        self.rect = rect
        self.style: dict[str, str] = dict(style or {})
        self.important: set[str] = set()
        self.attributes: dict[str, str] = dict(attributes or {})
        self.computed: dict[str, str] = dict(computed or {})
        self.parent: VirtualNode | VirtualShadowRoot | None = None
        self.children: list[VirtualNode] = []
        self.shadow_root: VirtualShadowRoot | None = None

    def append(self, child: "VirtualNode") -> "VirtualNode":
        child.parent = self
        self.children.append(child)
        return child

    def attach_shadow(self) -> VirtualShadowRoot:
        if self.shadow_root is None:
            self.shadow_root = VirtualShadowRoot(self)
        return self.shadow_root

    @property
    def composed_parent(self) -> "VirtualNode | None":
        if isinstance(self.parent, VirtualShadowRoot):
            return self.parent.host
        return self.parent

    def __repr__(self) -> str:
        return f"VirtualNode({self.name!r})"


Container = Union[VirtualNode, VirtualShadowRoot]


class VirtualPage(IPageSurface):
    """In-memory ``IPageSurface``.

    Args:
        width: Viewport width in logical pixels
        height: Viewport height in logical pixels
        device_pixel_ratio: Device pixels per logical pixel
        document_size: Page size; defaults to the viewport size
        url: Page URL
        user_agent: Navigator user agent string
        brands: Client hint brand names
    """

    def __init__(
        self,
        width: float = 1280,
        height: float = 720,
        device_pixel_ratio: float = 1.0,
        document_size: tuple[float, float] | None = None,
        url: str = "https://example.test/",
        user_agent: str = DEFAULT_USER_AGENT,
        brands: tuple[str, ...] = (),
        screen_size: tuple[int, int] | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.device_pixel_ratio = device_pixel_ratio
        self.scroll_x = 0.0
        self.scroll_y = 0.0
        self.url = url
        self.user_agent = user_agent
        self.brands = tuple(brands)
        self.screen_size = screen_size or (int(width), int(height))
        doc_width, doc_height = document_size or (width, height)
        self.body = VirtualNode(
            "body",
            rect=(0, 0, doc_width, doc_height),
            style={"background-color": "#ffffff"},
        )
        self.hit_queries = 0

    # Tree helpers

    def scroll_to(self, x: float, y: float) -> None:
        self.scroll_x = x
        self.scroll_y = y

    def walk(self, node: VirtualNode | None = None, composed: bool = True) -> Iterator[VirtualNode]:
        """Tree-order traversal; shadow trees come before light children."""
        node = node or self.body
        yield node
        if composed and node.shadow_root is not None:
            for child in node.shadow_root.children:
                yield from self.walk(child, composed)
        for child in node.children:
            yield from self.walk(child, composed)

    def _ancestors_or_self(self, node: VirtualNode) -> Iterator[VirtualNode]:
        current: VirtualNode | None = node
        while current is not None:
            yield current
            current = current.composed_parent

    def is_connected(self, node: VirtualNode) -> bool:
        return any(ancestor is self.body for ancestor in self._ancestors_or_self(node))

    def _tree_root(self, node: VirtualNode) -> Container | None:
        current: Container | None = node
        while isinstance(current, VirtualNode) and current.parent is not None:
            current = current.parent
        return current

    def _inherited(self, node: VirtualNode, prop: str) -> str | None:
        for ancestor in self._ancestors_or_self(node):
            if prop in ancestor.style:
                return ancestor.style[prop]
        return None

    def _is_displayed(self, node: VirtualNode) -> bool:
        return all(a.style.get("display") != "none" for a in self._ancestors_or_self(node))

    def _is_fixed(self, node: VirtualNode) -> bool:
        return any(a.style.get("position") == "fixed" for a in self._ancestors_or_self(node))

    def _z_index(self, node: VirtualNode) -> int:
        for ancestor in self._ancestors_or_self(node):
            value = ancestor.style.get("z-index")
            if value not in (None, "auto") and ancestor.style.get("position", "static") != "static":
                try:
                    return int(value)
                except ValueError:
                    continue
        return 0

    def client_rect(self, node: VirtualNode) -> ClientRect:
        if node.rect is None:
            return ClientRect(0, 0, 0, 0)
        x, y, width, height = node.rect
        if self._is_fixed(node):
            return ClientRect(x, y, width, height)
        return ClientRect(x - self.scroll_x, y - self.scroll_y, width, height)

    def paint_order(self) -> list[VirtualNode]:
        """Rendered nodes, bottom-most first."""
        nodes = [n for n in self.walk() if self._is_displayed(n)]
        indexed = sorted(enumerate(nodes), key=lambda item: (self._z_index(item[1]), item[0]))
        return [node for _, node in indexed]

    def _retarget(self, node: VirtualNode) -> VirtualNode:
        root = self._tree_root(node)
        while isinstance(root, VirtualShadowRoot):
            node = root.host
            root = self._tree_root(node)
        return node

    def _hit(self, x: float, y: float) -> VirtualNode | None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return None
        for node in reversed(self.paint_order()):
            if self._inherited(node, "pointer-events") == "none":
                continue
            if self._inherited(node, "visibility") == "hidden":
                continue
            rect = self.client_rect(node)
            if rect.x <= x < rect.right and rect.y <= y < rect.bottom:
                return self._retarget(node)
        return None

    def structure(self, node: VirtualNode | None = None) -> tuple:
        """Nested ``(name, children)`` snapshot of the light tree."""
        node = node or self.body
        return (node.name, tuple(self.structure(child) for child in node.children))

    # IPageSurface

    async def element_from_point(
        self, x: float, y: float, transparent: Sequence[Any] = ()
    ) -> VirtualNode | None:
        self.hit_queries += 1
        saved = [(node, node.style.get("pointer-events")) for node in transparent]
        for node in transparent:
            node.style["pointer-events"] = "none"
        try:
            return self._hit(x, y)
        finally:
            for node, value in saved:
                if value is None:
                    node.style.pop("pointer-events", None)
                else:
                    node.style["pointer-events"] = value

    async def is_document_body(self, node: Any) -> bool:
        return node is self.body

    async def same_node(self, a: Any, b: Any) -> bool:
        return a is not None and a is b

    async def root_host(self, node: VirtualNode) -> VirtualNode | None:
        root = self._tree_root(node)
        return root.host if isinstance(root, VirtualShadowRoot) else None

    async def closest_marked(self, node: VirtualNode, marker: str) -> VirtualNode | None:
        current: Container | None = node
        while isinstance(current, VirtualNode):
            if current.attributes.get(TOOL_MARKER_ATTRIBUTE) == marker:
                return current
            current = current.parent
        return None

    async def marker_of(self, node: VirtualNode) -> str | None:
        return node.attributes.get(TOOL_MARKER_ATTRIBUTE)

    async def query_marked(self, marker: str) -> VirtualNode | None:
        for node in self.walk():
            if node.attributes.get(TOOL_MARKER_ATTRIBUTE) == marker:
                return node
        return None

    async def bounding_rect(self, node: VirtualNode) -> ClientRect:
        return self.client_rect(node)

    async def viewport_state(self) -> ViewportState:
        return ViewportState(
            scroll_x=self.scroll_x,
            scroll_y=self.scroll_y,
            width=self.width,
            height=self.height,
            device_pixel_ratio=self.device_pixel_ratio,
            screen_width=self.screen_size[0],
            screen_height=self.screen_size[1],
        )

    async def page_info(self) -> PageInfo:
        return PageInfo(url=self.url, user_agent=self.user_agent, brands=self.brands)

    async def tool_roots(self) -> list[VirtualNode]:
        roots: list[VirtualNode] = []

        def collect(node: VirtualNode) -> None:
            for child in node.children:
                if child.tag == TOOL_HOST_TAG or TOOL_MARKER_ATTRIBUTE in child.attributes:
                    roots.append(child)
                else:
                    collect(child)

        collect(self.body)
        return roots

    async def detach(self, node: VirtualNode) -> NodePosition:
        parent = node.parent
        if parent is None:
            raise ValueError(f"{node!r} is not attached")
        siblings = parent.children
        index = siblings.index(node)
        next_sibling = siblings[index + 1] if index + 1 < len(siblings) else None
        siblings.pop(index)
        node.parent = None
        return NodePosition(parent=parent, next_sibling=next_sibling)

    async def reattach(self, node: VirtualNode, position: NodePosition) -> None:
        parent = position.parent
        sibling = position.next_sibling
        if sibling is not None and sibling.parent is parent:
            parent.children.insert(parent.children.index(sibling), node)
        else:
            parent.children.append(node)
        node.parent = parent

    async def stacked_candidates(self, min_z_index: int) -> list[VirtualNode]:
        candidates = []
        for node in self.walk(composed=False):
            style = await self.computed_style(node, ["position", "z-index"])
            if style["position"] not in ("fixed", "absolute"):
                continue
            try:
                z_index = int(style["z-index"])
            except ValueError:
                continue
            if z_index >= min_z_index:
                candidates.append(node)
        return candidates

    async def inline_style(self, node: VirtualNode, properties: Sequence[str]) -> dict[str, str]:
        return {prop: node.style.get(prop, "") for prop in properties}

    async def inline_priority(self, node: VirtualNode, properties: Sequence[str]) -> dict[str, str]:
        return {prop: "important" if prop in node.important else "" for prop in properties}

    async def set_inline_style(
        self, node: VirtualNode, styles: dict[str, str], important: bool = False
    ) -> None:
        for prop, value in styles.items():
            if value:
                node.style[prop] = value
            else:
                node.style.pop(prop, None)
            if value and important:
                node.important.add(prop)
            else:
                node.important.discard(prop)

    async def computed_style(self, node: VirtualNode, properties: Sequence[str]) -> dict[str, str]:
        values = {**_COMPUTED_DEFAULTS, **node.computed, **node.style}
        if node.rect is not None:
            values.setdefault("width", f"{node.rect[2]:g}px")
            values.setdefault("height", f"{node.rect[3]:g}px")
        return {prop: values.get(prop, "") for prop in properties}

    # Rasterizer

    def _background(self, node: VirtualNode) -> tuple[int, int, int, float] | None:
        raw = node.style.get("background-color") or node.style.get("background")
        raw = raw or node.computed.get("background-color")
        if not raw:
            return None
        color = parse_color(raw)
        if color is None or color.a <= 0:
            return None
        return color.r, color.g, color.b, color.a

    def render(self) -> np.ndarray:
        """Paint the visible viewport into an ``(h, w, 4)`` RGBA array."""
        dpr = self.device_pixel_ratio
        out_width = round(self.width * dpr)
        out_height = round(self.height * dpr)
        canvas = np.full((out_height, out_width, 4), 255, dtype=np.uint8)

        for node in self.paint_order():
            if self._inherited(node, "visibility") == "hidden":
                continue
            if any(a.style.get("opacity") == "0" for a in self._ancestors_or_self(node)):
                continue
            background = self._background(node)
            if background is None:
                continue
            rect = self.client_rect(node)
            left = max(round(rect.x * dpr), 0)
            top = max(round(rect.y * dpr), 0)
            right = min(round(rect.right * dpr), out_width)
            bottom = min(round(rect.bottom * dpr), out_height)
            if right <= left or bottom <= top:
                continue
            r, g, b, alpha = background
            region = canvas[top:bottom, left:right, :3].astype(np.float32)
            blended = region * (1 - alpha) + np.array([r, g, b], dtype=np.float32) * alpha
            canvas[top:bottom, left:right, :3] = np.round(blended).astype(np.uint8)
        return canvas


class VirtualCaptureSurface(ICaptureSurface):
    """Capture surface that rasterizes a ``VirtualPage``.

    Args:
        page: Page to rasterize
        failure: Exception raised by every capture, simulating a lost runtime
    """

    def __init__(self, page: VirtualPage, failure: BaseException | None = None) -> None:
        self.page = page
        self.failure = failure
        self.capture_count = 0
        self.tool_roots_at_capture: list[int] = []

    async def capture_visible(self) -> bytes:
        self.capture_count += 1
        self.tool_roots_at_capture.append(len(await self.page.tool_roots()))
        if self.failure is not None:
            raise self.failure
        return encode_png(self.page.render())


@dataclass
class VirtualToolUI:
    """Nodes of a tool UI installed into a ``VirtualPage``."""

    host: VirtualNode
    overlay: VirtualNode
    highlighter: VirtualNode
    toolbar: VirtualNode


def install_tool_ui(
    page: VirtualPage,
    toolbar_rect: tuple[float, float, float, float] | None = None,
) -> VirtualToolUI:
    """Inject the tool UI the way the live overlay does: a fixed host with an
    open shadow root holding the selection overlay, hover box and toolbar."""
    if toolbar_rect is None:
        toolbar_rect = (page.width / 2 - 120, page.height - 68, 240, 44)
    host = page.body.append(
        VirtualNode(
            TOOL_HOST_TAG,
            name="tool-host",
            rect=(0, 0, page.width, page.height),
            style={"position": "fixed", "z-index": "2147483647", "pointer-events": "none"},
        )
    )
    shadow = host.attach_shadow()
    overlay = shadow.append(
        VirtualNode(
            "div",
            name="selection-overlay",
            rect=(0, 0, page.width, page.height),
            attributes={TOOL_MARKER_ATTRIBUTE: SELECTION_OVERLAY},
            style={"position": "fixed", "pointer-events": "auto"},
        )
    )
    highlighter = shadow.append(
        VirtualNode(
            "div",
            name="element-highlighter",
            rect=(0, 0, 0, 0),
            attributes={TOOL_MARKER_ATTRIBUTE: ELEMENT_HIGHLIGHTER},
            style={
                "position": "fixed",
                "pointer-events": "none",
                "background-color": "rgba(59, 130, 246, 0.1)",
            },
        )
    )
    toolbar = shadow.append(
        VirtualNode(
            "div",
            name="floating-toolbar",
            rect=toolbar_rect,
            attributes={TOOL_MARKER_ATTRIBUTE: FLOATING_TOOLBAR},
            style={
                "position": "fixed",
                "pointer-events": "auto",
                "background-color": "#111827",
            },
        )
    )
    return VirtualToolUI(host=host, overlay=overlay, highlighter=highlighter, toolbar=toolbar)
