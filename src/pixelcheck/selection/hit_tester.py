"""
Hit-tester.

Resolves the page element under the pointer while treating the tool's own
UI as if it were not there. Overlays and their shadow hosts are excluded
from point resolution; anything belonging to the floating toolbar is
rejected by ancestor lookup, by walking the composed event path, and, when
no path is available, by a bounds check against the toolbar's rect.
"""

from collections.abc import Sequence
from typing import Any

from ..dom.interfaces import FLOATING_TOOLBAR
from ..logging import get_logger
from .events import SelectionEvent
from .session import SelectionSession

logger = get_logger(__name__)


class HitTester:
    """Hit testing for one selection session."""

    def __init__(self, session: SelectionSession) -> None:
        self.session = session

    @property
    def surface(self):
        return self.session.surface

    async def hit_test(
        self, client_x: float, client_y: float, path: Sequence[Any] | None = None
    ) -> Any | None:
        """Find the selectable element at a client point.

        Args:
            client_x: Pointer x relative to the viewport
            client_y: Pointer y relative to the viewport
            path: Composed event path of the triggering event, if known

        Returns:
            Node handle, or None when the point is over the body, the tool UI
            or nothing at all. The session cache is updated either way.
        """
        transparent = await self.session.transparent_nodes()
        node = await self.surface.element_from_point(client_x, client_y, transparent)

        reason = await self._rejection(node, client_x, client_y, path, transparent)
        if reason is not None:
            logger.debug("hit_test_rejected", reason=reason, x=client_x, y=client_y)
            self.session.clear()
            return None

        rect = await self.surface.bounding_rect(node)
        self.session.remember(node, rect)
        return node

    async def _rejection(
        self,
        node: Any | None,
        x: float,
        y: float,
        path: Sequence[Any] | None,
        transparent: list[Any],
    ) -> str | None:
        if node is None:
            return "nothing_at_point"
        if await self.surface.is_document_body(node):
            return "document_body"
        for tool_node in transparent:
            if await self.surface.same_node(node, tool_node):
                return "tool_overlay"
        if await self.surface.closest_marked(node, FLOATING_TOOLBAR) is not None:
            return "floating_control"
        if path:
            if await self._path_contains_control(path):
                return "floating_control_path"
        elif await self._within_control_bounds(x, y):
            return "floating_control_bounds"
        return None

    async def _path_contains_control(self, path: Sequence[Any]) -> bool:
        for node in path:
            if node is None:
                continue
            if await self.surface.marker_of(node) == FLOATING_TOOLBAR:
                return True
        return False

    async def _within_control_bounds(self, x: float, y: float) -> bool:
        control = self.session.floating_control
        if control is None:
            return False
        rect = await self.surface.bounding_rect(control)
        if rect.width <= 0 or rect.height <= 0:
            return False
        return rect.contains_point(x, y)

    async def _is_tool_host(self, node: Any) -> bool:
        for host in await self.session.hosts():
            if await self.surface.same_node(node, host):
                return True
        return False

    async def targets_floating_control(self, event: SelectionEvent) -> bool:
        """Whether an input event was aimed at the floating toolbar.

        Checks the target's marked ancestors, then the composed path, then the
        element at the event point, and finally the toolbar bounds when the
        target is a tool host (events retargeted out of the shadow tree).
        """
        target = event.target
        if target is not None:
            if await self.surface.closest_marked(target, FLOATING_TOOLBAR) is not None:
                return True
        if event.path and await self._path_contains_control(event.path):
            return True

        transparent = await self.session.transparent_nodes()
        at_point = await self.surface.element_from_point(
            event.client_x, event.client_y, transparent
        )
        if at_point is not None:
            if await self.surface.closest_marked(at_point, FLOATING_TOOLBAR) is not None:
                return True

        if target is not None and await self._is_tool_host(target):
            return await self._within_control_bounds(event.client_x, event.client_y)
        if at_point is not None and await self._is_tool_host(at_point):
            return await self._within_control_bounds(event.client_x, event.client_y)
        return False
