"""Per-operation selection state shared by the hit-tester and the controller."""

from dataclasses import dataclass, field
from typing import Any

from ..dom.interfaces import (
    ELEMENT_HIGHLIGHTER,
    FLOATING_TOOLBAR,
    SELECTION_OVERLAY,
    IPageSurface,
)
from ..model.geometry import ClientRect, Point


@dataclass
class SelectionSession:
    """Tool UI handles plus the hit-test cache for one selection operation.

    Attributes:
        surface: Page the selection runs on
        overlays: Tool surfaces that must never be hit (overlay, hover box)
        floating_control: The tool's floating toolbar, if present
        current_element: Last accepted hit-test result
        current_rect: Bounding rect of ``current_element`` when it was hit
        last_pointer: Last pointer position in client coordinates
    """

    surface: IPageSurface
    overlays: list[Any] = field(default_factory=list)
    floating_control: Any | None = None
    current_element: Any | None = None
    current_rect: ClientRect | None = None
    last_pointer: Point | None = None
    _hosts: list[Any] | None = field(default=None, repr=False)

    @classmethod
    async def discover(cls, surface: IPageSurface) -> "SelectionSession":
        """Build a session from the tool UI currently injected in the page."""
        overlays = []
        for marker in (SELECTION_OVERLAY, ELEMENT_HIGHLIGHTER):
            node = await surface.query_marked(marker)
            if node is not None:
                overlays.append(node)
        return cls(
            surface=surface,
            overlays=overlays,
            floating_control=await surface.query_marked(FLOATING_TOOLBAR),
        )

    async def hosts(self) -> list[Any]:
        """Shadow hosts of the overlays and the floating control."""
        if self._hosts is None:
            hosts: list[Any] = []
            candidates = [*self.overlays]
            if self.floating_control is not None:
                candidates.append(self.floating_control)
            for node in candidates:
                host = await self.surface.root_host(node)
                if host is None:
                    continue
                if not any([await self.surface.same_node(host, known) for known in hosts]):
                    hosts.append(host)
            self._hosts = hosts
        return self._hosts

    async def transparent_nodes(self) -> list[Any]:
        """Everything that must be excluded from point resolution."""
        return [*self.overlays, *(await self.hosts())]

    def remember(self, node: Any, rect: ClientRect) -> None:
        self.current_element = node
        self.current_rect = rect

    def clear(self) -> None:
        self.current_element = None
        self.current_rect = None
