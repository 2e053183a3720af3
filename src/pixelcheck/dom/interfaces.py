"""Page surface interface definitions.

Selection, suppression and capture never talk to a browser directly. They go
through these two interfaces so the same algorithms run against a live page
or an in-memory page model. Node handles are opaque to callers.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..model.geometry import ClientRect, ViewportState

TOOL_MARKER_ATTRIBUTE = "data-pixelcheck-ui"
TOOL_HOST_TAG = "pixelcheck-ui"
FLOATING_TOOLBAR = "floating-toolbar"
SELECTION_OVERLAY = "selection-overlay"
ELEMENT_HIGHLIGHTER = "element-highlighter"


@dataclass(frozen=True)
class NodePosition:
    """Where a detached node lived, for exact reinsertion."""

    parent: Any
    next_sibling: Any | None = None


@dataclass(frozen=True)
class PageInfo:
    """Identity of the page: location and user agent."""

    url: str
    user_agent: str
    brands: tuple[str, ...] = field(default_factory=tuple)


class IPageSurface(ABC):
    """Interface for DOM queries and reversible DOM/style edits."""

    @abstractmethod
    async def element_from_point(
        self, x: float, y: float, transparent: Sequence[Any] = ()
    ) -> Any | None:
        """Topmost element at a viewport point.

        Every node in ``transparent`` is excluded from point resolution for
        the duration of the query and restored in the same step.

        Args:
            x: Client x coordinate
            y: Client y coordinate
            transparent: Nodes that must not intercept the point

        Returns:
            Node handle, or None when nothing is under the point
        """
        pass

    @abstractmethod
    async def is_document_body(self, node: Any) -> bool:
        """Whether ``node`` is the document body or the root element."""
        pass

    @abstractmethod
    async def same_node(self, a: Any, b: Any) -> bool:
        pass

    @abstractmethod
    async def root_host(self, node: Any) -> Any | None:
        """Host element of the shadow root containing ``node``, if any."""
        pass

    @abstractmethod
    async def closest_marked(self, node: Any, marker: str) -> Any | None:
        """Nearest inclusive ancestor in the same tree marked with ``marker``."""
        pass

    @abstractmethod
    async def marker_of(self, node: Any) -> str | None:
        """Value of the tool marker attribute on ``node``."""
        pass

    @abstractmethod
    async def query_marked(self, marker: str) -> Any | None:
        """First node marked with ``marker``, searching open shadow roots too."""
        pass

    @abstractmethod
    async def bounding_rect(self, node: Any) -> ClientRect:
        pass

    @abstractmethod
    async def viewport_state(self) -> ViewportState:
        pass

    @abstractmethod
    async def page_info(self) -> PageInfo:
        pass

    @abstractmethod
    async def tool_roots(self) -> list[Any]:
        """Top-level nodes of the injected tool UI."""
        pass

    @abstractmethod
    async def detach(self, node: Any) -> NodePosition:
        """Remove ``node`` from the document and report where it was."""
        pass

    @abstractmethod
    async def reattach(self, node: Any, position: NodePosition) -> None:
        """Reinsert ``node`` before ``position.next_sibling`` (or last)."""
        pass

    @abstractmethod
    async def stacked_candidates(self, min_z_index: int) -> list[Any]:
        """Fixed or absolute nodes whose z-index is at least ``min_z_index``."""
        pass

    @abstractmethod
    async def inline_style(self, node: Any, properties: Sequence[str]) -> dict[str, str]:
        pass

    @abstractmethod
    async def inline_priority(self, node: Any, properties: Sequence[str]) -> dict[str, str]:
        """Inline priority per property: ``"important"`` or ``""``."""
        pass

    @abstractmethod
    async def set_inline_style(
        self, node: Any, styles: dict[str, str], important: bool = False
    ) -> None:
        """Set inline style properties; an empty value removes the property."""
        pass

    @abstractmethod
    async def computed_style(self, node: Any, properties: Sequence[str]) -> dict[str, str]:
        pass


class ICaptureSurface(ABC):
    """Interface for grabbing the visible surface."""

    @abstractmethod
    async def capture_visible(self) -> bytes:
        """Capture the visible viewport at device resolution.

        Returns:
            PNG bytes

        Raises:
            CaptureUnavailable: If the surface cannot be reached
        """
        pass
