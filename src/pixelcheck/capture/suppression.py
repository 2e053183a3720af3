"""
UI suppression for captures.

Every change made to hide the tool UI is pushed as a reversible command and
undone in reverse order, so detached nodes go back before the same sibling
they left and style edits return to their exact inline values and priorities.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

from ..dom.interfaces import IPageSurface
from ..logging import get_logger

logger = get_logger(__name__)

HIDDEN_STYLES = {"visibility": "hidden", "display": "none", "opacity": "0"}


@dataclass
class SuppressionCommand:
    """One applied change and the action that reverts it."""

    description: str
    node: Any
    undo: Callable[[], Awaitable[None]]


class UISuppressor:
    """Hides the tool UI from a capture and puts it back afterwards.

    Args:
        surface: Page the tool UI lives in
        min_z_index: Fixed/absolute nodes at or above this z-index are hidden
    """

    def __init__(self, surface: IPageSurface, min_z_index: int = 999999) -> None:
        self.surface = surface
        self.min_z_index = min_z_index
        self._stack: list[SuppressionCommand] = []

    @property
    def depth(self) -> int:
        """Number of changes currently applied."""
        return len(self._stack)

    async def suppress(self) -> int:
        """Detach tool roots, then hide remaining high-stacking nodes.

        Returns:
            Number of commands pushed
        """
        start_depth = len(self._stack)

        for root in await self.surface.tool_roots():
            position = await self.surface.detach(root)

            async def reattach(node: Any = root, where: Any = position) -> None:
                await self.surface.reattach(node, where)

            self._stack.append(SuppressionCommand("detach", root, reattach))

        for node in await self.surface.stacked_candidates(self.min_z_index):
            original = await self.surface.inline_style(node, list(HIDDEN_STYLES))
            priority = await self.surface.inline_priority(node, list(HIDDEN_STYLES))
            await self.surface.set_inline_style(node, HIDDEN_STYLES, important=True)

            normal = {p: v for p, v in original.items() if priority.get(p) != "important"}
            forced = {p: v for p, v in original.items() if priority.get(p) == "important"}

            async def unhide(
                target: Any = node,
                normal: dict[str, str] = normal,
                forced: dict[str, str] = forced,
            ) -> None:
                await self.surface.set_inline_style(target, normal)
                if forced:
                    await self.surface.set_inline_style(target, forced, important=True)

            self._stack.append(SuppressionCommand("hide", node, unhide))

        pushed = len(self._stack) - start_depth
        logger.debug("ui_suppressed", commands=pushed)
        return pushed

    async def restore(self) -> int:
        """Undo every applied change, newest first.

        An undo that fails is logged and the remaining undos still run.

        Returns:
            Number of undos that failed
        """
        failures = 0
        while self._stack:
            command = self._stack.pop()
            try:
                await command.undo()
            except Exception as e:
                failures += 1
                logger.warning(
                    "suppression_undo_failed",
                    action=command.description,
                    error=str(e),
                    error_type=type(e).__name__,
                )
        logger.debug("ui_restored", failures=failures)
        return failures

    @asynccontextmanager
    async def suppressed(self) -> AsyncIterator["UISuppressor"]:
        """Suppress for the duration of the block; restore no matter what."""
        try:
            await self.suppress()
            yield self
        finally:
            await self.restore()
