"""
Selection controller.

State machine driving element, region and full-surface selection:

    IDLE -> ACTIVE(mode) -> FINALIZED -> (IDLE | CLOSED)

Pointer moves in element mode are coalesced: a pending-frame flag plus a
latest-event slot guarantee at most one hit test per frame tick, always for
the most recent pointer position.
"""

import asyncio
import inspect
import time
from collections.abc import Callable
from enum import Enum
from typing import Any

from ..config import PixelCheckSettings, get_settings
from ..logging import SelectionLogger, get_logger
from ..model.geometry import ClientRect, PageRect, Point
from ..model.selection import (
    ElementTarget,
    FullSurfaceTarget,
    RegionTarget,
    SelectionMode,
    SelectionTarget,
)
from ..selection_exceptions import InvalidSelectionError
from .events import PRIMARY_BUTTON, EventType, SelectionEvent
from .hit_tester import HitTester
from .scheduler import AsyncioFrameScheduler, FrameScheduler
from .session import SelectionSession

logger = get_logger(__name__)


class SelectionState(Enum):
    """Lifecycle of a selection."""

    IDLE = "idle"
    ACTIVE = "active"
    FINALIZED = "finalized"
    CLOSED = "closed"


FinalizedCallback = Callable[[SelectionTarget], Any]
HighlightCallback = Callable[[ClientRect | None], Any]
CancelPolicy = Callable[[], SelectionState]


async def _notify(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class SelectionController:
    """Turns page input events into a finalized ``SelectionTarget``.

    Args:
        session: Session holding the tool UI handles and hit-test cache
        hit_tester: Hit tester; built from ``session`` when omitted
        scheduler: Frame scheduler; defaults to one tick per frame interval
        settings: Settings providing thresholds and timings
        on_finalized: Called with the target when a selection completes
        on_highlight: Called with the hovered element's rect, or None
        cancel_policy: Returns the state to enter on cancel (default IDLE)
        clock: Monotonic clock in seconds
    """

    def __init__(
        self,
        session: SelectionSession,
        hit_tester: HitTester | None = None,
        scheduler: FrameScheduler | None = None,
        settings: PixelCheckSettings | None = None,
        on_finalized: FinalizedCallback | None = None,
        on_highlight: HighlightCallback | None = None,
        cancel_policy: CancelPolicy | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session = session
        self.settings = settings or get_settings()
        self.hit_tester = hit_tester or HitTester(session)
        self.scheduler = scheduler or AsyncioFrameScheduler(self.settings.frame_interval)
        self.on_finalized = on_finalized
        self.on_highlight = on_highlight
        self.cancel_policy = cancel_policy
        self.clock = clock

        self.state = SelectionState.IDLE
        self.mode: SelectionMode | None = None
        self.target: SelectionTarget | None = None

        self._frame_pending = False
        self._latest_move: SelectionEvent | None = None
        self._region_start: Point | None = None
        self._region_end: Point | None = None
        self._toolbar_grace_until = 0.0
        self._done = asyncio.Event()
        self._transitions = SelectionLogger(logger)

    @property
    def is_active(self) -> bool:
        return self.state == SelectionState.ACTIVE

    @property
    def frame_pending(self) -> bool:
        return self._frame_pending

    def _transition(self, to_state: SelectionState, trigger: str) -> None:
        self._transitions.log_transition(
            self.state.value,
            to_state.value,
            trigger=trigger,
            mode=self.mode.value if self.mode else None,
        )
        self.state = to_state

    def _reset_tracking(self) -> None:
        self._frame_pending = False
        self._latest_move = None
        self._region_start = None
        self._region_end = None
        self.scheduler.cancel()

    async def start(self, mode: SelectionMode) -> None:
        """Enter ``ACTIVE(mode)``.

        Raises:
            InvalidSelectionError: If already active or closed
        """
        if self.state in (SelectionState.ACTIVE, SelectionState.CLOSED):
            raise InvalidSelectionError("start", self.state.value, mode=mode.value)

        self.mode = mode
        self.target = None
        self._done = asyncio.Event()
        self._reset_tracking()
        self.session.clear()
        self._transition(SelectionState.ACTIVE, "start")

        if mode == SelectionMode.FULL_SURFACE:
            await self._finalize(FullSurfaceTarget())

    async def wait_finalized(self) -> SelectionTarget | None:
        """Wait until the current selection finalizes or is cancelled."""
        await self._done.wait()
        return self.target

    def notify_toolbar_interaction(self) -> None:
        """Ignore pointer events for the toolbar grace period."""
        self._toolbar_grace_until = self.clock() + self.settings.toolbar_grace_period

    def _in_toolbar_grace(self) -> bool:
        return self.clock() < self._toolbar_grace_until

    async def handle_event(self, event: SelectionEvent) -> None:
        """Feed one input event to the state machine."""
        if not self.is_active:
            return

        if event.type == EventType.KEY_DOWN:
            if event.is_cancel:
                await self.cancel("escape")
            return

        if event.type in (EventType.SCROLL, EventType.RESIZE):
            await self.viewport_changed()
            return

        if event.is_pointer and self._in_toolbar_grace():
            return

        if event.type != EventType.POINTER_MOVE:
            if await self.hit_tester.targets_floating_control(event):
                logger.debug("toolbar_event_ignored", event_type=event.type.value)
                return

        if event.is_cancel:
            await self.cancel(event.type.value)
            return

        if self.mode == SelectionMode.ELEMENT:
            await self._handle_element_event(event)
        elif self.mode == SelectionMode.REGION:
            await self._handle_region_event(event)

    # Element mode

    async def _handle_element_event(self, event: SelectionEvent) -> None:
        if event.type == EventType.POINTER_MOVE:
            self.session.last_pointer = Point(event.client_x, event.client_y)
            self._latest_move = event
            if not self._frame_pending:
                self._frame_pending = True
                self.scheduler.schedule(self.flush_frame)
        elif event.type == EventType.CLICK and event.button == PRIMARY_BUTTON:
            await self._confirm_element(event)

    async def flush_frame(self) -> None:
        """Run the coalesced hit test for the latest pointer move."""
        self._frame_pending = False
        event, self._latest_move = self._latest_move, None
        if event is None or not self.is_active or self.mode != SelectionMode.ELEMENT:
            return
        await self._run_hit_test(event.client_x, event.client_y, event.path or None)

    async def _run_hit_test(self, x: float, y: float, path: Any = None) -> None:
        node = await self.hit_tester.hit_test(x, y, path)
        await _notify(self.on_highlight, self.session.current_rect if node is not None else None)

    async def viewport_changed(self) -> None:
        """Re-run the hit test at the last pointer position after scroll or resize."""
        if not self.is_active or self.mode != SelectionMode.ELEMENT:
            return
        pointer = self.session.last_pointer
        if pointer is None:
            return
        await self._run_hit_test(pointer.x, pointer.y)

    async def _confirm_element(self, event: SelectionEvent) -> None:
        if self._frame_pending:
            await self.flush_frame()
        if self.session.current_element is None:
            await self._run_hit_test(event.client_x, event.client_y, event.path or None)

        node = self.session.current_element
        rect = self.session.current_rect
        if node is None or rect is None:
            logger.debug("element_confirm_without_target", x=event.client_x, y=event.client_y)
            return

        viewport = await self.session.surface.viewport_state()
        page_rect = PageRect.from_client(rect, viewport.scroll_x, viewport.scroll_y)
        await self._finalize(ElementTarget(handle=node, rect=page_rect, client_rect=rect))

    # Region mode

    async def _page_point(self, event: SelectionEvent) -> Point:
        viewport = await self.session.surface.viewport_state()
        return Point(event.client_x + viewport.scroll_x, event.client_y + viewport.scroll_y)

    async def _handle_region_event(self, event: SelectionEvent) -> None:
        if event.type == EventType.POINTER_DOWN and event.button == PRIMARY_BUTTON:
            self._region_start = await self._page_point(event)
            self._region_end = self._region_start
        elif event.type == EventType.POINTER_MOVE and self._region_start is not None:
            self._region_end = await self._page_point(event)
        elif event.type == EventType.POINTER_UP and self._region_start is not None:
            self._region_end = await self._page_point(event)
            rect = PageRect.from_points(self._region_start, self._region_end)
            self._region_start = None
            self._region_end = None

            minimum = self.settings.min_region_size
            if rect.width > minimum and rect.height > minimum:
                await self._finalize(RegionTarget(rect=rect))
            else:
                logger.debug("region_discarded", width=rect.width, height=rect.height)

    @property
    def region_preview(self) -> PageRect | None:
        """Rectangle of the drag in progress, in page coordinates."""
        if self._region_start is None or self._region_end is None:
            return None
        return PageRect.from_points(self._region_start, self._region_end)

    # Completion

    async def _finalize(self, target: SelectionTarget) -> None:
        self.target = target
        self._reset_tracking()
        self._transition(SelectionState.FINALIZED, type(target).__name__)
        self._done.set()
        await _notify(self.on_highlight, None)
        await _notify(self.on_finalized, target)

    async def cancel(self, trigger: str = "cancel") -> None:
        """Abandon the active selection and move to the policy's state."""
        if not self.is_active:
            return
        next_state = self.cancel_policy() if self.cancel_policy else SelectionState.IDLE
        if next_state not in (SelectionState.IDLE, SelectionState.CLOSED):
            next_state = SelectionState.IDLE
        self._reset_tracking()
        self.session.clear()
        self.target = None
        self._transition(next_state, trigger)
        self._done.set()
        await _notify(self.on_highlight, None)

    def reset(self) -> None:
        """Return a finalized controller to IDLE."""
        if self.state == SelectionState.FINALIZED:
            self._transition(SelectionState.IDLE, "reset")

    def close(self) -> None:
        self._reset_tracking()
        self._transition(SelectionState.CLOSED, "close")
        self._done.set()
