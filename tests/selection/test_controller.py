"""Tests for the selection controller state machine."""

import pytest
from conftest import FakeClock

from pixelcheck.exceptions import InvalidSelectionError
from pixelcheck.model.geometry import ClientRect, PageRect
from pixelcheck.model.selection import (
    ElementTarget,
    FullSurfaceTarget,
    RegionTarget,
    SelectionMode,
)
from pixelcheck.selection.controller import SelectionController, SelectionState
from pixelcheck.selection.events import SECONDARY_BUTTON, EventType, SelectionEvent
from pixelcheck.selection.scheduler import ManualFrameScheduler
from pixelcheck.selection.session import SelectionSession


def move(x: float, y: float) -> SelectionEvent:
    return SelectionEvent(EventType.POINTER_MOVE, x, y)


def click(x: float, y: float, **kwargs) -> SelectionEvent:
    return SelectionEvent(EventType.CLICK, x, y, **kwargs)


class Recorder:
    """Collects controller callbacks."""

    def __init__(self) -> None:
        self.finalized = []
        self.highlights = []

    def on_finalized(self, target) -> None:
        self.finalized.append(target)

    async def on_highlight(self, rect) -> None:
        self.highlights.append(rect)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


async def make_controller(page, recorder, scheduler, settings, clock=None, cancel_policy=None):
    session = await SelectionSession.discover(page)
    return SelectionController(
        session,
        scheduler=scheduler,
        settings=settings,
        on_finalized=recorder.on_finalized,
        on_highlight=recorder.on_highlight,
        cancel_policy=cancel_policy,
        clock=clock or FakeClock(),
    )


class TestLifecycle:
    """Test start, reset and close."""

    @pytest.mark.asyncio
    async def test_full_surface_finalizes_on_start(self, page, tool_ui, recorder, scheduler, settings):
        controller = await make_controller(page, recorder, scheduler, settings)

        await controller.start(SelectionMode.FULL_SURFACE)

        assert controller.state == SelectionState.FINALIZED
        assert recorder.finalized == [FullSurfaceTarget()]
        assert await controller.wait_finalized() == FullSurfaceTarget()

    @pytest.mark.asyncio
    async def test_start_while_active_raises(self, page, tool_ui, recorder, scheduler, settings):
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.ELEMENT)

        with pytest.raises(InvalidSelectionError) as exc_info:
            await controller.start(SelectionMode.REGION)

        assert exc_info.value.context["state"] == "active"

    @pytest.mark.asyncio
    async def test_reset_allows_another_selection(self, page, tool_ui, recorder, scheduler, settings):
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.FULL_SURFACE)

        controller.reset()
        await controller.start(SelectionMode.ELEMENT)

        assert controller.state == SelectionState.ACTIVE
        assert controller.mode == SelectionMode.ELEMENT

    @pytest.mark.asyncio
    async def test_events_ignored_when_idle(self, page, tool_ui, recorder, scheduler, settings):
        controller = await make_controller(page, recorder, scheduler, settings)

        await controller.handle_event(move(150, 150))

        assert scheduler.pending == []
        assert controller.state == SelectionState.IDLE


class TestElementMode:
    """Test element selection."""

    @pytest.mark.asyncio
    async def test_pointer_moves_coalesce_into_one_hit_test(
        self, page, tool_ui, card, button, recorder, scheduler, settings
    ):
        """Test that a burst of moves costs one hit test, for the latest point."""
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.ELEMENT)

        for x, y in [(150, 150), (160, 150), (150, 210)]:
            await controller.handle_event(move(x, y))

        assert controller.frame_pending
        assert len(scheduler.pending) == 1
        assert page.hit_queries == 0

        assert await scheduler.tick() == 1
        assert page.hit_queries == 1
        assert controller.session.current_element is button
        assert recorder.highlights == [ClientRect(140, 200, 120, 40)]
        assert not controller.frame_pending

    @pytest.mark.asyncio
    async def test_next_frame_after_tick(self, page, tool_ui, card, recorder, scheduler, settings):
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.ELEMENT)
        await controller.handle_event(move(150, 150))
        await scheduler.tick()

        await controller.handle_event(move(1000, 500))
        await scheduler.tick()

        assert page.hit_queries == 2
        assert recorder.highlights == [ClientRect(100, 120, 300, 200), None]

    @pytest.mark.asyncio
    async def test_click_finalizes_hovered_element(self, page, tool_ui, card, recorder, scheduler, settings):
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.ELEMENT)
        await controller.handle_event(move(150, 150))
        await scheduler.tick()

        await controller.handle_event(click(150, 150))

        assert controller.state == SelectionState.FINALIZED
        assert recorder.finalized == [
            ElementTarget(handle=card, rect=PageRect(100, 120, 300, 200), client_rect=ClientRect(100, 120, 300, 200))
        ]
        assert recorder.highlights[-1] is None

    @pytest.mark.asyncio
    async def test_click_flushes_pending_frame(self, page, tool_ui, card, recorder, scheduler, settings):
        """Test that a click right after a move does not wait for the frame."""
        page.scroll_to(0, 100)
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.ELEMENT)

        await controller.handle_event(move(150, 50))
        await controller.handle_event(click(150, 50))

        target = recorder.finalized[0]
        assert target.handle is card
        assert target.rect == PageRect(100, 120, 300, 200)
        assert target.client_rect == ClientRect(100, 20, 300, 200)

    @pytest.mark.asyncio
    async def test_click_on_empty_page_keeps_selecting(self, page, tool_ui, recorder, scheduler, settings):
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.ELEMENT)

        await controller.handle_event(click(1000, 500))

        assert controller.state == SelectionState.ACTIVE
        assert recorder.finalized == []

    @pytest.mark.asyncio
    async def test_scroll_reruns_hit_test(self, page, tool_ui, card, recorder, scheduler, settings):
        """Test that scrolling re-evaluates the element under a still pointer."""
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.ELEMENT)
        await controller.handle_event(move(150, 150))
        await scheduler.tick()

        page.scroll_to(0, 300)
        await controller.handle_event(SelectionEvent(EventType.SCROLL))

        assert controller.session.current_element is None
        assert recorder.highlights[-1] is None

    @pytest.mark.asyncio
    async def test_toolbar_click_is_ignored(self, page, tool_ui, card, recorder, scheduler, settings):
        """Test that clicking the floating toolbar never finalizes."""
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.ELEMENT)
        await controller.handle_event(move(150, 150))
        await scheduler.tick()

        await controller.handle_event(click(600, 670, target=tool_ui.host))

        assert controller.state == SelectionState.ACTIVE
        assert recorder.finalized == []


class TestRegionMode:
    """Test region selection."""

    @pytest.mark.asyncio
    async def test_drag_finalizes_in_page_coordinates(self, page, tool_ui, recorder, scheduler, settings):
        page.scroll_to(0, 50)
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.REGION)

        await controller.handle_event(SelectionEvent(EventType.POINTER_DOWN, 300, 260))
        await controller.handle_event(move(200, 180))
        assert controller.region_preview == PageRect(200, 230, 100, 80)
        await controller.handle_event(SelectionEvent(EventType.POINTER_UP, 100, 100))

        assert recorder.finalized == [RegionTarget(PageRect(100, 150, 200, 160))]
        assert controller.state == SelectionState.FINALIZED

    @pytest.mark.asyncio
    async def test_small_drag_is_discarded(self, page, tool_ui, recorder, scheduler, settings):
        """Test that a drag must exceed 10px on both axes."""
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.REGION)

        await controller.handle_event(SelectionEvent(EventType.POINTER_DOWN, 10, 10))
        await controller.handle_event(SelectionEvent(EventType.POINTER_UP, 20, 400))

        assert recorder.finalized == []
        assert controller.state == SelectionState.ACTIVE
        assert controller.region_preview is None

        await controller.handle_event(SelectionEvent(EventType.POINTER_DOWN, 10, 10))
        await controller.handle_event(SelectionEvent(EventType.POINTER_UP, 21, 21))

        assert recorder.finalized == [RegionTarget(PageRect(10, 10, 11, 11))]


class TestCancellation:
    """Test cancel triggers, policy and the toolbar grace window."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "event",
        [
            SelectionEvent(EventType.KEY_DOWN, key="Escape"),
            SelectionEvent(EventType.CONTEXT_MENU, 150, 150),
            SelectionEvent(EventType.POINTER_DOWN, 150, 150, button=SECONDARY_BUTTON),
        ],
    )
    async def test_cancel_triggers(self, page, tool_ui, recorder, scheduler, settings, event):
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.ELEMENT)

        await controller.handle_event(event)

        assert controller.state == SelectionState.IDLE
        assert await controller.wait_finalized() is None
        assert recorder.finalized == []

    @pytest.mark.asyncio
    async def test_cancel_policy_can_close(self, page, tool_ui, recorder, scheduler, settings):
        controller = await make_controller(
            page, recorder, scheduler, settings, cancel_policy=lambda: SelectionState.CLOSED
        )
        await controller.start(SelectionMode.REGION)

        await controller.handle_event(SelectionEvent(EventType.KEY_DOWN, key="Escape"))

        assert controller.state == SelectionState.CLOSED
        with pytest.raises(InvalidSelectionError):
            await controller.start(SelectionMode.REGION)

    @pytest.mark.asyncio
    async def test_cancel_drops_pending_frame(self, page, tool_ui, recorder, scheduler, settings):
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.ELEMENT)
        await controller.handle_event(move(150, 150))

        await controller.cancel()

        assert scheduler.pending == []
        assert not controller.frame_pending

    @pytest.mark.asyncio
    async def test_toolbar_grace_window(self, page, tool_ui, card, recorder, scheduler, settings):
        """Test that pointer events are ignored for 250ms after a toolbar interaction."""
        clock = FakeClock(10.0)
        controller = await make_controller(page, recorder, scheduler, settings, clock=clock)
        await controller.start(SelectionMode.ELEMENT)

        controller.notify_toolbar_interaction()
        clock.advance(0.1)
        await controller.handle_event(move(150, 150))
        await controller.handle_event(click(150, 150))

        assert scheduler.pending == []
        assert controller.state == SelectionState.ACTIVE

        clock.advance(0.2)
        await controller.handle_event(click(150, 150))

        assert controller.state == SelectionState.FINALIZED
        assert recorder.finalized[0].handle is card

    @pytest.mark.asyncio
    async def test_escape_works_during_grace_window(self, page, tool_ui, recorder, scheduler, settings):
        controller = await make_controller(page, recorder, scheduler, settings)
        await controller.start(SelectionMode.ELEMENT)
        controller.notify_toolbar_interaction()

        await controller.handle_event(SelectionEvent(EventType.KEY_DOWN, key="Escape"))

        assert controller.state == SelectionState.IDLE
