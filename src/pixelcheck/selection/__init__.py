"""Selection: hit testing and the selection state machine."""

from .controller import SelectionController, SelectionState
from .events import EventType, SelectionEvent
from .hit_tester import HitTester
from .scheduler import AsyncioFrameScheduler, FrameScheduler, ManualFrameScheduler
from .session import SelectionSession

__all__ = [
    "SelectionController",
    "SelectionState",
    "SelectionEvent",
    "EventType",
    "HitTester",
    "SelectionSession",
    "FrameScheduler",
    "AsyncioFrameScheduler",
    "ManualFrameScheduler",
]
