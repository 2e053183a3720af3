"""Page input events as seen by the selection controller."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(Enum):
    """Input events the controller reacts to."""

    POINTER_MOVE = "pointermove"
    POINTER_DOWN = "pointerdown"
    POINTER_UP = "pointerup"
    CLICK = "click"
    CONTEXT_MENU = "contextmenu"
    KEY_DOWN = "keydown"
    SCROLL = "scroll"
    RESIZE = "resize"


PRIMARY_BUTTON = 0
SECONDARY_BUTTON = 2


@dataclass(frozen=True)
class SelectionEvent:
    """One input event.

    Attributes:
        type: Event kind
        client_x: Viewport-relative x of the pointer
        client_y: Viewport-relative y of the pointer
        button: Pointer button (0 primary, 2 secondary)
        key: Key name for keyboard events
        target: Node handle the event was dispatched to
        path: Composed dispatch path, innermost first; empty when unknown
    """

    type: EventType
    client_x: float = 0.0
    client_y: float = 0.0
    button: int = PRIMARY_BUTTON
    key: str | None = None
    target: Any | None = None
    path: tuple[Any, ...] = field(default_factory=tuple)

    @property
    def is_pointer(self) -> bool:
        return self.type in (
            EventType.POINTER_MOVE,
            EventType.POINTER_DOWN,
            EventType.POINTER_UP,
            EventType.CLICK,
            EventType.CONTEXT_MENU,
        )

    @property
    def is_cancel(self) -> bool:
        """Secondary button, context menu or Escape."""
        if self.type == EventType.CONTEXT_MENU:
            return True
        if self.type == EventType.POINTER_DOWN and self.button == SECONDARY_BUTTON:
            return True
        return self.type == EventType.KEY_DOWN and self.key == "Escape"

    @classmethod
    def from_dict(cls, data: dict[str, Any], target: Any = None, path: tuple = ()) -> "SelectionEvent":
        return cls(
            type=EventType(data["type"]),
            client_x=float(data.get("clientX", 0) or 0),
            client_y=float(data.get("clientY", 0) or 0),
            button=int(data.get("button", 0) or 0),
            key=data.get("key"),
            target=target,
            path=tuple(path),
        )
