"""Frame schedulers used to coalesce pointer moves into one hit test per frame."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from ..logging import get_logger

logger = get_logger(__name__)

FrameCallback = Callable[[], Awaitable[None]]


class FrameScheduler(ABC):
    """Runs a callback on the next frame tick."""

    @abstractmethod
    def schedule(self, callback: FrameCallback) -> None:
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Drop every callback that has not run yet."""
        pass


class AsyncioFrameScheduler(FrameScheduler):
    """Frame ticks on the running event loop, one per ``interval`` seconds."""

    def __init__(self, interval: float = 1 / 60) -> None:
        self.interval = interval
        self._tasks: set[asyncio.Task] = set()

    def schedule(self, callback: FrameCallback) -> None:
        task = asyncio.get_running_loop().create_task(self._run(callback))
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    async def _run(self, callback: FrameCallback) -> None:
        await asyncio.sleep(self.interval)
        await callback()

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(
                "frame_callback_failed", error=str(error), error_type=type(error).__name__
            )

    def cancel(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()


class ManualFrameScheduler(FrameScheduler):
    """Frames advance only when ``tick`` is awaited. For tests and replays."""

    def __init__(self) -> None:
        self.pending: list[FrameCallback] = []

    def schedule(self, callback: FrameCallback) -> None:
        self.pending.append(callback)

    def cancel(self) -> None:
        self.pending.clear()

    async def tick(self) -> int:
        """Run callbacks queued before this tick; returns how many ran."""
        callbacks, self.pending = self.pending, []
        for callback in callbacks:
            await callback()
        return len(callbacks)
