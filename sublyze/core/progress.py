"""Progress reporter: perceived progress while a transcription is pending.

WHY: A transcription call is one opaque request that can take minutes.
Users need to see that something is happening. The provider reports
nothing, so progress is simulated: it creeps towards 95 %, slowing down as
it goes, while a status phrase rotates. It carries no correctness weight
and never holds up the real work.

HOW: next_progress() is the pure step function. ProgressReporter runs two
asyncio tasks (progress ticks and status rotation) and calls ``on_update``
with a ProgressUpdate after each change. track() is an async context
manager: it starts the tickers on entry and, on exit, cancels them, jumps
to 100 % with ``complete=True``, and schedules a reset after a short
display window without waiting for it.

RULES:
- Progress never decreases while ticking and never exceeds 95 % before completion
- Increments: 2.5 below 60 %, 1.2 below 80 %, 0.5 above
- Tickers are cancelled as soon as the tracked call settles, success or failure
- The completion display window does not delay the caller
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)

PROGRESS_CAP = 95.0

STATUS_MESSAGES = (
    "Uploading video…",
    "Analyzing audio…",
    "Generating captions…",
    "Almost done…",
)

COMPLETE_MESSAGE = "Complete!"


@dataclass(frozen=True)
class ProgressUpdate:
    progress: float
    status: str
    complete: bool = False


def next_progress(current: float) -> float:
    """One tick of simulated progress."""
    if current >= PROGRESS_CAP:
        return current
    if current < 60:
        increment = 2.5
    elif current < 80:
        increment = 1.2
    else:
        increment = 0.5
    return min(current + increment, PROGRESS_CAP)


class ProgressReporter:
    """Drives a simulated progress value on cooperative asyncio timers."""

    def __init__(
        self,
        on_update: Optional[Callable[[ProgressUpdate], None]] = None,
        tick_interval: float = 0.06,
        status_interval: float = 1.2,
        complete_display: float = 1.2,
    ) -> None:
        self.on_update = on_update
        self.tick_interval = tick_interval
        self.status_interval = status_interval
        self.complete_display = complete_display
        self.progress = 0.0
        self.status_index = 0
        self.complete = False
        self._tasks: List[asyncio.Task] = []
        self._reset_task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    @property
    def status(self) -> str:
        if self.complete:
            return COMPLETE_MESSAGE
        return STATUS_MESSAGES[self.status_index]

    def snapshot(self) -> ProgressUpdate:
        return ProgressUpdate(progress=self.progress, status=self.status, complete=self.complete)

    def _emit(self) -> None:
        if self.on_update is None:
            return
        try:
            self.on_update(self.snapshot())
        except Exception:
            logger.warning("Progress callback failed", exc_info=True)

    def tick(self) -> None:
        self.progress = next_progress(self.progress)
        self._emit()

    def rotate_status(self) -> None:
        self.status_index = (self.status_index + 1) % len(STATUS_MESSAGES)
        self._emit()

    async def _every(self, interval: float, step: Callable[[], None]) -> None:
        while True:
            await asyncio.sleep(interval)
            step()

    def start(self) -> None:
        """Reset to 0 % and start the tickers on the running event loop."""
        if self.running:
            return
        if self._reset_task is not None:
            self._reset_task.cancel()
            self._reset_task = None
        self.progress = 0.0
        self.status_index = 0
        self.complete = False
        self._emit()
        self._tasks = [
            asyncio.create_task(self._every(self.tick_interval, self.tick)),
            asyncio.create_task(self._every(self.status_interval, self.rotate_status)),
        ]

    async def stop(self) -> None:
        """Cancel the tickers, show completion, and schedule the reset."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass

        self.progress = 100.0
        self.complete = True
        self._emit()
        self._reset_task = asyncio.create_task(self._reset_after(self.complete_display))

    async def _reset_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self.reset()

    def reset(self) -> None:
        self.progress = 0.0
        self.status_index = 0
        self.complete = False
        self._emit()

    async def settled(self) -> None:
        """Wait until the post-completion reset has happened."""
        if self._reset_task is not None:
            await self._reset_task

    @asynccontextmanager
    async def track(self) -> AsyncIterator[ProgressReporter]:
        """Report progress for the duration of an ``async with`` block."""
        self.start()
        try:
            yield self
        finally:
            await self.stop()
