"""
Countdown Timer State Machine for StudyFlow.

Owns the remaining time of the single bound task.

States:
- IDLE: no task bound
- READY: task bound, not running (full or partial time left)
- RUNNING: counting down, one tick per second
- EXPIRED: reached zero; the completion callback has fired

Transitions:
    bind(task)   any      -> READY   (remaining = duration * 60)
    start()      READY    -> RUNNING (only with time left)
    pause()      RUNNING  -> READY
    reset()      READY/RUNNING -> READY (remaining = full duration)
    tick()       RUNNING  -> RUNNING | EXPIRED (fires completion once)
    skip()       READY/RUNNING -> fires completion, then IDLE
    unbind()     any      -> IDLE

The periodic tick is a scheduled handle that is cancelled on every
transition out of RUNNING and on every rebind, so at most one tick
loop exists at a time. Calls that do not apply are silent no-ops
returning False.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

from src.models.task import StudyTask

logger = logging.getLogger(__name__)

TICK_INTERVAL_SECONDS = 1.0


class TimerState(StrEnum):
    """Countdown timer states."""

    IDLE = "idle"
    READY = "ready"
    RUNNING = "running"
    EXPIRED = "expired"


def format_time(seconds: int) -> str:
    """Render seconds as MM:SS, clamping negatives to zero."""
    seconds = max(seconds, 0)
    mins, secs = divmod(seconds, 60)
    return f"{mins:02d}:{secs:02d}"


@dataclass(frozen=True)
class TimerSnapshot:
    state: TimerState
    remaining_seconds: int
    total_seconds: int
    task_id: str | None = None
    subject: str | None = None
    note: str | None = None

    @property
    def display(self) -> str:
        return format_time(self.remaining_seconds)

    @property
    def progress(self) -> float:
        """Fraction of time left, 0.0 when no task is bound."""
        if self.total_seconds <= 0:
            return 0.0
        return self.remaining_seconds / self.total_seconds

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "remaining_seconds": self.remaining_seconds,
            "total_seconds": self.total_seconds,
            "display": self.display,
            "progress": self.progress,
            "task_id": self.task_id,
            "subject": self.subject,
            "note": self.note,
        }


# =============================================================================
# Tick Scheduling
# =============================================================================


class TickHandle(Protocol):
    def cancel(self) -> Any: ...


class TickScheduler(Protocol):
    """Starts a recurring tick; the returned handle stops it."""

    def schedule(self, callback: Callable[[], Any]) -> TickHandle: ...


class AsyncioTickScheduler:
    """
    Recurring tick on the running asyncio loop.

    Each schedule() call creates one task that sleeps ``interval`` seconds
    and invokes the callback, forever, until the handle is cancelled.
    """

    def __init__(self, interval: float = TICK_INTERVAL_SECONDS) -> None:
        self.interval = interval

    def schedule(self, callback: Callable[[], Any]) -> asyncio.Task[None]:
        loop = asyncio.get_running_loop()
        return loop.create_task(self._run(callback), name="countdown-tick")

    async def _run(self, callback: Callable[[], Any]) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                callback()
            except Exception:
                logger.exception("Tick callback failed; countdown continues")


# =============================================================================
# Countdown Timer
# =============================================================================

CompletionCallback = Callable[[StudyTask], Any]
TimerCallback = Callable[[TimerSnapshot], None]


class CountdownTimer:
    """
    Countdown for one bound task.

    Args:
        on_complete: Called with the bound task when it expires or is skipped
        scheduler: Tick source; None means ticks are driven manually via tick()
    """

    def __init__(
        self,
        on_complete: CompletionCallback | None = None,
        scheduler: TickScheduler | None = None,
    ) -> None:
        self._on_complete = on_complete
        self._scheduler = scheduler
        self._handle: TickHandle | None = None
        self._subscribers: list[TimerCallback] = []

        self._task: StudyTask | None = None
        self._state = TimerState.IDLE
        self._remaining = 0
        self._total = 0

    # ----- Read access -----

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def task(self) -> StudyTask | None:
        return self._task.copy() if self._task else None

    @property
    def bound_task_id(self) -> str | None:
        return self._task.id if self._task else None

    @property
    def is_ticking(self) -> bool:
        return self._handle is not None

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            state=self._state,
            remaining_seconds=self._remaining,
            total_seconds=self._total,
            task_id=self._task.id if self._task else None,
            subject=self._task.subject if self._task else None,
            note=self._task.note if self._task else None,
        )

    # ----- Callbacks -----

    def set_on_complete(self, fn: CompletionCallback | None) -> None:
        self._on_complete = fn

    def subscribe(self, callback: TimerCallback) -> Callable[[], None]:
        """Register a snapshot listener; returns the unsubscribe callable."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _emit(self) -> None:
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            callback(snapshot)

    def _fire_complete(self, task: StudyTask) -> None:
        if self._on_complete:
            self._on_complete(task)

    # ----- Tick handle -----

    def _start_ticks(self) -> None:
        self._cancel_ticks()
        if self._scheduler is not None:
            self._handle = self._scheduler.schedule(self.tick)

    def _cancel_ticks(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    # ----- Transitions -----

    def bind(self, task: StudyTask) -> None:
        """Bind a task and reset to its full duration. Stops any running countdown."""
        self._cancel_ticks()
        self._task = task.copy()
        self._total = self._remaining = task.duration_seconds
        self._state = TimerState.READY
        logger.debug("Timer bound to task %s (%ds)", task.id, self._total)
        self._emit()

    def unbind(self) -> None:
        """Drop the bound task without completing it."""
        self._cancel_ticks()
        self._task = None
        self._total = self._remaining = 0
        self._state = TimerState.IDLE
        self._emit()

    def start(self) -> bool:
        if self._state != TimerState.READY or self._task is None or self._remaining <= 0:
            return False
        self._state = TimerState.RUNNING
        self._start_ticks()
        self._emit()
        return True

    def pause(self) -> bool:
        if self._state != TimerState.RUNNING:
            return False
        self._cancel_ticks()
        self._state = TimerState.READY
        self._emit()
        return True

    def toggle(self) -> bool:
        """Start when ready, pause when running."""
        if self._state == TimerState.RUNNING:
            return self.pause()
        return self.start()

    def reset(self) -> bool:
        """Restore full time. EXPIRED is terminal for the bound task."""
        if self._task is None or self._state == TimerState.EXPIRED:
            return False
        self._cancel_ticks()
        self._total = self._remaining = self._task.duration_seconds
        self._state = TimerState.READY
        self._emit()
        return True

    def tick(self) -> bool:
        """
        Advance one second while running.

        Returns:
            True if this tick expired the countdown
        """
        if self._state != TimerState.RUNNING or self._task is None:
            return False

        self._remaining = max(self._remaining - 1, 0)
        if self._remaining > 0:
            self._emit()
            return False

        self._cancel_ticks()
        self._state = TimerState.EXPIRED
        logger.debug("Timer expired for task %s", self._task.id)
        self._emit()
        self._fire_complete(self._task.copy())
        return True

    def skip(self) -> bool:
        """Complete the bound task now, regardless of time left, then unbind."""
        if self._state not in (TimerState.READY, TimerState.RUNNING) or self._task is None:
            return False
        task = self._task.copy()
        self._cancel_ticks()
        self._fire_complete(task)
        self.unbind()
        return True

    def update_task(self, task: StudyTask) -> bool:
        """
        Refresh the bound task's details after an edit.

        While READY a duration change resets remaining time to the new
        duration. While RUNNING the countdown is left alone and the new
        duration applies from the next bind or reset.

        Returns:
            False if the task is not the bound one
        """
        if self._task is None or task.id != self._task.id:
            return False
        duration_changed = task.duration_minutes != self._task.duration_minutes
        self._task = task.copy()
        if duration_changed and self._state == TimerState.READY:
            self._total = self._remaining = task.duration_seconds
        self._emit()
        return True

    def close(self) -> None:
        """Cancel the tick loop (application shutdown)."""
        self._cancel_ticks()


__all__ = [
    "TICK_INTERVAL_SECONDS",
    "AsyncioTickScheduler",
    "CountdownTimer",
    "TickHandle",
    "TickScheduler",
    "TimerSnapshot",
    "TimerState",
    "format_time",
]
