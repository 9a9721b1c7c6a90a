"""
Session State Store for StudyFlow.

In-memory, process-local state for one study session:
- plan: ordered list of StudyTask
- active task: at most one non-completed task, referenced by id
- log: append-only list of LogEntry

Every public mutation is synchronous and atomic with respect to the
event loop. Operations on a completed task (or with no active task)
are silent no-ops that return False and emit nothing.

The active task is stored as an id into the plan rather than a
second copy, so the plan entry and the active task are always the
same object.

Subscribers receive a SessionSnapshot after every applied mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from src.models.plan import PlanItem
from src.models.session import LogEntry, SessionSnapshot
from src.models.task import QUICK_TASK_NOTE, StudyTask, TaskEdit, new_task_id

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[SessionSnapshot], None]

# Notices shown to the user after a mutation
NOTICE_PLAN_GENERATED = "Study Plan Generated!"
NOTICE_TASK_STARTED = "Task Started"
NOTICE_TASK_UPDATED = "Task Updated"
NOTICE_TASK_REMOVED = "Task Removed"
NOTICE_TASK_COMPLETED = "Task Completed!"

MAX_DURATION_MINUTES = 120


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionStore:
    """
    Owner of the plan, the active task and the completion log.

    Args:
        clock: Wall-clock source for log timestamps
        id_factory: Task id source (must never repeat)
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self._plan: list[StudyTask] = []
        self._active_id: str | None = None
        self._log: list[LogEntry] = []
        self._notice: str | None = None
        self._clock = clock
        self._id_factory = id_factory
        self._subscribers: list[SnapshotCallback] = []

    # ----- Read access -----

    @property
    def plan(self) -> list[StudyTask]:
        """Copies of the plan entries in display order."""
        return [task.copy() for task in self._plan]

    @property
    def active_task(self) -> StudyTask | None:
        task = self._find(self._active_id)
        return task.copy() if task else None

    @property
    def log(self) -> list[LogEntry]:
        """Completion log, newest first."""
        return list(reversed(self._log))

    def get_task(self, task_id: str) -> StudyTask | None:
        task = self._find(task_id)
        return task.copy() if task else None

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            plan=self.plan,
            active_task=self.active_task,
            log=self.log,
            notice=self._notice,
        )

    # ----- Subscriptions -----

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """
        Register a snapshot listener.

        Returns:
            Callable that removes the listener
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _emit(self, notice: str | None) -> None:
        self._notice = notice
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            callback(snapshot)

    # ----- Mutations -----

    def set_plan(self, items: Iterable[PlanItem]) -> list[StudyTask]:
        """
        Replace the plan wholesale with freshly generated tasks.

        Assigns new ids, leaves the log untouched and clears the active task.

        Returns:
            Copies of the new plan entries
        """
        self._plan = [
            StudyTask(
                id=self._id_factory(),
                subject=item.subject,
                duration_minutes=item.duration_minutes,
                note=item.note,
            )
            for item in items
        ]
        self._active_id = None
        logger.debug("Plan replaced with %d tasks", len(self._plan))
        self._emit(NOTICE_PLAN_GENERATED)
        return self.plan

    def add_quick_task(self, subject: str, duration_minutes: int) -> StudyTask:
        """
        Prepend a one-off task and make it the active task.

        Raises:
            ValueError: If subject is blank or duration is below one minute
        """
        subject = subject.strip() if isinstance(subject, str) else ""
        if not subject:
            raise ValueError("Task name is required")
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
            raise ValueError("Duration must be a whole number of minutes")
        if duration_minutes < 1:
            raise ValueError("Duration must be at least 1 minute")

        task = StudyTask(
            id=self._id_factory(),
            subject=subject,
            duration_minutes=duration_minutes,
            note=QUICK_TASK_NOTE,
        )
        self._plan.insert(0, task)
        self._active_id = task.id
        logger.debug("Quick task %s added and selected", task.id)
        self._emit(NOTICE_TASK_STARTED)
        return task.copy()

    def select_task(self, task_id: str) -> bool:
        """
        Make a task the active one, detaching the previous without completing it.

        Returns:
            False (no-op) if the task is unknown or completed
        """
        task = self._find(task_id)
        if task is None or task.completed:
            return False
        self._active_id = task.id
        self._emit(None)
        return True

    def edit_task(self, task_id: str, edit: TaskEdit) -> bool:
        """
        Merge subject/note into a non-completed task.

        A blank subject is ignored; a blank note clears the note.

        Returns:
            False (no-op) if the task is unknown, completed, or nothing changes
        """
        task = self._find(task_id)
        if task is None or task.completed or edit.is_empty():
            return False

        subject = task.subject
        if edit.subject is not None and edit.subject.strip():
            subject = edit.subject.strip()
        note = task.note
        if edit.note is not None:
            note = edit.note.strip() or None
        if (subject, note) == (task.subject, task.note):
            return False

        task.subject, task.note = subject, note
        self._emit(NOTICE_TASK_UPDATED)
        return True

    def set_duration(self, task_id: str, minutes: int) -> bool:
        """
        Change the duration of a non-completed task.

        Returns:
            False (no-op) if the task is unknown, completed, or minutes out of range
        """
        task = self._find(task_id)
        if task is None or task.completed:
            return False
        if isinstance(minutes, bool) or not isinstance(minutes, int):
            return False
        if not 1 <= minutes <= MAX_DURATION_MINUTES:
            return False

        task.duration_minutes = minutes
        self._emit(None)
        return True

    def delete_task(self, task_id: str) -> bool:
        """
        Remove a task from the plan, clearing the active task if it was active.

        The timer is not touched here; the caller stops it.

        Returns:
            False if the task is unknown
        """
        task = self._find(task_id)
        if task is None:
            return False

        self._plan.remove(task)
        if self._active_id == task_id:
            self._active_id = None
        logger.debug("Task %s deleted", task_id)
        self._emit(NOTICE_TASK_REMOVED)
        return True

    def complete_active_task(self) -> LogEntry | None:
        """
        Complete the active task: log it, mark it completed, clear the active task.

        Returns:
            The new LogEntry, or None (no-op) if no task is active
        """
        task = self._find(self._active_id)
        if task is None or task.completed:
            return None

        entry = LogEntry(
            task_id=task.id,
            subject=task.subject,
            note=task.note,
            completed_at=self._clock(),
        )
        self._log.append(entry)
        task.completed = True
        self._active_id = None
        logger.info("Task %s completed: %s", task.id, task.subject)
        self._emit(NOTICE_TASK_COMPLETED)
        return entry

    # ----- Internals -----

    def _find(self, task_id: str | None) -> StudyTask | None:
        if task_id is None:
            return None
        for task in self._plan:
            if task.id == task_id:
                return task
        return None


__all__ = [
    "MAX_DURATION_MINUTES",
    "NOTICE_PLAN_GENERATED",
    "NOTICE_TASK_COMPLETED",
    "NOTICE_TASK_REMOVED",
    "NOTICE_TASK_STARTED",
    "NOTICE_TASK_UPDATED",
    "SessionStore",
]
