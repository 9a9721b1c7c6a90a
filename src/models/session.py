"""
Session Log and Snapshot Models for StudyFlow.

LogEntry is the immutable record written when a task completes.
SessionSnapshot is what the SessionStore hands to subscribers after
every mutation: detached copies, safe to render or serialize.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.models.task import StudyTask


@dataclass(frozen=True)
class LogEntry:
    """
    Record of one completed task.

    Attributes:
        task_id: Id of the task that completed
        subject: Subject at completion time
        note: Note at completion time
        completed_at: Wall-clock completion time (aware, UTC)
    """

    task_id: str
    subject: str
    note: str | None
    completed_at: datetime

    @property
    def completed_at_display(self) -> str:
        """Local ``HH:MM`` rendering of the completion time."""
        return self.completed_at.astimezone().strftime("%H:%M")

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "subject": self.subject,
            "note": self.note,
            "completed_at": self.completed_at.isoformat(),
            "completed_at_display": self.completed_at_display,
        }


@dataclass(frozen=True)
class SessionSnapshot:
    """
    Point-in-time view of the session.

    Attributes:
        plan: Plan entries in display order
        active_task: Task bound as active, if any
        log: Completed-task log, newest first
        notice: Short message about the last mutation ("Task Removed")
    """

    plan: list[StudyTask] = field(default_factory=list)
    active_task: StudyTask | None = None
    log: list[LogEntry] = field(default_factory=list)
    notice: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "plan": [task.to_dict() for task in self.plan],
            "active_task": self.active_task.to_dict() if self.active_task else None,
            "log": [entry.to_dict() for entry in self.log],
            "notice": self.notice,
        }


__all__ = ["LogEntry", "SessionSnapshot"]
