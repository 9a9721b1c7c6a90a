"""
Study Task Model for StudyFlow.

A task is one unit of study work in the plan. Tasks live only in
process memory and are owned by the SessionStore, which is the only
code allowed to mutate them.

Lifecycle:
- created by a generated plan or a quick-add, ``completed=False``
- subject / note / duration editable while not completed
- completed exactly once, never reverts, frozen afterwards
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, replace
from typing import Any

QUICK_TASK_NOTE = "Quick Task"


def new_task_id() -> str:
    """Opaque, never-reused task identifier."""
    return uuid.uuid4().hex


@dataclass
class StudyTask:
    """
    A unit of study work.

    Attributes:
        id: Opaque unique identifier assigned at creation
        subject: Non-empty subject label
        duration_minutes: Positive whole minutes
        note: Optional concrete activity ("Read chapter 1")
        completed: False at creation, set True exactly once
    """

    id: str
    subject: str
    duration_minutes: int
    note: str | None = None
    completed: bool = False

    @property
    def duration_seconds(self) -> int:
        return self.duration_minutes * 60

    def copy(self) -> StudyTask:
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return asdict(self)

    def __repr__(self) -> str:
        return (
            f"<StudyTask(id={self.id}, subject={self.subject!r}, "
            f"duration={self.duration_minutes}m, completed={self.completed})>"
        )


@dataclass(frozen=True)
class TaskEdit:
    """Fields a caller may merge into a task. None means "leave unchanged"."""

    subject: str | None = None
    note: str | None = None

    def is_empty(self) -> bool:
        return self.subject is None and self.note is None


__all__ = ["QUICK_TASK_NOTE", "StudyTask", "TaskEdit", "new_task_id"]
