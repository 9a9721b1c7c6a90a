"""
Models package for StudyFlow.

In-memory dataclasses for session state and pydantic schemas for the
generative model boundary.

Usage:
    from src.models import StudyTask, LogEntry, SessionSnapshot
    from src.models import PlanItem, StudyPlanOutput, ChatOutput
"""

from src.models.plan import (
    CHAT_RESPONSE_SCHEMA,
    PLAN_RESPONSE_SCHEMA,
    ChatInput,
    ChatOutput,
    PlanItem,
    StudyPlanInput,
    StudyPlanOutput,
)
from src.models.session import LogEntry, SessionSnapshot
from src.models.task import QUICK_TASK_NOTE, StudyTask, TaskEdit, new_task_id

__all__ = [
    "CHAT_RESPONSE_SCHEMA",
    "PLAN_RESPONSE_SCHEMA",
    "ChatInput",
    "ChatOutput",
    "PlanItem",
    "StudyPlanInput",
    "StudyPlanOutput",
    "LogEntry",
    "SessionSnapshot",
    "QUICK_TASK_NOTE",
    "StudyTask",
    "TaskEdit",
    "new_task_id",
]
