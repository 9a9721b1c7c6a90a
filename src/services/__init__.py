"""
Services for StudyFlow.

Services:
    - PlanRequestService: Study plan generation through the model
    - ChatQueryService / ChatTranscript: Study assistant
    - SessionStore: Plan, active task and completion log
    - CountdownTimer: Per-task countdown state machine
    - StudySession: Composition root wiring all of the above
"""

from .chat_service import ChatMessage, ChatQueryService, ChatTranscript
from .countdown_timer import (
    AsyncioTickScheduler,
    CountdownTimer,
    TimerSnapshot,
    TimerState,
    format_time,
)
from .llm_client import GeminiClient, StructuredModel
from .plan_service import PlanRequestService, parse_subjects
from .session_store import SessionStore
from .study_session import StudySession

__all__ = [
    "ChatMessage",
    "ChatQueryService",
    "ChatTranscript",
    "AsyncioTickScheduler",
    "CountdownTimer",
    "TimerSnapshot",
    "TimerState",
    "format_time",
    "GeminiClient",
    "StructuredModel",
    "PlanRequestService",
    "parse_subjects",
    "SessionStore",
    "StudySession",
]
