"""
Model Boundary Schemas for StudyFlow.

Pydantic models for what goes to and comes back from the generative
model, plus the response schemas sent along with each request so the
model answers in structured JSON.

The model is asked for ``durationMinutes`` as a number; PlanItem
normalizes it to whole minutes and rejects anything below one.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============================================================================
# Plan Generation
# =============================================================================


class StudyPlanInput(BaseModel):
    """Validated plan request."""

    subjects: list[str] = Field(..., min_length=1)
    available_time: int = Field(..., ge=1)


class PlanItem(BaseModel):
    """One generated study session."""

    model_config = ConfigDict(populate_by_name=True)

    subject: str = Field(..., min_length=1)
    duration_minutes: int = Field(..., alias="durationMinutes", ge=1)
    note: str | None = None

    @field_validator("subject", mode="before")
    @classmethod
    def strip_subject(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def round_duration(cls, v: Any) -> Any:
        """Round numeric durations to whole minutes, halves up."""
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("duration must be a number of minutes")
        if not math.isfinite(v):
            raise ValueError("duration must be finite")
        return math.floor(v + 0.5)

    @field_validator("note", mode="before")
    @classmethod
    def blank_note_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            stripped = v.strip()
            return stripped or None
        return v


class StudyPlanOutput(BaseModel):
    """Structured plan returned by the model."""

    plan: list[PlanItem]

    @property
    def total_minutes(self) -> int:
        return sum(item.duration_minutes for item in self.plan)


# =============================================================================
# Chat
# =============================================================================


class ChatInput(BaseModel):
    """Validated chat request."""

    query: str = Field(..., min_length=1)


class ChatOutput(BaseModel):
    """Free-text answer returned by the model."""

    answer: str


# =============================================================================
# Response Schemas (Gemini OpenAPI subset)
# =============================================================================

PLAN_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "plan": {
            "type": "ARRAY",
            "description": "The generated daily study plan.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "subject": {
                        "type": "STRING",
                        "description": "The subject for this study session.",
                    },
                    "durationMinutes": {
                        "type": "NUMBER",
                        "description": "The duration of the study session in minutes.",
                    },
                    "note": {
                        "type": "STRING",
                        "description": "Concrete activity for the session, ex: read chapter 1.",
                    },
                },
                "required": ["subject", "durationMinutes"],
            },
        },
    },
    "required": ["plan"],
}

CHAT_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "answer": {
            "type": "STRING",
            "description": "The answer to the question.",
        },
    },
    "required": ["answer"],
}


__all__ = [
    "StudyPlanInput",
    "PlanItem",
    "StudyPlanOutput",
    "ChatInput",
    "ChatOutput",
    "PLAN_RESPONSE_SCHEMA",
    "CHAT_RESPONSE_SCHEMA",
]
