"""
Pydantic Schemas for the StudyFlow REST API.

Defines request bodies and the response envelope shared by all endpoints:

    {"success": bool, "data": ..., "error": {"code", "message"} | null,
     "meta": {"timestamp": "..."}}

Request models keep field types but leave range checks to the services,
so the user sees the service's own validation message.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from src.lib.errors import build_error_response

# =============================================================================
# Envelope
# =============================================================================


def _meta() -> dict[str, Any]:
    return {"timestamp": datetime.now(UTC).isoformat()}


def success_response(data: Any) -> dict[str, Any]:
    """Wrap data in a success envelope."""
    return {"success": True, "data": data, "error": None, "meta": _meta()}


def error_response(
    code: str, message: str | None = None, details: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Wrap an error code in a failure envelope."""
    return {
        "success": False,
        "data": None,
        "error": build_error_response(code, message, details),
        "meta": _meta(),
    }


# =============================================================================
# Plan Schemas
# =============================================================================


class GeneratePlanRequest(BaseModel):
    """Subjects as a list or comma-separated string, plus total minutes."""

    subjects: list[str] | str
    available_time: int


# =============================================================================
# Task Schemas
# =============================================================================


class QuickTaskRequest(BaseModel):
    subject: str = Field(..., max_length=200)
    duration: int = 25


class EditTaskRequest(BaseModel):
    subject: str | None = Field(None, max_length=200)
    note: str | None = Field(None, max_length=2000)


class DurationRequest(BaseModel):
    minutes: int


# =============================================================================
# Chat Schemas
# =============================================================================


class ChatRequest(BaseModel):
    query: str = Field(..., max_length=4000)


__all__ = [
    "success_response",
    "error_response",
    "GeneratePlanRequest",
    "QuickTaskRequest",
    "EditTaskRequest",
    "DurationRequest",
    "ChatRequest",
]
