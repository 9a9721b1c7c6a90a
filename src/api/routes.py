"""
REST API Routes for StudyFlow.

All responses use the envelope from src/api/schemas.py. Mutations
return ``{"applied": bool, "session": <snapshot>}``; a silent no-op
(completed task, nothing running) is still a 200 with applied=False.

Endpoints (all under /api/v1 prefix):
- /health - Health check
- /session - Full session snapshot
- /plan - Generate a plan with the model
- /tasks/quick - Add and start a quick task
- /tasks/{id} - Edit / delete a task
- /tasks/{id}/select - Make a task active
- /tasks/{id}/duration - Change a task's duration
- /timer, /timer/{start,pause,reset,skip} - Countdown control
- /log - Completed-task log
- /chat - Study assistant
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.api.dependencies import get_study_session
from src.api.schemas import (
    ChatRequest,
    DurationRequest,
    EditTaskRequest,
    GeneratePlanRequest,
    QuickTaskRequest,
    error_response,
    success_response,
)
from src.core.result import ActionResult
from src.lib.errors import NOT_FOUND, VALIDATION_ERROR, http_status_for
from src.services.session_store import MAX_DURATION_MINUTES
from src.services.study_session import StudySession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")


def _ok(data: Any) -> JSONResponse:
    return JSONResponse(status_code=200, content=success_response(data))


def _fail(code: str, message: str | None = None) -> JSONResponse:
    return JSONResponse(status_code=http_status_for(code), content=error_response(code, message))


def _from_result(result: ActionResult[Any]) -> JSONResponse:
    return _fail(result.error_code or "", result.error)


def _applied(session: StudySession, applied: bool) -> JSONResponse:
    return _ok({"applied": applied, "session": session.snapshot()})


def _require_task(session: StudySession, task_id: str) -> JSONResponse | None:
    if session.store.get_task(task_id) is None:
        return _fail(NOT_FOUND)
    return None


# =============================================================================
# Health & Session
# =============================================================================


@router.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return _ok({"status": "ok"})


@router.get("/session")
async def get_session(session: StudySession = Depends(get_study_session)) -> JSONResponse:
    """Plan, active task, log, timer and transcript in one snapshot."""
    return _ok(session.snapshot())


# =============================================================================
# Plan
# =============================================================================


@router.post("/plan")
async def generate_plan(
    body: GeneratePlanRequest,
    session: StudySession = Depends(get_study_session),
) -> JSONResponse:
    """
    Generate a study plan and replace the current one.

    On failure the existing plan is left untouched and the error is
    returned with 422 (validation), 502 (generation) or 503 (service).
    """
    result = await session.generate_plan(body.subjects, body.available_time)
    if not result.success:
        return _from_result(result)
    return _applied(session, True)


# =============================================================================
# Tasks
# =============================================================================


@router.post("/tasks/quick")
async def add_quick_task(
    body: QuickTaskRequest,
    session: StudySession = Depends(get_study_session),
) -> JSONResponse:
    """Add a one-off task, select it and bind it to the timer."""
    try:
        session.add_quick_task(body.subject, body.duration)
    except ValueError as e:
        return _fail(VALIDATION_ERROR, str(e))
    return _applied(session, True)


@router.post("/tasks/{task_id}/select")
async def select_task(
    task_id: str,
    session: StudySession = Depends(get_study_session),
) -> JSONResponse:
    if (missing := _require_task(session, task_id)) is not None:
        return missing
    return _applied(session, session.select_task(task_id))


@router.patch("/tasks/{task_id}")
async def edit_task(
    task_id: str,
    body: EditTaskRequest,
    session: StudySession = Depends(get_study_session),
) -> JSONResponse:
    if (missing := _require_task(session, task_id)) is not None:
        return missing
    return _applied(session, session.edit_task(task_id, subject=body.subject, note=body.note))


@router.put("/tasks/{task_id}/duration")
async def set_duration(
    task_id: str,
    body: DurationRequest,
    session: StudySession = Depends(get_study_session),
) -> JSONResponse:
    if (missing := _require_task(session, task_id)) is not None:
        return missing
    if not 1 <= body.minutes <= MAX_DURATION_MINUTES:
        return _fail(
            VALIDATION_ERROR,
            f"Duration must be between 1 and {MAX_DURATION_MINUTES} minutes.",
        )
    return _applied(session, session.set_duration(task_id, body.minutes))


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    session: StudySession = Depends(get_study_session),
) -> JSONResponse:
    if (missing := _require_task(session, task_id)) is not None:
        return missing
    return _applied(session, session.delete_task(task_id))


# =============================================================================
# Timer
# =============================================================================


@router.get("/timer")
async def get_timer(session: StudySession = Depends(get_study_session)) -> JSONResponse:
    return _ok(session.timer_snapshot().to_dict())


@router.post("/timer/start")
async def start_timer(session: StudySession = Depends(get_study_session)) -> JSONResponse:
    return _applied(session, session.start_timer())


@router.post("/timer/pause")
async def pause_timer(session: StudySession = Depends(get_study_session)) -> JSONResponse:
    return _applied(session, session.pause_timer())


@router.post("/timer/reset")
async def reset_timer(session: StudySession = Depends(get_study_session)) -> JSONResponse:
    return _applied(session, session.reset_timer())


@router.post("/timer/skip")
async def skip_task(session: StudySession = Depends(get_study_session)) -> JSONResponse:
    """Complete the bound task immediately."""
    return _applied(session, session.skip_task())


# =============================================================================
# Log & Chat
# =============================================================================


@router.get("/log")
async def get_log(session: StudySession = Depends(get_study_session)) -> JSONResponse:
    """Completed tasks, newest first."""
    return _ok([entry.to_dict() for entry in session.store.log])


@router.get("/chat")
async def get_transcript(session: StudySession = Depends(get_study_session)) -> JSONResponse:
    return _ok(session.transcript.to_list())


@router.post("/chat")
async def ask(
    body: ChatRequest,
    session: StudySession = Depends(get_study_session),
) -> JSONResponse:
    """
    Ask the study assistant.

    The question only stays in the transcript if an answer came back.
    """
    result = await session.ask(body.query)
    if not result.success or result.data is None:
        return _from_result(result)
    return _ok({"answer": result.data.answer, "transcript": session.transcript.to_list()})


__all__ = ["router"]
