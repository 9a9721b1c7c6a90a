"""
Tests for StudySession.

Covers the coordination between the store and the timer:
- Plan generation replaces the plan and unbinds the timer; failure keeps both
- Selection binds the timer; re-selecting the bound task keeps the countdown
- Timer expiry and skip complete the active task exactly once
- Deleting the bound task stops the timer
- Edits and duration changes reach the bound timer
- Chat goes through the transcript
"""

import pytest

from src.lib.errors import GENERATION_ERROR, SERVICE_UNAVAILABLE, VALIDATION_ERROR
from src.lib.exceptions import ServiceUnavailableError
from src.services.countdown_timer import TimerState


@pytest.fixture
async def planned(session, stub_model):
    """Session with task-1 (Math, 1m) and task-2 (History, 2m)."""
    stub_model.queue_plan(("Math", 1, "Drills"), ("History", 2, "Read chapter 1"))
    result = await session.generate_plan(["Math", "History"], 3)
    assert result.success
    return session


def _run_out(session):
    for _ in range(session.timer.remaining_seconds):
        session.timer.tick()


# =============================================================================
# Plan Generation
# =============================================================================


@pytest.mark.asyncio
async def test_generate_plan_populates_store(planned):
    assert [t.id for t in planned.store.plan] == ["task-1", "task-2"]
    assert planned.store.active_task is None
    assert planned.timer.state == TimerState.IDLE


@pytest.mark.asyncio
async def test_new_plan_stops_running_timer(planned, stub_model):
    planned.select_task("task-1")
    planned.start_timer()

    stub_model.queue_plan(("Biology", 20, None))
    await planned.generate_plan("Biology", 20)

    assert planned.timer.state == TimerState.IDLE
    assert planned.store.active_task is None
    assert [t.subject for t in planned.store.plan] == ["Biology"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response,code",
    [
        ({"plan": []}, GENERATION_ERROR),
        (ServiceUnavailableError("down"), SERVICE_UNAVAILABLE),
    ],
)
async def test_failed_generation_keeps_plan_and_timer(planned, stub_model, response, code):
    planned.select_task("task-1")
    planned.start_timer()
    planned.timer.tick()
    stub_model.queue(response)

    result = await planned.generate_plan(["Chemistry"], 30)

    assert result.success is False
    assert result.error_code == code
    assert [t.id for t in planned.store.plan] == ["task-1", "task-2"]
    assert planned.store.active_task.id == "task-1"
    assert planned.timer.state == TimerState.RUNNING
    assert planned.timer.remaining_seconds == 59


@pytest.mark.asyncio
async def test_invalid_request_is_validation_error(session):
    result = await session.generate_plan("", 0)
    assert result.error_code == VALIDATION_ERROR


# =============================================================================
# Selection & Timer Binding
# =============================================================================


@pytest.mark.asyncio
async def test_select_binds_timer(planned):
    assert planned.select_task("task-2") is True

    snap = planned.timer_snapshot()
    assert snap.state == TimerState.READY
    assert snap.task_id == "task-2"
    assert snap.remaining_seconds == 120


@pytest.mark.asyncio
async def test_switching_task_resets_countdown(planned):
    planned.select_task("task-1")
    planned.start_timer()
    planned.timer.tick()

    planned.select_task("task-2")

    assert planned.timer.state == TimerState.READY
    assert planned.timer.remaining_seconds == 120
    assert planned.store.get_task("task-1").completed is False
    assert planned.store.log == []


@pytest.mark.asyncio
async def test_reselecting_bound_task_keeps_countdown(planned):
    planned.select_task("task-1")
    planned.start_timer()
    planned.timer.tick()

    planned.select_task("task-1")

    assert planned.timer.state == TimerState.RUNNING
    assert planned.timer.remaining_seconds == 59


@pytest.mark.asyncio
async def test_quick_task_binds_timer(session):
    task = session.add_quick_task("Flashcards", 5)

    assert session.store.active_task.id == task.id
    assert session.timer.bound_task_id == task.id
    assert session.timer.remaining_seconds == 300


# =============================================================================
# Completion
# =============================================================================


@pytest.mark.asyncio
async def test_expiry_completes_active_task_once(planned):
    planned.select_task("task-1")
    planned.start_timer()

    _run_out(planned)
    planned.timer.tick()

    log = planned.store.log
    assert [e.task_id for e in log] == ["task-1"]
    assert planned.store.get_task("task-1").completed is True
    assert planned.store.active_task is None
    assert planned.timer.state == TimerState.EXPIRED


@pytest.mark.asyncio
async def test_expired_task_cannot_be_restarted(planned):
    planned.select_task("task-1")
    planned.start_timer()
    _run_out(planned)

    assert planned.select_task("task-1") is False
    assert planned.start_timer() is False

    assert planned.reset_timer() is False
    assert planned.start_timer() is False
    assert planned.timer.state == TimerState.EXPIRED
    for _ in range(60):
        planned.timer.tick()
    assert [e.task_id for e in planned.store.log] == ["task-1"]


@pytest.mark.asyncio
async def test_skip_completes_and_goes_idle(planned):
    planned.select_task("task-2")

    assert planned.skip_task() is True

    assert planned.store.get_task("task-2").completed is True
    assert [e.subject for e in planned.store.log] == ["History"]
    assert planned.timer.state == TimerState.IDLE


@pytest.mark.asyncio
async def test_skip_with_nothing_bound_is_noop(planned):
    assert planned.skip_task() is False
    assert planned.store.log == []


@pytest.mark.asyncio
async def test_every_log_entry_matches_a_completed_task(planned):
    planned.select_task("task-1")
    planned.skip_task()
    planned.select_task("task-2")
    planned.start_timer()
    _run_out(planned)

    for entry in planned.store.log:
        assert planned.store.get_task(entry.task_id).completed is True
    assert len({e.task_id for e in planned.store.log}) == 2


# =============================================================================
# Edits & Deletion
# =============================================================================


@pytest.mark.asyncio
async def test_delete_bound_task_stops_timer(planned):
    planned.select_task("task-1")
    planned.start_timer()

    assert planned.delete_task("task-1") is True

    assert planned.timer.state == TimerState.IDLE
    assert planned.timer.is_ticking is False
    assert planned.timer.tick() is False
    assert planned.store.log == []


@pytest.mark.asyncio
async def test_delete_other_task_keeps_timer(planned):
    planned.select_task("task-1")
    planned.start_timer()

    planned.delete_task("task-2")

    assert planned.timer.state == TimerState.RUNNING


@pytest.mark.asyncio
async def test_edit_reaches_bound_timer(planned):
    planned.select_task("task-1")

    planned.edit_task("task-1", subject="Algebra", note="Quadratics")

    snap = planned.timer_snapshot()
    assert snap.subject == "Algebra"
    assert snap.note == "Quadratics"


@pytest.mark.asyncio
async def test_duration_change_resets_ready_timer(planned):
    planned.select_task("task-1")

    assert planned.set_duration("task-1", 10) is True

    assert planned.timer.remaining_seconds == 600


@pytest.mark.asyncio
async def test_duration_change_on_unbound_task_applies_when_selected(planned):
    planned.select_task("task-1")

    assert planned.set_duration("task-2", 45) is True
    assert planned.store.get_task("task-2").duration_minutes == 45
    assert planned.timer.remaining_seconds == 60

    planned.select_task("task-2")
    assert planned.timer.remaining_seconds == 45 * 60


@pytest.mark.asyncio
async def test_duration_change_while_running_applies_on_reset(planned):
    planned.select_task("task-1")
    planned.start_timer()
    planned.timer.tick()

    planned.set_duration("task-1", 10)

    assert planned.timer.remaining_seconds == 59
    planned.reset_timer()
    assert planned.timer.remaining_seconds == 600


# =============================================================================
# Chat & Snapshot
# =============================================================================


@pytest.mark.asyncio
async def test_ask_updates_transcript(session, stub_model):
    stub_model.queue({"answer": "Use spaced repetition."})

    result = await session.ask("How do I memorize vocab?")

    assert result.success is True
    assert len(session.transcript) == 2


@pytest.mark.asyncio
async def test_snapshot_shape(planned):
    planned.select_task("task-1")

    data = planned.snapshot()

    assert set(data) == {"plan", "active_task", "log", "notice", "timer", "transcript"}
    assert data["timer"]["display"] == "01:00"
    assert data["active_task"]["id"] == "task-1"
