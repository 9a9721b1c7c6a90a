"""
Study Session for StudyFlow.

Composition root for one process-wide study session. Owns the
SessionStore, the CountdownTimer and the ChatTranscript, and holds the
plan and chat services. Every user action goes through here so the
store and the timer never disagree about which task is active:

    generate_plan  -> PlanRequestService -> store.set_plan  -> timer.unbind
    add_quick_task -> store.add_quick_task                  -> timer.bind
    select_task    -> store.select_task                     -> timer.bind
    edit / duration-> store                                 -> timer.update_task
    delete_task    -> store.delete_task                     -> timer.unbind (if bound)
    timer expiry / skip -> store.complete_active_task

A failed plan request leaves the existing plan untouched.
"""

from __future__ import annotations

import logging
from typing import Any

from src.core.result import ActionResult
from src.models.plan import ChatOutput
from src.models.session import LogEntry
from src.models.task import StudyTask, TaskEdit
from src.services.chat_service import ChatQueryService, ChatTranscript
from src.services.countdown_timer import CountdownTimer, TickScheduler, TimerSnapshot
from src.services.plan_service import PlanRequestService
from src.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class StudySession:
    """
    One user's study session: plan, active task, timer, log and chat.

    Args:
        plan_service: Plan generation boundary
        chat_service: Chat boundary
        store: Session store (a fresh one if None)
        scheduler: Tick scheduler for the timer (None = manual ticks)
    """

    def __init__(
        self,
        plan_service: PlanRequestService,
        chat_service: ChatQueryService,
        store: SessionStore | None = None,
        scheduler: TickScheduler | None = None,
    ) -> None:
        self.plan_service = plan_service
        self.chat_service = chat_service
        self.store = store or SessionStore()
        self.timer = CountdownTimer(on_complete=self._on_timer_complete, scheduler=scheduler)
        self.transcript = ChatTranscript()

    # ----- Plan -----

    async def generate_plan(
        self, subjects: Any, available_time: Any
    ) -> ActionResult[list[StudyTask]]:
        """Request a plan; on success it replaces the current plan."""
        result = await self.plan_service.generate_plan(subjects, available_time)
        if not result.success or result.data is None:
            return ActionResult.fail(result.error_code or "", result.error)

        tasks = self.store.set_plan(result.data.plan)
        self.timer.unbind()
        return ActionResult.ok(tasks)

    # ----- Tasks -----

    def add_quick_task(self, subject: str, duration_minutes: int) -> StudyTask:
        """Add a one-off task, select it and bind it to the timer."""
        task = self.store.add_quick_task(subject, duration_minutes)
        self.timer.bind(task)
        return task

    def select_task(self, task_id: str) -> bool:
        """
        Select a task and bind it to the timer.

        Re-selecting the task already bound leaves the countdown as it is.
        """
        if not self.store.select_task(task_id):
            return False
        task = self.store.active_task
        if task is not None and self.timer.bound_task_id != task.id:
            self.timer.bind(task)
        return True

    def edit_task(self, task_id: str, subject: str | None = None, note: str | None = None) -> bool:
        if not self.store.edit_task(task_id, TaskEdit(subject=subject, note=note)):
            return False
        self._refresh_timer(task_id)
        return True

    def set_duration(self, task_id: str, minutes: int) -> bool:
        if not self.store.set_duration(task_id, minutes):
            return False
        self._refresh_timer(task_id)
        return True

    def delete_task(self, task_id: str) -> bool:
        if not self.store.delete_task(task_id):
            return False
        if self.timer.bound_task_id == task_id:
            self.timer.unbind()
        return True

    def _refresh_timer(self, task_id: str) -> None:
        task = self.store.get_task(task_id)
        if task is not None:
            self.timer.update_task(task)

    # ----- Timer -----

    def start_timer(self) -> bool:
        return self.timer.start()

    def pause_timer(self) -> bool:
        return self.timer.pause()

    def reset_timer(self) -> bool:
        return self.timer.reset()

    def skip_task(self) -> bool:
        return self.timer.skip()

    def _on_timer_complete(self, task: StudyTask) -> LogEntry | None:
        active = self.store.active_task
        if active is None or active.id != task.id:
            logger.debug("Ignoring completion for task %s: not active", task.id)
            return None
        return self.store.complete_active_task()

    # ----- Chat -----

    async def ask(self, query: str) -> ActionResult[ChatOutput]:
        return await self.transcript.ask(self.chat_service, query)

    # ----- Views -----

    def timer_snapshot(self) -> TimerSnapshot:
        return self.timer.snapshot()

    def snapshot(self) -> dict[str, Any]:
        """Everything the presentation layer renders, as plain data."""
        data = self.store.snapshot().to_dict()
        data["timer"] = self.timer.snapshot().to_dict()
        data["transcript"] = self.transcript.to_list()
        return data

    def close(self) -> None:
        self.timer.close()


__all__ = ["StudySession"]
