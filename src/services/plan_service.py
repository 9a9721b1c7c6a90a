"""
Plan Request Service for StudyFlow.

Prompt-and-parse boundary for study plan generation:
    validate input -> render prompt -> one model call -> schema check -> result

The service does not partition time itself; the model is asked to apply
Pomodoro-style decomposition and whatever comes back is checked against
StudyPlanOutput. Every outcome is an ActionResult, never an exception:

- VALIDATION_ERROR: empty subject list, blank subject, time below 1 minute
- GENERATION_ERROR: schema mismatch or empty plan
- SERVICE_UNAVAILABLE: transport failure or any unexpected error

Stateless between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.config.prompts import PLAN_PROMPT_TEMPLATE, render_plan_prompt
from src.core.result import ActionResult
from src.lib.errors import GENERATION_ERROR, SERVICE_UNAVAILABLE, VALIDATION_ERROR
from src.lib.exceptions import GenerationError, ServiceError, ValidationError
from src.models.plan import PLAN_RESPONSE_SCHEMA, StudyPlanInput, StudyPlanOutput
from src.services.llm_client import StructuredModel

logger = logging.getLogger(__name__)

PLAN_GENERATION_FAILED = "AI could not generate a plan. Try different inputs."


def parse_subjects(raw: str) -> list[str]:
    """Split a comma-separated subject string, dropping blanks."""
    return [part.strip() for part in raw.split(",") if part.strip()]


def validate_plan_request(subjects: Any, available_time: Any) -> StudyPlanInput:
    """
    Check a plan request before any model call is made.

    Raises:
        ValidationError: With every failed rule joined into one message
    """
    problems: list[str] = []

    if isinstance(subjects, str):
        subjects = parse_subjects(subjects)
    if not isinstance(subjects, Sequence) or len(subjects) == 0:
        problems.append("At least one subject is required.")
        cleaned: list[str] = []
    else:
        cleaned = [s.strip() for s in subjects if isinstance(s, str)]
        if len(cleaned) != len(subjects) or any(not s for s in cleaned):
            problems.append("Subjects must be non-empty text.")

    if (
        isinstance(available_time, bool)
        or not isinstance(available_time, int)
        or available_time < 1
    ):
        problems.append("Available time must be at least 1 minute.")

    if problems:
        raise ValidationError(" ".join(problems))

    return StudyPlanInput(subjects=cleaned, available_time=available_time)


class PlanRequestService:
    """
    Generates study plans through the external model.

    Args:
        model: Structured-output model client
        prompt_template: Plan prompt with {subjects} and {available_time}
    """

    def __init__(
        self,
        model: StructuredModel,
        prompt_template: str = PLAN_PROMPT_TEMPLATE,
    ) -> None:
        self._model = model
        self._prompt_template = prompt_template

    async def generate_plan(
        self, subjects: Any, available_time: Any
    ) -> ActionResult[StudyPlanOutput]:
        """
        Request a plan for the given subjects and minutes.

        Args:
            subjects: List of subjects (or a comma-separated string)
            available_time: Total minutes available, integer >= 1

        Returns:
            ActionResult with a non-empty StudyPlanOutput on success
        """
        try:
            request = validate_plan_request(subjects, available_time)
        except ValidationError as e:
            logger.info("Plan request rejected: %s", e)
            return ActionResult.fail(VALIDATION_ERROR, str(e))

        try:
            prompt = render_plan_prompt(
                self._prompt_template, request.subjects, request.available_time
            )
            raw = await self._model.generate(prompt, PLAN_RESPONSE_SCHEMA)
            output = StudyPlanOutput.model_validate(raw)
            if not output.plan:
                raise GenerationError("Model returned an empty plan")
        except (GenerationError, PydanticValidationError) as e:
            logger.warning("Plan generation produced no usable plan: %s", e)
            return ActionResult.fail(GENERATION_ERROR, PLAN_GENERATION_FAILED)
        except ServiceError as e:
            logger.warning("Plan generation failed: %s", e)
            return ActionResult.fail(SERVICE_UNAVAILABLE)
        except Exception:
            logger.exception("Unexpected error generating study plan")
            return ActionResult.fail(SERVICE_UNAVAILABLE)

        logger.info(
            "Generated plan with %d tasks (%d of %d minutes)",
            len(output.plan), output.total_minutes, request.available_time,
        )
        return ActionResult.ok(output)


__all__ = [
    "PLAN_GENERATION_FAILED",
    "PlanRequestService",
    "parse_subjects",
    "validate_plan_request",
]
