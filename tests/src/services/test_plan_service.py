"""
Tests for PlanRequestService.

Covers:
- Input validation before any model call
- Prompt rendering (subjects and available time)
- Successful parse of the model's plan
- Error mapping: schema mismatch / empty plan -> GENERATION_ERROR,
  transport failures / unexpected errors -> SERVICE_UNAVAILABLE
"""

import httpx
import pytest

from src.lib.errors import GENERATION_ERROR, SERVICE_UNAVAILABLE, VALIDATION_ERROR
from src.lib.exceptions import GenerationError, ServiceUnavailableError, ValidationError
from src.models.plan import PLAN_RESPONSE_SCHEMA
from src.services.plan_service import (
    PLAN_GENERATION_FAILED,
    PlanRequestService,
    parse_subjects,
    validate_plan_request,
)

# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def service(stub_model):
    return PlanRequestService(stub_model)


# =============================================================================
# Subject Parsing & Validation
# =============================================================================


def test_parse_subjects_splits_and_trims():
    assert parse_subjects(" Math, History ,, Biology ") == ["Math", "History", "Biology"]


def test_validate_accepts_comma_string():
    request = validate_plan_request("Math, History", 120)
    assert request.subjects == ["Math", "History"]
    assert request.available_time == 120


@pytest.mark.parametrize(
    "subjects,minutes,message",
    [
        ([], 60, "At least one subject is required."),
        ("  ,  ", 60, "At least one subject is required."),
        (["Math", "  "], 60, "Subjects must be non-empty text."),
        (["Math"], 0, "Available time must be at least 1 minute."),
        (["Math"], True, "Available time must be at least 1 minute."),
        (["Math"], "60", "Available time must be at least 1 minute."),
    ],
)
def test_validate_rejects(subjects, minutes, message):
    with pytest.raises(ValidationError, match=message):
        validate_plan_request(subjects, minutes)


def test_validate_joins_every_problem():
    with pytest.raises(ValidationError) as exc_info:
        validate_plan_request([], 0)
    assert str(exc_info.value) == (
        "At least one subject is required. Available time must be at least 1 minute."
    )


# =============================================================================
# Generation
# =============================================================================


@pytest.mark.asyncio
async def test_generate_plan_success(service, stub_model):
    stub_model.queue_plan(
        ("Math", 25, "Algebra drills"),
        ("History", 25.4, "Read chapter 1"),
        ("Math", 10, None),
    )

    result = await service.generate_plan(["Math", "History"], 60)

    assert result.success is True
    assert result.error_code is None
    plan = result.data.plan
    assert [item.subject for item in plan] == ["Math", "History", "Math"]
    assert [item.duration_minutes for item in plan] == [25, 25, 10]
    assert plan[2].note is None
    assert result.data.total_minutes == 60


@pytest.mark.asyncio
async def test_prompt_carries_subjects_and_time(service, stub_model):
    stub_model.queue_plan(("Math", 30, None))

    await service.generate_plan(["Math", "History"], 90)

    prompt, schema = stub_model.calls[0]
    assert "Subjects: Math, History" in prompt
    assert "Available Study Time (minutes): 90" in prompt
    assert schema is PLAN_RESPONSE_SCHEMA


@pytest.mark.asyncio
async def test_custom_prompt_template(stub_model):
    stub_model.queue_plan(("Math", 30, None))
    service = PlanRequestService(stub_model, "Plan {subjects} in {available_time}m")

    await service.generate_plan("Math", 30)

    assert stub_model.calls[0][0] == "Plan Math in 30m"


@pytest.mark.asyncio
async def test_validation_failure_skips_model(service, stub_model):
    result = await service.generate_plan([], 60)

    assert result.success is False
    assert result.error_code == VALIDATION_ERROR
    assert result.data is None
    assert stub_model.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"plan": []},
        {"tasks": []},
        {"plan": [{"subject": "Math"}]},
        {"plan": [{"subject": "Math", "durationMinutes": 0}]},
        {"plan": [{"subject": "Math", "durationMinutes": "soon"}]},
        {"plan": [{"subject": "", "durationMinutes": 20}]},
    ],
)
async def test_unusable_plan_is_generation_error(service, stub_model, payload):
    stub_model.queue(payload)

    result = await service.generate_plan(["Math"], 60)

    assert result.success is False
    assert result.error_code == GENERATION_ERROR
    assert result.error == PLAN_GENERATION_FAILED


@pytest.mark.asyncio
async def test_generation_error_from_model(service, stub_model):
    stub_model.queue(GenerationError("Model text was not valid JSON"))

    result = await service.generate_plan(["Math"], 60)

    assert result.error_code == GENERATION_ERROR


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        ServiceUnavailableError("Model returned HTTP 500"),
        RuntimeError("boom"),
        httpx.ConnectError("refused"),
    ],
)
async def test_service_failures_map_to_unavailable(service, stub_model, error):
    stub_model.queue(error)

    result = await service.generate_plan(["Math"], 60)

    assert result.success is False
    assert result.error_code == SERVICE_UNAVAILABLE
    assert "try again later" in result.error


@pytest.mark.asyncio
async def test_one_attempt_per_request(service, stub_model):
    stub_model.queue(ServiceUnavailableError("down"), {"plan": [{"subject": "Math", "durationMinutes": 5}]})

    await service.generate_plan(["Math"], 60)

    assert len(stub_model.calls) == 1
