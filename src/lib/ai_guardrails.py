"""
AI Guardrails for StudyFlow.

Post-model output validation for free-text answers. Sits between the
model output and delivery to the user.

Components:
- OutputValidator: Validates answers before delivery
  (empty answers, length bounds, leaked secrets or prompts)
- AIGuardrails: Facade that validates and logs

Usage:
    from src.lib.ai_guardrails import AIGuardrails

    validation = AIGuardrails.check_output(answer)
    if validation.empty:
        ...  # nothing to deliver
    safe_answer = validation.sanitized_text
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum

import structlog

logger = structlog.get_logger(__name__)


# =============================================================================
# Enums & Data Classes
# =============================================================================


class OutputIssueType(StrEnum):
    """Types of issues detected in model output."""

    EMPTY_RESPONSE = "empty_response"
    EXCESSIVE_LENGTH = "excessive_length"
    LEAKED_SYSTEM_PROMPT = "leaked_system_prompt"
    INTERNAL_DATA_LEAK = "internal_data_leak"


@dataclass
class OutputCheckResult:
    """Result of output validation."""

    safe: bool
    sanitized_text: str
    issues: list[str] = field(default_factory=list)
    issue_types: list[OutputIssueType] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return OutputIssueType.EMPTY_RESPONSE in self.issue_types


# =============================================================================
# Output Validator
# =============================================================================


class OutputValidator:
    """
    Validates model answers before delivering them.

    Checks:
    1. Empty/blank responses
    2. Response length bounds
    3. Leaked prompt instructions
    4. Internal data patterns (API keys, env assignments)
    """

    MAX_RESPONSE_LENGTH = 8000  # characters

    SYSTEM_PROMPT_LEAK_PATTERNS: list[tuple[re.Pattern[str], str]] = [
        (
            re.compile(
                r"(?:my\s+)?(?:system\s+)?(?:prompt|instructions?)\s+(?:is|are|says?|tells?)\s*:",
                re.IGNORECASE,
            ),
            "system_prompt_disclosure",
        ),
        (
            re.compile(r"you\s+are\s+an?\s+ai\s+study\s+plan\s+generator", re.IGNORECASE),
            "plan_prompt_echo",
        ),
    ]

    INTERNAL_DATA_PATTERNS: list[tuple[re.Pattern[str], str]] = [
        (
            re.compile(r"AIza[0-9A-Za-z_-]{30,}"),
            "google_api_key_leak",
        ),
        (
            re.compile(r"(?:sk-|api[_-]?key[=:])\s*[A-Za-z0-9_-]{20,}"),
            "api_key_leak",
        ),
        (
            re.compile(r"(?:STUDYFLOW|GEMINI)_\w+\s*=\s*\S+", re.IGNORECASE),
            "env_var_leak",
        ),
    ]

    @classmethod
    def validate(
        cls,
        response_text: str | None,
        max_length: int | None = None,
    ) -> OutputCheckResult:
        """
        Validate model response text.

        Args:
            response_text: The model's response text
            max_length: Optional override for max response length

        Returns:
            OutputCheckResult with validation results
        """
        effective_max = max_length or cls.MAX_RESPONSE_LENGTH
        issues: list[str] = []
        issue_types: list[OutputIssueType] = []

        if not response_text or not response_text.strip():
            return OutputCheckResult(
                safe=False,
                sanitized_text="",
                issues=["Empty response from model"],
                issue_types=[OutputIssueType.EMPTY_RESPONSE],
            )

        if len(response_text) > effective_max:
            issues.append(
                f"Response exceeds maximum length ({len(response_text)} > {effective_max})"
            )
            issue_types.append(OutputIssueType.EXCESSIVE_LENGTH)

        for pattern, name in cls.SYSTEM_PROMPT_LEAK_PATTERNS:
            if pattern.search(response_text):
                issues.append(f"Possible system prompt leak: {name}")
                issue_types.append(OutputIssueType.LEAKED_SYSTEM_PROMPT)

        for pattern, name in cls.INTERNAL_DATA_PATTERNS:
            if pattern.search(response_text):
                issues.append(f"Internal data leak detected: {name}")
                issue_types.append(OutputIssueType.INTERNAL_DATA_LEAK)

        return OutputCheckResult(
            safe=not issues,
            sanitized_text=cls.sanitize(response_text, effective_max),
            issues=issues,
            issue_types=issue_types,
        )

    @classmethod
    def sanitize(cls, response_text: str, max_length: int | None = None) -> str:
        """
        Redact internal data patterns and enforce the length bound.

        Args:
            response_text: Model response text
            max_length: Optional max length override

        Returns:
            Sanitized response text
        """
        if not response_text:
            return ""

        effective_max = max_length or cls.MAX_RESPONSE_LENGTH
        result = response_text.strip()

        for pattern, _name in cls.INTERNAL_DATA_PATTERNS:
            result = pattern.sub("[REDACTED]", result)

        if len(result) > effective_max:
            result = result[:effective_max]

        return result


# =============================================================================
# AIGuardrails Facade
# =============================================================================


class AIGuardrails:
    """Facade over OutputValidator that logs every flagged answer."""

    @classmethod
    def check_output(
        cls,
        response_text: str | None,
        max_length: int | None = None,
    ) -> OutputCheckResult:
        """
        Validate model output before delivering to user.

        Args:
            response_text: Model response text
            max_length: Optional max response length override

        Returns:
            OutputCheckResult with validation results
        """
        result = OutputValidator.validate(response_text, max_length)

        if result.issues:
            logger.warning(
                "ai_guardrail_output_check",
                safe=result.safe,
                issues=result.issues,
                issue_types=[t.value for t in result.issue_types],
            )

        return result


__all__ = [
    "OutputIssueType",
    "OutputCheckResult",
    "OutputValidator",
    "AIGuardrails",
]
