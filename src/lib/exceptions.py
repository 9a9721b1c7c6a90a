"""
Custom exception hierarchy for StudyFlow.

Provides structured exception types for all subsystems:
- Configuration and startup
- Caller input validation
- Generative model output and transport failures

All exceptions inherit from StudyFlowException, enabling
catch-all for StudyFlow-specific errors while keeping the
ability to catch specific error types.

Services at the model boundary never let these escape: they are
normalized into an ActionResult (see src/core/result.py).
"""

from __future__ import annotations


class StudyFlowException(Exception):
    """Base exception for all StudyFlow errors."""


class ConfigurationError(StudyFlowException):
    """Missing environment variables, invalid config values, or startup failures."""


class ValidationError(StudyFlowException):
    """Malformed caller input (empty subject list, non-positive time, blank query)."""


class GenerationError(StudyFlowException):
    """The model answered transport-wise but the structured result was empty or invalid."""


class ServiceError(StudyFlowException):
    """External service failures (API errors, connection refused, unexpected responses)."""


class ServiceUnavailableError(ServiceError):
    """The generative model could not be reached or rejected the call."""
