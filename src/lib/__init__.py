"""
Lib package for StudyFlow.

Contains shared utilities:
- logging.py: structlog + stdlib logging setup
- exceptions.py: Exception hierarchy
- errors.py: Centralized error codes and error response builder
- ai_guardrails.py: Validation of free-text model output
"""

from src.lib.errors import (
    GENERATION_ERROR,
    INTERNAL_ERROR,
    NOT_FOUND,
    SERVICE_UNAVAILABLE,
    VALIDATION_ERROR,
    build_error_response,
    get_error_message,
)
from src.lib.exceptions import (
    ConfigurationError,
    GenerationError,
    ServiceError,
    ServiceUnavailableError,
    StudyFlowException,
    ValidationError,
)

__all__ = [
    # Errors
    "GENERATION_ERROR",
    "INTERNAL_ERROR",
    "NOT_FOUND",
    "SERVICE_UNAVAILABLE",
    "VALIDATION_ERROR",
    "build_error_response",
    "get_error_message",
    # Exceptions
    "ConfigurationError",
    "GenerationError",
    "ServiceError",
    "ServiceUnavailableError",
    "StudyFlowException",
    "ValidationError",
]
