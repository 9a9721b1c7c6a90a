"""
Action Result for StudyFlow.

The tagged result returned by every call that crosses the generative
model boundary. Callers always receive a determinate outcome: either
``success`` with ``data``, or a failure carrying an error code from
src/lib/errors.py and a user-facing message. Nothing raises past it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from src.lib.errors import build_error_response, get_error_message, http_status_for

T = TypeVar("T")


@dataclass(frozen=True)
class ActionResult(Generic[T]):
    """Success/failure result of a service action.

    Attributes:
        success: True if the action produced data
        data: Payload on success, None on failure
        error: User-facing message on failure
        error_code: One of VALIDATION_ERROR, GENERATION_ERROR, SERVICE_UNAVAILABLE
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, data: T) -> ActionResult[T]:
        """Create a successful result.

        Args:
            data: The payload

        Returns:
            ActionResult with success=True
        """
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error_code: str, message: str | None = None) -> ActionResult[T]:
        """Create a failed result.

        Args:
            error_code: Error code constant
            message: Optional message (defaults to the registry message for the code)

        Returns:
            ActionResult with success=False
        """
        return cls(
            success=False,
            error=message if message is not None else get_error_message(error_code),
            error_code=error_code,
        )

    @property
    def http_status(self) -> int:
        return 200 if self.success else http_status_for(self.error_code or "")

    def error_dict(self) -> dict[str, Any] | None:
        if self.success:
            return None
        return build_error_response(self.error_code or "", self.error)
