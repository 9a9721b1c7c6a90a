"""
Centralized Error Response Builder for StudyFlow.

Provides consistent error codes, messages, and i18n-ready error responses
for use across the API and service layers.

Error codes are constants that map to translatable message strings.
The builder returns structured error dicts compatible with the API
response envelope.
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Error Code Constants
# =============================================================================

VALIDATION_ERROR = "VALIDATION_ERROR"
GENERATION_ERROR = "GENERATION_ERROR"
SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
NOT_FOUND = "NOT_FOUND"
INTERNAL_ERROR = "INTERNAL_ERROR"

# =============================================================================
# i18n Message Registry
#
# Maps (error_code, language) -> translated message string.
# Falls back to "en" if a translation is missing for the requested language.
# =============================================================================

_ERROR_MESSAGES: dict[str, dict[str, str]] = {
    VALIDATION_ERROR: {
        "en": "Invalid input. Please check your request.",
        "de": "Ungueltige Eingabe. Bitte ueberpruefen Sie Ihre Anfrage.",
    },
    GENERATION_ERROR: {
        "en": "AI could not generate a plan. Try different inputs.",
        "de": "Die KI konnte keinen Plan erstellen. Versuche andere Eingaben.",
    },
    SERVICE_UNAVAILABLE: {
        "en": (
            "An unexpected error occurred while communicating with the AI. "
            "Please try again later."
        ),
        "de": (
            "Bei der Kommunikation mit der KI ist ein Fehler aufgetreten. "
            "Bitte versuche es spaeter erneut."
        ),
    },
    NOT_FOUND: {
        "en": "The requested task was not found.",
        "de": "Die angeforderte Aufgabe wurde nicht gefunden.",
    },
    INTERNAL_ERROR: {
        "en": "An internal error occurred. Please try again.",
        "de": "Ein interner Fehler ist aufgetreten. Bitte erneut versuchen.",
    },
}

# Default fallback language
_DEFAULT_LANG = "en"

# HTTP status per error code, used by the API layer
HTTP_STATUS: dict[str, int] = {
    VALIDATION_ERROR: 422,
    GENERATION_ERROR: 502,
    SERVICE_UNAVAILABLE: 503,
    NOT_FOUND: 404,
    INTERNAL_ERROR: 500,
}


# =============================================================================
# Error Response Builder
# =============================================================================


def get_error_message(code: str, lang: str = "en") -> str:
    """
    Get a translated error message for a given error code.

    Falls back to English if the requested language is not available.
    Falls back to a generic message if the error code is unknown.

    Args:
        code: Error code constant (e.g. VALIDATION_ERROR, NOT_FOUND)
        lang: ISO 639-1 language code (e.g. "en", "de")

    Returns:
        Translated error message string
    """
    messages = _ERROR_MESSAGES.get(code, {})
    return messages.get(lang, messages.get(_DEFAULT_LANG, "An error occurred."))


def build_error_response(
    code: str,
    message: str | None = None,
    details: dict[str, Any] | None = None,
    lang: str = "en",
) -> dict[str, Any]:
    """
    Build a structured error response dict.

    The returned dict is compatible with the API envelope error field:
    { "code": "...", "message": "..." }

    If no message is provided, the i18n-translated message for the error code
    and language is used automatically.

    Args:
        code: Error code constant
        message: Optional override message (bypasses i18n lookup)
        details: Optional additional error details
        lang: ISO 639-1 language code for i18n message lookup

    Returns:
        Structured error dict: {"code": str, "message": str, "details": dict | None}
    """
    resolved_message = message if message is not None else get_error_message(code, lang)
    error: dict[str, Any] = {
        "code": code,
        "message": resolved_message,
    }
    if details is not None:
        error["details"] = details
    return error


def http_status_for(code: str) -> int:
    """Map an error code to its HTTP status (500 for unknown codes)."""
    return HTTP_STATUS.get(code, 500)


__all__ = [
    # Error code constants
    "VALIDATION_ERROR",
    "GENERATION_ERROR",
    "SERVICE_UNAVAILABLE",
    "NOT_FOUND",
    "INTERNAL_ERROR",
    "HTTP_STATUS",
    # Functions
    "get_error_message",
    "build_error_response",
    "http_status_for",
]
