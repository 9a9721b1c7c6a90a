"""
Runtime Settings for StudyFlow.

All configuration comes from environment variables, read once at
startup into an immutable Settings object that the application
factory hands to the services it builds.

Variables:
- STUDYFLOW_ENVIRONMENT: "development" (default) or "production"
- STUDYFLOW_DEV_MODE: "1" for human-readable logs and auto-reload
- STUDYFLOW_HOST / STUDYFLOW_PORT: bind address for main.py
- STUDYFLOW_CORS_ORIGINS: comma-separated list of allowed origins
- GEMINI_API_KEY: API key for the generative model
- STUDYFLOW_GEMINI_MODEL / STUDYFLOW_GEMINI_BASE_URL: model endpoint
- STUDYFLOW_LLM_TIMEOUT: optional request timeout in seconds (unset = none)
- STUDYFLOW_PLAN_PROMPT / STUDYFLOW_CHAT_PROMPT: prompt template overrides
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from src.config.prompts import CHAT_PROMPT_TEMPLATE, PLAN_PROMPT_TEMPLATE
from src.lib.exceptions import ConfigurationError

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    environment: str = "development"
    dev_mode: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=list)
    gemini_api_key: str | None = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    llm_timeout: float | None = None
    plan_prompt: str = PLAN_PROMPT_TEMPLATE
    chat_prompt: str = CHAT_PROMPT_TEMPLATE

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Settings instance

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ

        cors_origins = [
            origin.strip()
            for origin in env.get("STUDYFLOW_CORS_ORIGINS", "").split(",")
            if origin.strip()
        ]

        return cls(
            environment=env.get("STUDYFLOW_ENVIRONMENT", "development"),
            dev_mode=env.get("STUDYFLOW_DEV_MODE", "0") == "1",
            host=env.get("STUDYFLOW_HOST", "0.0.0.0"),
            port=_parse_int(env, "STUDYFLOW_PORT", 8000),
            cors_origins=cors_origins,
            gemini_api_key=env.get("GEMINI_API_KEY") or None,
            gemini_model=env.get("STUDYFLOW_GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            gemini_base_url=env.get(
                "STUDYFLOW_GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL
            ).rstrip("/"),
            llm_timeout=_parse_timeout(env.get("STUDYFLOW_LLM_TIMEOUT")),
            plan_prompt=env.get("STUDYFLOW_PLAN_PROMPT") or PLAN_PROMPT_TEMPLATE,
            chat_prompt=env.get("STUDYFLOW_CHAT_PROMPT") or CHAT_PROMPT_TEMPLATE,
        )


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _parse_timeout(raw: str | None) -> float | None:
    if raw is None or raw.strip() == "":
        return None
    try:
        timeout = float(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"STUDYFLOW_LLM_TIMEOUT must be a number, got {raw!r}"
        ) from e
    if timeout <= 0:
        raise ConfigurationError("STUDYFLOW_LLM_TIMEOUT must be positive")
    return timeout


__all__ = ["Settings", "DEFAULT_GEMINI_MODEL", "DEFAULT_GEMINI_BASE_URL"]
