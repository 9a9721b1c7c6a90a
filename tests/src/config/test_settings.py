"""
Tests for Settings.from_env.

Covers defaults, parsing of every variable, and configuration errors.
"""

import pytest

from src.config.prompts import CHAT_PROMPT_TEMPLATE, PLAN_PROMPT_TEMPLATE, render_plan_prompt
from src.config.settings import DEFAULT_GEMINI_BASE_URL, DEFAULT_GEMINI_MODEL, Settings
from src.lib.exceptions import ConfigurationError


def test_defaults_from_empty_environment():
    settings = Settings.from_env({})

    assert settings.environment == "development"
    assert settings.is_production is False
    assert settings.dev_mode is False
    assert settings.port == 8000
    assert settings.cors_origins == []
    assert settings.gemini_api_key is None
    assert settings.gemini_model == DEFAULT_GEMINI_MODEL
    assert settings.gemini_base_url == DEFAULT_GEMINI_BASE_URL
    assert settings.llm_timeout is None
    assert settings.plan_prompt == PLAN_PROMPT_TEMPLATE
    assert settings.chat_prompt == CHAT_PROMPT_TEMPLATE


def test_reads_every_variable():
    settings = Settings.from_env(
        {
            "STUDYFLOW_ENVIRONMENT": "production",
            "STUDYFLOW_DEV_MODE": "1",
            "STUDYFLOW_HOST": "127.0.0.1",
            "STUDYFLOW_PORT": "9001",
            "STUDYFLOW_CORS_ORIGINS": "http://a.test, http://b.test,",
            "GEMINI_API_KEY": "secret",
            "STUDYFLOW_GEMINI_MODEL": "gemini-pro",
            "STUDYFLOW_GEMINI_BASE_URL": "https://proxy.test/v1/",
            "STUDYFLOW_LLM_TIMEOUT": "30",
            "STUDYFLOW_PLAN_PROMPT": "Plan {subjects} / {available_time}",
            "STUDYFLOW_CHAT_PROMPT": "Q: {query}",
        }
    )

    assert settings.is_production is True
    assert settings.dev_mode is True
    assert settings.host == "127.0.0.1"
    assert settings.port == 9001
    assert settings.cors_origins == ["http://a.test", "http://b.test"]
    assert settings.gemini_api_key == "secret"
    assert settings.gemini_model == "gemini-pro"
    assert settings.gemini_base_url == "https://proxy.test/v1"
    assert settings.llm_timeout == 30.0
    assert settings.plan_prompt == "Plan {subjects} / {available_time}"
    assert settings.chat_prompt == "Q: {query}"


def test_blank_api_key_is_none():
    assert Settings.from_env({"GEMINI_API_KEY": ""}).gemini_api_key is None


@pytest.mark.parametrize(
    "env",
    [
        {"STUDYFLOW_PORT": "eighty"},
        {"STUDYFLOW_LLM_TIMEOUT": "soon"},
        {"STUDYFLOW_LLM_TIMEOUT": "0"},
        {"STUDYFLOW_LLM_TIMEOUT": "-5"},
    ],
)
def test_invalid_values_raise(env):
    with pytest.raises(ConfigurationError):
        Settings.from_env(env)


def test_settings_are_frozen():
    settings = Settings()
    with pytest.raises(AttributeError):
        settings.port = 1


def test_render_plan_prompt():
    prompt = render_plan_prompt(PLAN_PROMPT_TEMPLATE, ["Math", "History"], 120)
    assert "Subjects: Math, History" in prompt
    assert "Available Study Time (minutes): 120" in prompt
