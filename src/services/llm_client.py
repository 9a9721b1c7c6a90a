"""
Generative Model Client for StudyFlow.

Thin async boundary to the external model. Callers hand over a prompt
and a response schema and get back the decoded JSON object, or one of
two exceptions:

- ServiceUnavailableError: transport failure, non-2xx status, no API key
- GenerationError: the call succeeded but the body held no usable JSON object

One attempt per call. No retry, no streaming.

Usage:
    client = GeminiClient(api_key="...", model="gemini-2.0-flash")
    data = await client.generate(prompt, PLAN_RESPONSE_SCHEMA)
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import httpx

from src.config.settings import DEFAULT_GEMINI_BASE_URL, DEFAULT_GEMINI_MODEL, Settings
from src.lib.exceptions import GenerationError, ServiceUnavailableError

logger = logging.getLogger(__name__)


class StructuredModel(Protocol):
    """Anything that turns a prompt + response schema into a JSON object."""

    async def generate(
        self, prompt: str, response_schema: dict[str, Any]
    ) -> dict[str, Any]: ...


class GeminiClient:
    """
    Gemini ``generateContent`` client with JSON-mode output.

    Args:
        api_key: Gemini API key (calls fail as unavailable when missing)
        model: Model name
        base_url: REST base URL
        timeout: Request timeout in seconds, None for no timeout
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_GEMINI_MODEL,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> GeminiClient:
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout=settings.llm_timeout,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, prompt: str, response_schema: dict[str, Any]) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            },
        }

    async def generate(
        self, prompt: str, response_schema: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Send one structured-output request.

        Args:
            prompt: Rendered prompt text
            response_schema: Schema the answer must follow

        Returns:
            Decoded JSON object from the first candidate

        Raises:
            ServiceUnavailableError: On transport/HTTP failure or missing key
            GenerationError: On an unusable response body
        """
        if not self.api_key:
            raise ServiceUnavailableError("GEMINI_API_KEY is not configured")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    self.endpoint,
                    json=self.build_payload(prompt, response_schema),
                    headers={"x-goog-api-key": self.api_key},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Model call to %s failed with status %s",
                self.model, e.response.status_code,
            )
            raise ServiceUnavailableError(
                f"Model returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Model call to %s failed: %s", self.model, e)
            raise ServiceUnavailableError(f"Model unreachable: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise GenerationError("Model response was not valid JSON") from e

        return self.extract_json(body)

    @staticmethod
    def extract_json(body: Any) -> dict[str, Any]:
        """
        Pull the JSON object out of a generateContent response body.

        Raises:
            GenerationError: If there is no candidate text or it is not a JSON object
        """
        if not isinstance(body, dict):
            raise GenerationError("Unexpected response shape")

        candidates = body.get("candidates") or []
        if not candidates:
            block_reason = (body.get("promptFeedback") or {}).get("blockReason")
            if block_reason:
                raise GenerationError(f"Prompt blocked: {block_reason}")
            raise GenerationError("Model returned no candidates")

        first = candidates[0] if isinstance(candidates, list) else None
        if not isinstance(first, dict):
            raise GenerationError("Unexpected candidate shape")

        content = first.get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        text = "".join(
            part.get("text", "") for part in parts or [] if isinstance(part, dict)
        ).strip()
        if not text:
            finish_reason = first.get("finishReason", "UNKNOWN")
            raise GenerationError(f"Model returned no text (finishReason={finish_reason})")

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise GenerationError("Model text was not valid JSON") from e

        if not isinstance(data, dict):
            raise GenerationError("Model JSON was not an object")
        return data


__all__ = ["StructuredModel", "GeminiClient"]
