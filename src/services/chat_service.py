"""
Chat Query Service for StudyFlow.

Question-answering boundary: one free-text question in, one validated
answer out, no streaming, no retries. Same result taxonomy as the plan
service.

ChatTranscript carries the presentation contract around it: the user's
message is appended optimistically, then either the answer is appended
or the optimistic message is removed again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import ValidationError as PydanticValidationError

from src.config.prompts import CHAT_PROMPT_TEMPLATE, render_chat_prompt
from src.core.result import ActionResult
from src.lib.ai_guardrails import AIGuardrails
from src.lib.errors import GENERATION_ERROR, SERVICE_UNAVAILABLE, VALIDATION_ERROR
from src.lib.exceptions import GenerationError, ServiceError
from src.models.plan import CHAT_RESPONSE_SCHEMA, ChatOutput
from src.services.llm_client import StructuredModel

logger = logging.getLogger(__name__)

EMPTY_QUERY = "Please enter a question."
ANSWER_FAILED = "AI could not answer that question. Try rephrasing it."


class ChatQueryService:
    """
    Answers study questions through the external model.

    Args:
        model: Structured-output model client
        prompt_template: Chat prompt with a {query} placeholder
    """

    def __init__(
        self,
        model: StructuredModel,
        prompt_template: str = CHAT_PROMPT_TEMPLATE,
    ) -> None:
        self._model = model
        self._prompt_template = prompt_template

    async def ask(self, query: Any) -> ActionResult[ChatOutput]:
        """
        Ask one question.

        Args:
            query: Non-empty question text

        Returns:
            ActionResult with the answer on success
        """
        if not isinstance(query, str) or not query.strip():
            return ActionResult.fail(VALIDATION_ERROR, EMPTY_QUERY)

        try:
            prompt = render_chat_prompt(self._prompt_template, query.strip())
            raw = await self._model.generate(prompt, CHAT_RESPONSE_SCHEMA)
            output = ChatOutput.model_validate(raw)
        except (GenerationError, PydanticValidationError) as e:
            logger.warning("Chat produced no usable answer: %s", e)
            return ActionResult.fail(GENERATION_ERROR, ANSWER_FAILED)
        except ServiceError as e:
            logger.warning("Chat request failed: %s", e)
            return ActionResult.fail(SERVICE_UNAVAILABLE)
        except Exception:
            logger.exception("Unexpected error answering chat query")
            return ActionResult.fail(SERVICE_UNAVAILABLE)

        check = AIGuardrails.check_output(output.answer)
        if check.empty:
            return ActionResult.fail(GENERATION_ERROR, ANSWER_FAILED)

        return ActionResult.ok(ChatOutput(answer=check.sanitized_text))


# =============================================================================
# Transcript
# =============================================================================


@dataclass(frozen=True, eq=False)
class ChatMessage:
    """One transcript line. Compared by identity so rollback removes the exact message."""

    role: Literal["user", "assistant"]
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


class ChatTranscript:
    """In-memory conversation shown next to the chat widget."""

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    async def ask(
        self, service: ChatQueryService, query: str
    ) -> ActionResult[ChatOutput]:
        """
        Append the question, call the service, then commit or roll back.

        On failure the optimistic user message is removed so the transcript
        is exactly as it was before the call.
        """
        pending = ChatMessage(role="user", content=query)
        self._messages.append(pending)

        result = await service.ask(query)

        if result.success and result.data is not None:
            self._messages.append(ChatMessage(role="assistant", content=result.data.answer))
        else:
            self._messages = [m for m in self._messages if m is not pending]

        return result

    def to_list(self) -> list[dict[str, str]]:
        return [m.to_dict() for m in self._messages]


__all__ = [
    "ANSWER_FAILED",
    "EMPTY_QUERY",
    "ChatMessage",
    "ChatQueryService",
    "ChatTranscript",
]
