"""Fixed-persona assistants behind the ``support`` and ``learning`` bots.

No retrieval and no tools: a system prompt, the recent window and the new
message go to the chat model in a single call.  Failures are reported in the
envelope with the assistant's own error mode rather than raised.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from langchain_core.language_models import BaseChatModel

from linguachat.history import build_conversation, message_text
from linguachat.models import (
    LEARNING_ERROR_MODE,
    LEARNING_MODE,
    SUPPORT_ERROR_MODE,
    SUPPORT_MODE,
    ChatResponse,
    ConversationTurn,
)
from linguachat.prompts import LEARNING_SYSTEM_PROMPT, SUPPORT_SYSTEM_PROMPT
from linguachat.services.metrics import metrics

logger = logging.getLogger(__name__)


class PersonaAssistant:
    """A single-call chat assistant with a fixed system prompt."""

    name: str = "persona"
    system_prompt: str = ""
    mode: str = ""
    error_mode: str = ""

    def __init__(self, llm: BaseChatModel) -> None:
        self.llm = llm

    def process_query(
        self,
        message: str,
        history: Sequence[ConversationTurn] = (),
    ) -> ChatResponse:
        logger.info("Processing %s query: %s", self.name, message)
        conversation = build_conversation(self.system_prompt, history, message)
        operation = f"{self.name}_invoke"

        t0 = time.perf_counter()
        try:
            reply = self.llm.invoke(conversation)
        except Exception as exc:
            metrics.record_failure(
                "anthropic", operation,
                error_type=type(exc).__name__,
                latency_ms=(time.perf_counter() - t0) * 1000,
            )
            logger.exception("Error processing %s query", self.name)
            return ChatResponse.failure(
                mode=self.error_mode, error=f"Failed to process {self.name} query",
            )

        metrics.record_success("anthropic", operation, latency_ms=(time.perf_counter() - t0) * 1000)
        return ChatResponse(success=True, response=message_text(reply), mode=self.mode, sources=[])


class SupportAssistant(PersonaAssistant):
    name = "support"
    system_prompt = SUPPORT_SYSTEM_PROMPT
    mode = SUPPORT_MODE
    error_mode = SUPPORT_ERROR_MODE


class LearningAssistant(PersonaAssistant):
    name = "learning"
    system_prompt = LEARNING_SYSTEM_PROMPT
    mode = LEARNING_MODE
    error_mode = LEARNING_ERROR_MODE


def create_assistants(llm: BaseChatModel) -> dict[str, PersonaAssistant]:
    """Persona assistants keyed by their ``bot_type``."""
    return {
        SupportAssistant.name: SupportAssistant(llm),
        LearningAssistant.name: LearningAssistant(llm),
    }
