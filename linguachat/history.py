"""Map the client-held conversation window onto LangChain messages."""

from __future__ import annotations

from collections.abc import Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from linguachat.config import HISTORY_WINDOW
from linguachat.models import ConversationTurn


def history_to_messages(
    history: Sequence[ConversationTurn],
    window: int = HISTORY_WINDOW,
) -> list[BaseMessage]:
    """Keep the last *window* turns; user turns become human messages."""
    recent = list(history)[-window:] if window > 0 else []
    return [
        HumanMessage(content=turn.text) if turn.sender == "user" else AIMessage(content=turn.text)
        for turn in recent
    ]


def build_conversation(
    system_prompt: str,
    history: Sequence[ConversationTurn],
    message: str,
) -> list[BaseMessage]:
    """System prompt, then the recent window, then the new user message."""
    return [
        SystemMessage(content=system_prompt),
        *history_to_messages(history),
        HumanMessage(content=message),
    ]


def message_text(message: BaseMessage) -> str:
    """Plain text of a model reply.

    Anthropic replies that contain tool calls carry a list of content
    blocks rather than a string; only the text blocks are kept.
    """
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
