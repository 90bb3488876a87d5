"""Pydantic models shared by the pipeline, the assistants and the API.

The :class:`ChatResponse` envelope is the stable contract every bot returns,
success or failure.  ``mode`` is what the frontend uses to render the reply,
so its string values are fixed constants.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

# ── Mode labels ──────────────────────────────────────────────────────
FAQ_MODE = "FAQ Mode"
PRACTICE_MODE = "English Practice Mode"
SUPPORT_MODE = "Support Mode"
LEARNING_MODE = "Learning Mode"
ERROR_MODE = "Error"
SUPPORT_ERROR_MODE = "Support Error"
LEARNING_ERROR_MODE = "Learning Error"

TOOL_SOURCE_DESCRIPTION = "tool invoked"


class ConversationTurn(BaseModel):
    """One prior message of the client-held conversation window."""

    sender: Literal["user", "bot"]
    text: str


class ChunkSource(BaseModel):
    """A knowledge-base chunk cited by an FAQ answer."""

    excerpt: str
    category: str
    identifier: str
    score: float | None = None


class ToolSource(BaseModel):
    """A tool call that contributed to a practice answer."""

    description: str = TOOL_SOURCE_DESCRIPTION
    tool_name: str
    tool_args: dict[str, Any] = Field(default_factory=dict)


Source = ChunkSource | ToolSource


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ChatResponse(BaseModel):
    """Uniform reply envelope for every bot and every outcome."""

    success: bool
    response: str | None = Field(None, description="The bot's reply; omitted on failure")
    error: str | None = Field(None, description="Generic failure description")
    mode: str
    sources: list[Source] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=_utc_now)

    @classmethod
    def failure(cls, mode: str = ERROR_MODE, error: str = "Failed to process query") -> ChatResponse:
        """Build the error envelope: no response text, no sources."""
        return cls(success=False, error=error, mode=mode, sources=[])
