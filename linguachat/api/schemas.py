"""Pydantic schemas for the FastAPI endpoints."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from linguachat.config import APP_VERSION, MAX_MESSAGE_LENGTH
from linguachat.models import ConversationTurn

BotType = Literal["rag", "support", "learning"]
AVAILABLE_BOTS: list[str] = ["rag", "support", "learning"]


class ChatRequest(BaseModel):
    """Incoming chat message from the frontend."""

    message: str = Field(
        ..., min_length=1, max_length=MAX_MESSAGE_LENGTH, description="The user's message",
    )
    history: list[ConversationTurn] = Field(
        default_factory=list,
        description="Recent conversation turns held by the client (last 5 are used)",
    )
    bot_type: BotType = Field("rag", description="Which bot should answer")
    mode: Literal["faq", "practice"] | None = Field(
        None, description="Force the FAQ or practice path of the rag bot",
    )

    @field_validator("message")
    @classmethod
    def _strip_message(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("Message must not be blank")
        return stripped


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    service: str = "linguachat"
    rag_initialized: bool = False
    available_bots: list[str] = Field(default_factory=lambda: list(AVAILABLE_BOTS))
    version: str = APP_VERSION
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
