"""FastAPI route definitions for the LinguaChat API."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException, Request

from linguachat.api.schemas import AVAILABLE_BOTS, ChatRequest, HealthResponse
from linguachat.config import APP_VERSION
from linguachat.models import ChatResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_pipeline(request: Request):
    """Retrieve the conversation pipeline built during the lifespan.

    ``None`` means start-up (corpus embedding) has not finished, so the
    request is refused with 503 instead of reaching an empty index.
    """
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None or not pipeline.is_ready:
        raise HTTPException(
            status_code=503,
            detail="The chatbot is still starting up. Please try again in a moment.",
        )
    return pipeline


def _get_assistant(request: Request, bot_type: str):
    assistants = getattr(request.app.state, "assistants", None) or {}
    assistant = assistants.get(bot_type)
    if assistant is None:
        raise HTTPException(
            status_code=503,
            detail="The chatbot is still starting up. Please try again in a moment.",
        )
    return assistant


# ── Endpoints ────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
async def health_check(http_request: Request):
    """Health check endpoint; reports whether the index is built."""
    pipeline = getattr(http_request.app.state, "pipeline", None)
    return HealthResponse(rag_initialized=bool(pipeline is not None and pipeline.is_ready))


@router.get("/info")
async def info():
    """Describe the API."""
    return {
        "name": "LinguaChat API",
        "version": APP_VERSION,
        "description": "RAG-powered chatbot for English learning support",
        "bots": AVAILABLE_BOTS,
        "endpoints": {
            "POST /api/chat": "Main chat endpoint",
            "GET /api/health": "Health check",
            "GET /api/info": "API information",
        },
    }


@router.post("/chat", response_model=ChatResponse, response_model_exclude_none=True)
async def chat(request: ChatRequest, http_request: Request):
    """Send a message to the selected bot and get the reply envelope.

    Pipeline failures are already folded into the envelope
    (``success=false``), so they are returned with status 200.  Only
    unexpected exceptions become a 500.

    The bots make blocking model calls, so they run in the default
    thread pool via ``asyncio.to_thread``.
    """
    request_id = getattr(http_request.state, "request_id", "?")

    if request.bot_type == "rag":
        pipeline = _get_pipeline(http_request)
        call = (pipeline.process_query, request.message, request.history, request.mode)
    else:
        assistant = _get_assistant(http_request, request.bot_type)
        call = (assistant.process_query, request.message, request.history)

    try:
        result: ChatResponse = await asyncio.to_thread(*call)
    except Exception as e:
        # Full traceback stays server-side; the client gets a generic detail.
        logger.exception("[%s] Error processing chat request", request_id)
        raise HTTPException(
            status_code=500,
            detail="An internal error occurred. Please try again.",
        ) from e

    logger.info(
        "[%s] Chat request processed: bot=%s mode=%s sources=%d length=%d",
        request_id, request.bot_type, result.mode, len(result.sources), len(request.message),
    )
    return result
