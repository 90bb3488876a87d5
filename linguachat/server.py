"""FastAPI server for the LinguaChat API.

Run with:
    uvicorn linguachat.server:app --reload --host 0.0.0.0 --port 8080
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from linguachat.agent import create_pipeline
from linguachat.api.routes import router
from linguachat.assistants import create_assistants
from linguachat.config import APP_VERSION, CORS_ORIGINS, SERVER_HOST, SERVER_PORT

# ── Logging ──────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: initialise shared resources ────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    """Build the corpus, embed it and compile the pipeline before serving.

    Requests that arrive before this finishes get a 503 from the routes.
    An embedding failure aborts start-up.
    """
    application.state.pipeline = None
    application.state.assistants = {}

    logger.info("Building knowledge index and conversation graph…")
    pipeline = create_pipeline()
    application.state.assistants = create_assistants(pipeline.llm)
    application.state.pipeline = pipeline
    logger.info("Pipeline ready (%d chunks indexed).", len(pipeline.index))
    yield


# ── FastAPI application ──────────────────────────────────────────────
app = FastAPI(
    title="LinguaChat API",
    description=(
        "English learning chatbot — FAQ answers grounded in the platform "
        "knowledge base, and practice conversations with tutor tools."
    ),
    version=APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request-ID middleware ────────────────────────────────────────────
@app.middleware("http")
async def add_request_id(request: Request, call_next) -> Response:
    """Attach a request ID (client-supplied or generated) for log correlation."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    request.state.request_id = request_id
    logger.info("[%s] %s %s", request_id, request.method, request.url.path)
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "LinguaChat API",
        "version": APP_VERSION,
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    logger.info("Starting LinguaChat API server on %s:%d", SERVER_HOST, SERVER_PORT)
    uvicorn.run(
        "linguachat.server:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=True,
    )
