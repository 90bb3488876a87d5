"""Tests for the FastAPI endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from linguachat.models import (
    ERROR_MODE,
    FAQ_MODE,
    LEARNING_MODE,
    PRACTICE_MODE,
    SUPPORT_MODE,
    ChatResponse,
    ChunkSource,
    ConversationTurn,
    ToolSource,
)
from linguachat.server import app


@pytest.fixture
def mock_pipeline():
    """Create a mock pipeline and attach it to app state (mirrors the lifespan)."""
    pipeline = MagicMock()
    pipeline.is_ready = True
    pipeline.process_query.return_value = ChatResponse(
        success=True,
        response="The Premium Plan costs 199,000 VND/month.",
        mode=FAQ_MODE,
        sources=[ChunkSource(excerpt="Premium Plan...", category="plan", identifier="plan_1", score=0.91)],
    )

    app.state.pipeline = pipeline
    yield pipeline
    app.state.pipeline = None


@pytest.fixture
def mock_assistants():
    support = MagicMock()
    support.process_query.return_value = ChatResponse(
        success=True, response="Please email support@linguachat.example.", mode=SUPPORT_MODE,
    )
    learning = MagicMock()
    learning.process_query.return_value = ChatResponse(
        success=True, response="Try shadowing for ten minutes a day.", mode=LEARNING_MODE,
    )
    app.state.assistants = {"support": support, "learning": learning}
    yield app.state.assistants
    app.state.assistants = {}


@pytest.fixture
def client(mock_pipeline, mock_assistants):
    """FastAPI test client with the mock bots wired up."""
    return TestClient(app)


class TestHealthEndpoint:
    def test_health_reports_initialised_index(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "linguachat"
        assert data["rag_initialized"] is True
        assert data["available_bots"] == ["rag", "support", "learning"]
        assert "timestamp" in data

    def test_health_before_start_up(self):
        app.state.pipeline = None
        response = TestClient(app).get("/api/health")
        assert response.status_code == 200
        assert response.json()["rag_initialized"] is False


class TestChatEndpoint:
    def test_faq_answer_envelope(self, client):
        response = client.post("/api/chat", json={"message": "what is the price of your plans"})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["mode"] == "FAQ Mode"
        assert data["response"].startswith("The Premium Plan")
        assert data["sources"][0]["identifier"] == "plan_1"
        assert "error" not in data

    def test_message_history_and_mode_are_forwarded(self, client, mock_pipeline):
        client.post(
            "/api/chat",
            json={
                "message": "  explain the past tense  ",
                "history": [
                    {"sender": "user", "text": "hi"},
                    {"sender": "bot", "text": "Hello! What shall we practise?"},
                ],
                "mode": "practice",
            },
        )
        message, history, mode = mock_pipeline.process_query.call_args[0]
        assert message == "explain the past tense"
        assert history == [
            ConversationTurn(sender="user", text="hi"),
            ConversationTurn(sender="bot", text="Hello! What shall we practise?"),
        ]
        assert mode == "practice"

    def test_mode_defaults_to_auto(self, client, mock_pipeline):
        client.post("/api/chat", json={"message": "hello"})
        assert mock_pipeline.process_query.call_args[0][2] is None

    def test_tool_sources_are_serialised(self, client, mock_pipeline):
        mock_pipeline.process_query.return_value = ChatResponse(
            success=True,
            response="Hello is pronounced /həˈloʊ/.",
            mode=PRACTICE_MODE,
            sources=[ToolSource(tool_name="get_pronunciation_help", tool_args={"word": "hello"})],
        )
        data = client.post("/api/chat", json={"message": "từ hello phát âm như nào"}).json()
        assert data["mode"] == "English Practice Mode"
        assert data["sources"] == [{
            "description": "tool invoked",
            "tool_name": "get_pronunciation_help",
            "tool_args": {"word": "hello"},
        }]

    @pytest.mark.parametrize(
        ("bot_type", "mode"),
        [("support", "Support Mode"), ("learning", "Learning Mode")],
    )
    def test_persona_bots_are_dispatched(self, client, mock_pipeline, mock_assistants, bot_type, mode):
        response = client.post("/api/chat", json={"message": "hello", "bot_type": bot_type})
        assert response.status_code == 200
        assert response.json()["mode"] == mode
        mock_assistants[bot_type].process_query.assert_called_once()
        mock_pipeline.process_query.assert_not_called()

    def test_pipeline_failure_envelope_omits_response(self, client, mock_pipeline):
        mock_pipeline.process_query.return_value = ChatResponse.failure()
        response = client.post("/api/chat", json={"message": "what is the price of your plans"})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is False
        assert data["mode"] == ERROR_MODE
        assert data["error"] == "Failed to process query"
        assert data["sources"] == []
        assert "response" not in data

    def test_unexpected_error_returns_500(self, client, mock_pipeline):
        mock_pipeline.process_query.side_effect = RuntimeError("LLM exploded")
        response = client.post("/api/chat", json={"message": "Hello!"})
        assert response.status_code == 500
        # Verify we do NOT leak the internal error message to the client
        detail = response.json()["detail"]
        assert "LLM exploded" not in detail
        assert "internal error" in detail.lower()

    def test_response_includes_request_id_header(self, client):
        response = client.post("/api/chat", json={"message": "Hello!"})
        assert "X-Request-ID" in response.headers

    def test_client_supplied_request_id_is_echoed(self, client):
        response = client.post(
            "/api/chat",
            json={"message": "Hello!"},
            headers={"X-Request-ID": "my-trace-id-123"},
        )
        assert response.headers["X-Request-ID"] == "my-trace-id-123"


class TestChatValidation:
    @pytest.mark.parametrize(
        "payload",
        [
            {"message": ""},
            {"message": "   \n\t"},
            {"message": "a" * 1001},
            {},
            {"message": "hi", "bot_type": "sales"},
            {"message": "hi", "mode": "quiz"},
            {"message": "hi", "history": [{"sender": "system", "text": "x"}]},
        ],
    )
    def test_invalid_requests_are_rejected(self, client, mock_pipeline, payload):
        response = client.post("/api/chat", json=payload)
        assert response.status_code == 422  # Pydantic validation error
        mock_pipeline.process_query.assert_not_called()

    def test_maximum_length_is_accepted(self, client, mock_pipeline):
        response = client.post("/api/chat", json={"message": "a" * 1000})
        assert response.status_code == 200
        mock_pipeline.process_query.assert_called_once()


class TestPipelineNotReady:
    def test_returns_503_when_pipeline_not_initialised(self, mock_assistants):
        """If the pipeline hasn't been set via lifespan, return 503."""
        app.state.pipeline = None
        response = TestClient(app).post("/api/chat", json={"message": "Hello!"})
        assert response.status_code == 503
        assert "starting up" in response.json()["detail"].lower()

    def test_returns_503_when_index_not_built(self, client, mock_pipeline):
        mock_pipeline.is_ready = False
        response = client.post("/api/chat", json={"message": "Hello!"})
        assert response.status_code == 503

    def test_persona_bot_before_start_up(self):
        app.state.assistants = {}
        response = TestClient(app).post("/api/chat", json={"message": "hi", "bot_type": "support"})
        assert response.status_code == 503


class TestLifespan:
    def test_lifespan_builds_pipeline_and_assistants(self):
        pipeline = MagicMock()
        pipeline.is_ready = True
        pipeline.index = [object()] * 10
        assistants = {"support": MagicMock(), "learning": MagicMock()}

        with (
            patch("linguachat.server.create_pipeline", return_value=pipeline) as create_pipe,
            patch("linguachat.server.create_assistants", return_value=assistants) as create_bots,
        ):
            with TestClient(app) as tc:
                assert tc.get("/api/health").json()["rag_initialized"] is True
                assert app.state.pipeline is pipeline
                assert app.state.assistants is assistants

        create_pipe.assert_called_once_with()
        create_bots.assert_called_once_with(pipeline.llm)
        app.state.pipeline = None
        app.state.assistants = {}


class TestInfoEndpoints:
    def test_root_returns_service_info(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "LinguaChat API"
        assert "docs" in data

    def test_info_lists_bots_and_endpoints(self, client):
        data = client.get("/api/info").json()
        assert data["bots"] == ["rag", "support", "learning"]
        assert "POST /api/chat" in data["endpoints"]
