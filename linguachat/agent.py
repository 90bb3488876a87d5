"""LangGraph conversation pipeline for the ``rag`` bot.

Architecture:
  One compiled ``StateGraph`` per process, five nodes:

    1. **router**            — pure keyword/regex classifier (no LLM call);
                               an explicit client mode always wins
    2. **faq**               — retrieves the top-3 chunks from the embedding
                               index, fills the grounding prompt, one LLM call,
                               cites the chunks as sources
    3. **practice**          — tutor system prompt + last 5 turns + message,
                               LLM call with the five practice tools bound
    4. **tools**             — runs the *first* requested tool call only
    5. **practice_followup** — second LLM call with the tool result appended

  Routing:
    router → (faq)      → faq → END
    router → (practice) → practice → (tool call?) → tools → practice_followup → END
                                   → (no call)   → END

  The graph holds no checkpointer: the client sends its own recent history
  with every request, so each invocation is independent and the compiled
  graph, the index and the tool registry are shared read-only.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Annotated, Any

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, AnyMessage, BaseMessage, ToolMessage
from langchain_openai import OpenAIEmbeddings
from langgraph.graph import END, StateGraph
from langgraph.graph.message import add_messages
from typing_extensions import TypedDict

from linguachat.config import (
    ANTHROPIC_API_KEY,
    EMBEDDING_MODEL,
    KNOWLEDGE_BASE_PATH,
    MODEL_MAX_TOKENS,
    MODEL_NAME,
    MODEL_TEMPERATURE,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    RETRIEVAL_K,
    SOURCE_EXCERPT_LENGTH,
)
from linguachat.errors import (
    ModelInvocationError,
    PipelineError,
    ToolCallShapeError,
    UninitializedError,
)
from linguachat.history import build_conversation, message_text
from linguachat.knowledge.corpus import Chunk, build_chunks, load_reference_document
from linguachat.knowledge.index import Embedder, EmbeddingIndex
from linguachat.models import (
    FAQ_MODE,
    PRACTICE_MODE,
    ChatResponse,
    ChunkSource,
    ConversationTurn,
    Source,
    ToolSource,
)
from linguachat.prompts import PRACTICE_SYSTEM_PROMPT, TOOL_CALL_APOLOGY, render_faq_prompt
from linguachat.routing import FAQ, classify_intent
from linguachat.services.metrics import metrics
from linguachat.tools.practice import PRACTICE_TOOLS, execute_tool

logger = logging.getLogger(__name__)


# ── State schema ─────────────────────────────────────────────────────


class PipelineState(TypedDict):
    """The state that flows through the graph for one request.

    ``messages`` is only filled on the practice path and uses the
    ``add_messages`` reducer, so a node returning an existing message id
    replaces that message instead of appending it.
    """

    question: str
    explicit_mode: str | None
    history: list[ConversationTurn]
    intent: str
    messages: Annotated[list[AnyMessage], add_messages]
    sources: list[Source]
    response: str


# ── Tool call normalisation ──────────────────────────────────────────


@dataclass(frozen=True)
class ToolInvocation:
    """A model tool request reduced to the one shape the pipeline uses."""

    tool_name: str
    tool_args: dict[str, Any] = field(default_factory=dict)
    call_id: str | None = None


def requested_tool_calls(message: BaseMessage) -> list[Any]:
    """Raw tool calls on *message*, LangChain-parsed ones preferred."""
    calls = getattr(message, "tool_calls", None)
    if calls:
        return list(calls)
    return list(message.additional_kwargs.get("tool_calls") or [])


def normalize_tool_call(raw: Any) -> ToolInvocation:
    """Accept an OpenAI-style or a LangChain-style tool call.

    OpenAI: ``{"id", "function": {"name", "arguments": "<json>"}}``
    LangChain: ``{"id", "name", "args": {...}}``
    """
    if not isinstance(raw, Mapping):
        raise ToolCallShapeError("Tool call is not a mapping", raw)

    function = raw.get("function")
    if isinstance(function, Mapping) and function.get("name"):
        arguments = function.get("arguments") or "{}"
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments)
            except json.JSONDecodeError as exc:
                raise ToolCallShapeError("Tool call arguments are not valid JSON", raw) from exc
        if not isinstance(arguments, Mapping):
            raise ToolCallShapeError("Tool call arguments are not an object", raw)
        return ToolInvocation(function["name"], dict(arguments), raw.get("id"))

    if raw.get("name"):
        args = raw.get("args") or {}
        if not isinstance(args, Mapping):
            raise ToolCallShapeError("Tool call args are not an object", raw)
        return ToolInvocation(raw["name"], dict(args), raw.get("id"))

    raise ToolCallShapeError("Unrecognised tool call shape", raw)


def _keep_first_tool_call(message: AIMessage) -> AIMessage:
    """Copy of *message* that only carries its first tool call.

    Providers reject a follow-up that leaves a requested call without a
    result, so the unexecuted calls are dropped from the transcript.
    """
    first = message.tool_calls[0]
    content = message.content
    if isinstance(content, list):
        content = [
            block for block in content
            if not (
                isinstance(block, dict)
                and block.get("type") == "tool_use"
                and block.get("id") != first.get("id")
            )
        ]
    return message.model_copy(update={"tool_calls": [first], "content": content})


# ── LLM / embedder builders ──────────────────────────────────────────


def _build_llm() -> ChatAnthropic:
    """Build the chat model shared by every path and assistant."""
    return ChatAnthropic(
        model=MODEL_NAME,
        api_key=ANTHROPIC_API_KEY,
        temperature=MODEL_TEMPERATURE,
        max_tokens=MODEL_MAX_TOKENS,
    )


def _build_embedder() -> OpenAIEmbeddings:
    return OpenAIEmbeddings(
        model=EMBEDDING_MODEL,
        api_key=OPENAI_API_KEY,
        base_url=OPENAI_BASE_URL,
    )


def _invoke_model(llm, payload, operation: str) -> BaseMessage:
    """Call *llm*, record metrics, and wrap any failure."""
    t0 = time.perf_counter()
    try:
        response = llm.invoke(payload)
    except Exception as exc:
        elapsed = (time.perf_counter() - t0) * 1000
        metrics.record_failure(
            "anthropic", operation, error_type=type(exc).__name__, latency_ms=elapsed,
        )
        raise ModelInvocationError(f"{operation} failed: {exc}", operation=operation) from exc

    elapsed = (time.perf_counter() - t0) * 1000
    metrics.record_success("anthropic", operation, latency_ms=elapsed)
    logger.debug("%s responded in %.0fms", operation, elapsed)
    return response


def _chunk_source(chunk: Chunk, score: float) -> ChunkSource:
    return ChunkSource(
        excerpt=chunk.text[:SOURCE_EXCERPT_LENGTH] + "...",
        category=chunk.category,
        identifier=chunk.id,
        score=round(score, 4),
    )


# ── Nodes ────────────────────────────────────────────────────────────


def router_node(state: PipelineState) -> dict:
    """Classify the message; writes ``intent`` only."""
    return {"intent": classify_intent(state["question"], state.get("explicit_mode"))}


def _make_faq_node(index: EmbeddingIndex, llm):
    def faq_node(state: PipelineState) -> dict:
        """Answer from the top-k retrieved chunks and cite them."""
        question = state["question"]
        logger.info("Processing FAQ query: %s", question)

        retrieved = index.query(question, RETRIEVAL_K)
        context = "\n\n".join(chunk.text for chunk, _ in retrieved)
        reply = _invoke_model(llm, render_faq_prompt(context, question), "faq_answer")

        # Sources come from a fresh query rather than the context above.
        cited = index.query(question, RETRIEVAL_K)
        return {
            "response": message_text(reply),
            "sources": [_chunk_source(chunk, score) for chunk, score in cited],
        }

    return faq_node


def _make_practice_node(llm_with_tools):
    def practice_node(state: PipelineState) -> dict:
        """First practice call, with the tool catalog bound."""
        logger.info("Processing English practice query: %s", state["question"])
        conversation = build_conversation(
            PRACTICE_SYSTEM_PROMPT, state.get("history") or [], state["question"],
        )
        reply = _invoke_model(llm_with_tools, conversation, "practice_initial")

        update: dict[str, Any] = {"messages": [*conversation, reply]}
        if not requested_tool_calls(reply):
            update["response"] = message_text(reply)
        return update

    return practice_node


def tools_node(state: PipelineState) -> dict:
    """Execute the first requested tool call and append its result."""
    ai_message = state["messages"][-1]
    raw_calls = requested_tool_calls(ai_message)
    if len(raw_calls) > 1:
        logger.info("Model requested %d tool calls; executing the first only", len(raw_calls))

    try:
        invocation = normalize_tool_call(raw_calls[0])
    except ToolCallShapeError as exc:
        logger.error("Invalid tool call structure: %s (%r)", exc, exc.raw_call)
        return {"response": TOOL_CALL_APOLOGY, "sources": []}

    call_id = invocation.call_id or f"call_{invocation.tool_name}"
    result = execute_tool(invocation.tool_name, invocation.tool_args)
    tool_message = ToolMessage(
        content=json.dumps(result, ensure_ascii=False),
        tool_call_id=call_id,
        name=invocation.tool_name,
    )

    new_messages: list[BaseMessage] = [tool_message]
    if isinstance(ai_message, AIMessage):
        if len(ai_message.tool_calls) > 1:
            new_messages.insert(0, _keep_first_tool_call(ai_message))
        elif not ai_message.tool_calls:
            # Raw call only in additional_kwargs: the result needs a parsed call to answer.
            new_messages.insert(0, ai_message.model_copy(update={"tool_calls": [{
                "name": invocation.tool_name,
                "args": invocation.tool_args,
                "id": call_id,
                "type": "tool_call",
            }]}))

    return {
        "messages": new_messages,
        "sources": [ToolSource(tool_name=invocation.tool_name, tool_args=invocation.tool_args)],
    }


def _make_followup_node(llm_with_tools):
    def followup_node(state: PipelineState) -> dict:
        """Second practice call, seeing the tool result."""
        reply = _invoke_model(llm_with_tools, state["messages"], "practice_followup")
        return {"messages": [reply], "response": message_text(reply)}

    return followup_node


# ── Conditional edges ────────────────────────────────────────────────


def route_by_intent(state: PipelineState) -> str:
    return "faq" if state.get("intent") == FAQ else "practice"


def should_use_tools(state: PipelineState) -> str:
    """Go to the tools node if the practice reply requested any tool."""
    last_message = state["messages"][-1]
    if requested_tool_calls(last_message):
        return "tools"
    return END


def after_tools(state: PipelineState) -> str:
    """Follow up only when a tool result was produced."""
    if isinstance(state["messages"][-1], ToolMessage):
        return "practice_followup"
    return END


# ── Graph assembly ───────────────────────────────────────────────────


def build_graph(index: EmbeddingIndex, llm: BaseChatModel):
    """Compile the routing graph around *index* and *llm*."""
    llm_with_tools = llm.bind_tools(list(PRACTICE_TOOLS))

    graph = StateGraph(PipelineState)
    graph.add_node("router", router_node)
    graph.add_node("faq", _make_faq_node(index, llm))
    graph.add_node("practice", _make_practice_node(llm_with_tools))
    graph.add_node("tools", tools_node)
    graph.add_node("practice_followup", _make_followup_node(llm_with_tools))

    graph.set_entry_point("router")
    graph.add_conditional_edges("router", route_by_intent, {"faq": "faq", "practice": "practice"})
    graph.add_edge("faq", END)
    graph.add_conditional_edges("practice", should_use_tools, {"tools": "tools", END: END})
    graph.add_conditional_edges(
        "tools", after_tools, {"practice_followup": "practice_followup", END: END},
    )
    graph.add_edge("practice_followup", END)

    compiled = graph.compile()
    logger.debug("Conversation graph compiled — %d chunks, %d tools", len(index), len(PRACTICE_TOOLS))
    return compiled


# ── Pipeline facade ──────────────────────────────────────────────────


class ConversationPipeline:
    """Entry point of the ``rag`` bot.

    Built once at start-up around an already-built index and handed to
    every request; it holds no per-request state.
    """

    def __init__(self, index: EmbeddingIndex, llm: BaseChatModel) -> None:
        self.index = index
        self.llm = llm
        self._graph = build_graph(index, llm)

    @property
    def is_ready(self) -> bool:
        return self.index.is_ready

    def run(
        self,
        message: str,
        history: Sequence[ConversationTurn] = (),
        explicit_mode: str | None = None,
    ) -> PipelineState:
        """Invoke the graph and return its final state.

        Raises ``PipelineError`` subclasses; use :meth:`process_query` for the
        envelope-returning variant.
        """
        if not self.is_ready:
            raise UninitializedError("Conversation pipeline is not initialised")

        return self._graph.invoke({
            "question": message,
            "explicit_mode": explicit_mode,
            "history": list(history),
            "intent": "",
            "messages": [],
            "sources": [],
            "response": "",
        })

    def answer_faq(self, message: str) -> tuple[str, list[Source]]:
        state = self.run(message, explicit_mode="faq")
        return state["response"], state["sources"]

    def answer_practice(
        self, message: str, history: Sequence[ConversationTurn] = (),
    ) -> tuple[str, list[Source]]:
        state = self.run(message, history, explicit_mode="practice")
        return state["response"], state["sources"]

    def process_query(
        self,
        message: str,
        history: Sequence[ConversationTurn] = (),
        explicit_mode: str | None = None,
    ) -> ChatResponse:
        """Answer *message* and wrap the outcome in the response envelope."""
        try:
            state = self.run(message, history, explicit_mode)
        except PipelineError:
            logger.exception("Error processing query")
            return ChatResponse.failure()
        except Exception:
            logger.exception("Unexpected error processing query")
            return ChatResponse.failure()

        mode = FAQ_MODE if state["intent"] == FAQ else PRACTICE_MODE
        return ChatResponse(
            success=True,
            response=state["response"],
            mode=mode,
            sources=state["sources"],
        )


def create_pipeline(
    llm: BaseChatModel | None = None,
    embedder: Embedder | None = None,
    document: Mapping[str, Any] | None = None,
) -> ConversationPipeline:
    """Load the knowledge base, embed it, and compile the pipeline.

    Any embedding failure propagates: the process must not serve traffic
    with a partial index.
    """
    if document is None:
        document = load_reference_document(KNOWLEDGE_BASE_PATH)
    chunks = build_chunks(document)
    index = EmbeddingIndex.build(chunks, embedder or _build_embedder())
    return ConversationPipeline(index, llm or _build_llm())
