"""LinguaChat — a chatbot API for an English learning platform.

Architecture Overview
=====================

Three bots sit behind one ``POST /api/chat`` endpoint:

1. **rag** — a LangGraph pipeline that routes every message either to
   *FAQ mode* (retrieve the closest knowledge-base chunks, answer from them,
   cite them) or to *English practice mode* (tutor conversation where the
   model may call one of five practice tools).
2. **support** and **learning** — single-call persona assistants.

Routing inside the rag bot is a pure keyword/regex function: an explicit
client mode wins, then practice-tool trigger phrases, then FAQ keywords,
defaulting to practice.  See ``linguachat/routing.py``.

Key Design Decisions
--------------------
- **LLM**: Anthropic via ``langchain-anthropic``; one client shared by the
  pipeline and the assistants.
- **Embeddings**: OpenAI embeddings via ``langchain-openai``; the corpus is
  embedded once in the FastAPI lifespan into an in-memory numpy index.
- **Stateless requests**: the client sends its recent history with every
  message; the graph has no checkpointer.
- **Tool calls**: only the first tool call of a reply is executed, followed
  by exactly one follow-up model call.
- **Errors**: pipeline failures become ``{"success": false, "mode": "Error"}``
  envelopes; see ``linguachat/errors.py``.

Package Structure
-----------------
- ``linguachat/agent.py`` — LangGraph pipeline and ``ConversationPipeline``
- ``linguachat/routing.py`` / ``routing_rules.py`` — intent router and its data
- ``linguachat/knowledge/`` — corpus builder and embedding index
- ``linguachat/tools/`` — practice tools and their lookup tables
- ``linguachat/assistants.py`` — support / learning persona bots
- ``linguachat/config.py`` — configuration from environment variables
- ``linguachat/server.py`` — FastAPI application
- ``linguachat/main.py`` — CLI chat interface
- ``linguachat/api/`` — FastAPI routes and request schemas
- ``linguachat/services/metrics.py`` — CloudWatch call metrics
"""
