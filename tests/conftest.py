"""Shared test fixtures for the LinguaChat test suite."""

from __future__ import annotations

import copy
import json
import os
import re
import zlib
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from langchain_core.messages import AIMessage


def pytest_configure(config):
    """Set test environment variables BEFORE collection starts.

    This runs before any imports, so config.py won't fail on module load.
    """
    os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key-123")
    os.environ.setdefault("OPENAI_API_KEY", "test-openai-key-456")


_KB_PATH = Path(__file__).resolve().parent.parent / "linguachat" / "data" / "knowledge_base.json"


class KeywordEmbedder:
    """Deterministic bag-of-words embedder.

    Each token is hashed (crc32, stable across processes) into one of
    ``dim`` buckets, so texts sharing words get a high cosine similarity.
    """

    def __init__(self, dim: int = 256) -> None:
        self.dim = dim
        self.document_calls = 0
        self.query_calls = 0

    def _embed(self, text: str) -> list[float]:
        vec = [0.0] * self.dim
        for token in re.findall(r"\w+", text.lower()):
            vec[zlib.crc32(token.encode("utf-8")) % self.dim] += 1.0
        return vec

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls += 1
        return [self._embed(t) for t in texts]

    def embed_query(self, text: str) -> list[float]:
        self.query_calls += 1
        return self._embed(text)


@pytest.fixture
def reference_document() -> dict:
    """A fresh copy of the shipped knowledge base."""
    with _KB_PATH.open(encoding="utf-8") as fh:
        return copy.deepcopy(json.load(fh))


@pytest.fixture
def embedder() -> KeywordEmbedder:
    return KeywordEmbedder()


@pytest.fixture
def chunks(reference_document):
    from linguachat.knowledge.corpus import build_chunks

    return build_chunks(reference_document)


@pytest.fixture
def index(chunks, embedder):
    from linguachat.knowledge.index import EmbeddingIndex

    return EmbeddingIndex.build(chunks, embedder)


@pytest.fixture
def make_llm():
    """Factory for a mock chat model.

    ``plain`` replies serve direct ``llm.invoke`` calls (FAQ path, persona
    bots); ``with_tools`` replies serve the ``bind_tools`` model, one per
    call, in order.
    """

    def _make(plain: str | list | None = None, with_tools: list | None = None):
        llm = MagicMock()
        if isinstance(plain, list):
            llm.invoke.side_effect = [AIMessage(content=p) for p in plain]
        else:
            llm.invoke.return_value = AIMessage(content=plain or "")
        tools_llm = MagicMock()
        tools_llm.invoke.side_effect = list(with_tools or [])
        llm.bind_tools.return_value = tools_llm
        return llm

    return _make
