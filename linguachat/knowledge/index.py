"""In-memory embedding index over the knowledge corpus.

The corpus is tiny (a few dozen chunks) and rebuilt on every start-up, so
the index is a plain linear scan: every chunk is embedded once in
:meth:`EmbeddingIndex.build`, the vectors are L2-normalised into one numpy
matrix, and a query is a single matrix-vector product.

The index is immutable after ``build`` returns, which makes it safe to share
between concurrent request threads without locking.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

import numpy as np

from linguachat.config import RETRIEVAL_K
from linguachat.errors import RetrievalError, UninitializedError
from linguachat.knowledge.corpus import Chunk
from linguachat.services.metrics import metrics

logger = logging.getLogger(__name__)


@runtime_checkable
class Embedder(Protocol):
    """Structural type for any LangChain-compatible embedding model."""

    def embed_documents(self, texts: list[str]) -> list[list[float]]: ...

    def embed_query(self, text: str) -> list[float]: ...


def _normalise(matrix: np.ndarray) -> np.ndarray:
    """Scale each row to unit length; all-zero rows stay zero."""
    norms = np.linalg.norm(matrix, axis=-1, keepdims=True)
    return np.divide(matrix, norms, out=np.zeros_like(matrix), where=norms > 0)


class EmbeddingIndex:
    """Cosine-similarity nearest-neighbour search over embedded chunks."""

    def __init__(
        self,
        chunks: Sequence[Chunk] = (),
        vectors: np.ndarray | None = None,
        embedder: Embedder | None = None,
    ) -> None:
        self._chunks: tuple[Chunk, ...] = tuple(chunks)
        self._embedder = embedder
        if vectors is None:
            self._matrix: np.ndarray | None = None
        else:
            matrix = _normalise(np.asarray(vectors, dtype=np.float32))
            matrix.setflags(write=False)
            self._matrix = matrix

    # ── Construction ─────────────────────────────────────────────────

    @classmethod
    def build(cls, chunks: Sequence[Chunk], embedder: Embedder) -> EmbeddingIndex:
        """Embed every chunk once and return a ready index.

        Raises ``RetrievalError`` if the embedder fails; no partial index
        is ever returned.
        """
        texts = [chunk.text for chunk in chunks]
        t0 = time.perf_counter()
        try:
            vectors = embedder.embed_documents(texts) if texts else []
        except Exception as exc:
            metrics.record_failure(
                "embeddings", "embed_documents",
                error_type=type(exc).__name__,
                latency_ms=(time.perf_counter() - t0) * 1000,
            )
            raise RetrievalError(f"Failed to embed the knowledge corpus: {exc}") from exc

        elapsed = (time.perf_counter() - t0) * 1000
        metrics.record_success("embeddings", "embed_documents", latency_ms=elapsed)

        if len(vectors) != len(texts):
            raise RetrievalError(
                f"Embedder returned {len(vectors)} vectors for {len(texts)} chunks"
            )

        if texts:
            matrix = np.asarray(vectors, dtype=np.float32).reshape(len(texts), -1)
        else:
            matrix = np.zeros((0, 0), dtype=np.float32)
        logger.info(
            "Embedding index built: %d chunks, dim=%d (%.0fms)",
            len(texts), matrix.shape[1], elapsed,
        )
        return cls(chunks, matrix, embedder)

    # ── Introspection ────────────────────────────────────────────────

    @property
    def is_ready(self) -> bool:
        return self._matrix is not None and self._embedder is not None

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        return self._chunks

    def __len__(self) -> int:
        return len(self._chunks)

    # ── Search ───────────────────────────────────────────────────────

    def query(self, text: str, k: int = RETRIEVAL_K) -> list[tuple[Chunk, float]]:
        """Return the *k* chunks most similar to *text*, best first.

        Scores are cosine similarities.  Equal scores keep corpus order.
        """
        if not self.is_ready:
            raise UninitializedError("The embedding index has not been built yet.")
        if k <= 0 or not self._chunks:
            return []

        t0 = time.perf_counter()
        try:
            raw = self._embedder.embed_query(text)
        except Exception as exc:
            metrics.record_failure(
                "embeddings", "embed_query",
                error_type=type(exc).__name__,
                latency_ms=(time.perf_counter() - t0) * 1000,
            )
            raise RetrievalError(f"Failed to embed the query: {exc}") from exc
        metrics.record_success(
            "embeddings", "embed_query", latency_ms=(time.perf_counter() - t0) * 1000,
        )

        query_vec = _normalise(np.asarray(raw, dtype=np.float32))
        if query_vec.shape[-1] != self._matrix.shape[1]:
            raise RetrievalError(
                f"Query vector has dim {query_vec.shape[-1]}, "
                f"index expects {self._matrix.shape[1]}"
            )

        scores = self._matrix @ query_vec
        # Stable sort on the negated scores keeps corpus order for ties.
        order = np.argsort(-scores, kind="stable")[:k]
        return [(self._chunks[i], float(scores[i])) for i in order]
