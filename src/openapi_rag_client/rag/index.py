"""In-memory embedding index and retriever.

Documents are embedded once when the index is built; queries are embedded
with the same service and ranked by cosine similarity. The index lives for a
single generation request and is never mutated after construction.

Retrieval never raises. Any failure while building the index, embedding the
query or ranking yields a degraded RetrievalOutcome carrying one sentinel
document, so prompt assembly and generation still run.
"""

import logging
from typing import Protocol, runtime_checkable

import numpy as np
from pydantic import BaseModel, ConfigDict

from .corpus import KIND_RETRIEVAL_ERROR, Document

logger = logging.getLogger(__name__)

DEFAULT_K = 8

RETRIEVAL_ERROR_TEXT = "Error retrieving API documentation. Please try with a simpler query."


@runtime_checkable
class Embedder(Protocol):
    def embed(self, text: str) -> list[float]: ...


class RetrievalOutcome(BaseModel):
    """Retrieved context, or an explicit degraded marker."""

    model_config = ConfigDict(frozen=True)

    documents: list[Document]
    degraded: bool = False
    error: str | None = None

    @classmethod
    def failed(cls, error: Exception) -> "RetrievalOutcome":
        sentinel = Document(content=RETRIEVAL_ERROR_TEXT, tags={"kind": KIND_RETRIEVAL_ERROR})
        return cls(documents=[sentinel], degraded=True, error=f"{type(error).__name__}: {error}")


class EmbeddingIndex:
    """(vector, document) pairs queryable by cosine similarity."""

    def __init__(self, documents: list[Document], vectors: np.ndarray):
        if len(documents) != len(vectors):
            raise ValueError("documents and vectors must have the same length")
        self._documents = tuple(documents)
        self._vectors = _normalize_rows(vectors)
        self._vectors.setflags(write=False)

    @classmethod
    def build(cls, documents: list[Document], embedder: Embedder) -> "EmbeddingIndex":
        """Embed every document's content exactly once."""
        if not documents:
            return cls([], np.zeros((0, 0)))
        vectors = [embedder.embed(doc.content) for doc in documents]
        matrix = np.asarray(vectors, dtype=np.float64)
        if matrix.ndim != 2:
            raise ValueError("embedder returned vectors of inconsistent length")
        return cls(documents, matrix)

    def __len__(self) -> int:
        return len(self._documents)

    @property
    def documents(self) -> tuple[Document, ...]:
        return self._documents

    def search(self, query_vector: list[float], k: int) -> list[Document]:
        """Return the k most similar documents, most similar first.

        Ties keep corpus order. If k exceeds the corpus size the whole corpus
        is returned.
        """
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")
        if not self._documents:
            return []

        query = np.asarray(query_vector, dtype=np.float64)
        if query.shape != (self._vectors.shape[1],):
            raise ValueError(
                f"query vector has shape {query.shape}, index expects ({self._vectors.shape[1]},)"
            )
        norm = np.linalg.norm(query)
        scores = self._vectors @ (query / norm if norm else query)
        order = np.argsort(-scores, kind="stable")[:k]
        return [self._documents[i] for i in order]


class Retriever:
    """Embeds a corpus and answers top-k queries against it."""

    def __init__(self, embedder: Embedder, k: int = DEFAULT_K):
        if k < 1:
            raise ValueError(f"k must be >= 1, got {k}")
        self.embedder = embedder
        self.k = k
        self._index: EmbeddingIndex | None = None
        self._build_error: Exception | None = None

    def index(self, documents: list[Document]) -> None:
        try:
            self._index = EmbeddingIndex.build(documents, self.embedder)
        except Exception as exc:
            logger.warning("Failed to embed documents: %s", exc)
            self._build_error = exc

    def retrieve(self, query: str) -> RetrievalOutcome:
        if self._index is None:
            error = self._build_error or RuntimeError("retrieval index was never built")
            logger.warning("Retrieval degraded, no index available: %s", error)
            return RetrievalOutcome.failed(error)

        try:
            documents = self._index.search(self.embedder.embed(query), self.k)
        except Exception as exc:
            logger.warning("Error retrieving documents: %s", exc)
            return RetrievalOutcome.failed(exc)
        return RetrievalOutcome(documents=documents)


def _normalize_rows(matrix: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return matrix / norms
