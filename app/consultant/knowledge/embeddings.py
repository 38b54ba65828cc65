"""Semantic lookup over short texts with OpenAI embeddings."""

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

Embedder = Callable[[list[str]], Awaitable[list[list[float]]]]

DEFAULT_EMBEDDING_MODEL = "text-embedding-3-small"


@dataclass
class OpenAIEmbedder:
    """Batch embedder backed by an AsyncOpenAI or AsyncAzureOpenAI client.

    Args:
        client: OpenAI SDK client
        model: Embedding model, or the deployment name on Azure
    """

    client: Any
    model: str = DEFAULT_EMBEDDING_MODEL

    async def __call__(self, texts: list[str]) -> list[list[float]]:
        response = await self.client.embeddings.create(input=texts, model=self.model)
        return [item.embedding for item in response.data]


def cosine_similarity(vec1: list[float], vec2: list[float]) -> float:
    if len(vec1) != len(vec2):
        raise ValueError(f"Vector dimensions must match: {len(vec1)} != {len(vec2)}")
    norm = math.sqrt(sum(a * a for a in vec1)) * math.sqrt(sum(b * b for b in vec2))
    if norm == 0:
        return 0.0
    return sum(a * b for a, b in zip(vec1, vec2)) / norm


class SemanticIndex:
    """Embeds a fixed list of texts once and scores queries against it."""

    def __init__(self, embedder: Embedder, texts: list[str]) -> None:
        self._embedder = embedder
        self._texts = texts
        self._vectors: Optional[list[list[float]]] = None
        self._lock = asyncio.Lock()

    async def _ensure_vectors(self) -> list[list[float]]:
        async with self._lock:
            if self._vectors is None:
                self._vectors = await self._embedder(self._texts) if self._texts else []
                logger.info(f"Embedded {len(self._vectors)} texts for semantic search")
            return self._vectors

    async def scores(self, query: str) -> list[float]:
        """Cosine similarity of `query` to every indexed text, in index order."""
        vectors = await self._ensure_vectors()
        if not vectors:
            return []
        (query_vector,) = await self._embedder([query])
        return [cosine_similarity(query_vector, vector) for vector in vectors]
