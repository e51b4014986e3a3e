"""Semantic scorer - cached embeddings and cosine ranking."""

import asyncio
import logging
from typing import Callable, Optional, Sequence, TypeVar

import numpy as np

from ..exceptions import EmbeddingProviderError, TransientEmbeddingError
from ..models.document import ScoredResult
from ..protocols.embedder import EmbedderProtocol
from ..protocols.embedding_cache import EmbeddingCacheProtocol

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Provider rejects larger requests
MAX_EMBED_BATCH = 99

# Failures retried with backoff; anything else fails the request at once
TRANSIENT_ERRORS = (TransientEmbeddingError, ConnectionError, TimeoutError)


def cosine_similarity(query_embedding: np.ndarray, embeddings: np.ndarray) -> np.ndarray:
    """Cosine similarity of one vector against each row; zero vectors score 0."""
    query_norm = np.linalg.norm(query_embedding)
    row_norms = np.linalg.norm(embeddings, axis=1)
    denom = row_norms * query_norm
    dots = embeddings @ query_embedding
    return np.divide(dots, denom, out=np.zeros_like(dots, dtype=float), where=denom != 0)


class SemanticScorer:
    """Rank items by cosine similarity between query and item embeddings."""

    def __init__(
        self,
        embedder: EmbedderProtocol,
        cache: EmbeddingCacheProtocol,
        batch_size: int = MAX_EMBED_BATCH,
        max_retries: int = 3,
        backoff_base: float = 1.5,
    ):
        """Initialize semantic scorer.

        Args:
            embedder: Embedding provider.
            cache: Embedding cache.
            batch_size: Texts per provider call, capped at MAX_EMBED_BATCH.
            max_retries: Retries per batch after the first failure.
            backoff_base: Retry n waits backoff_base ** n seconds.
        """
        self._embedder = embedder
        self._cache = cache
        self._batch_size = max(1, min(batch_size, MAX_EMBED_BATCH))
        self._max_retries = max_retries
        self._backoff_base = backoff_base

    async def score(
        self,
        query: str,
        items: Sequence[T],
        text_fn: Callable[[T], str] = lambda item: item.indexable_text,
    ) -> list[ScoredResult[T]]:
        """Score every item against the query and sort descending.

        Args:
            query: Natural language query.
            items: Items to rank.
            text_fn: Text to embed for each item.

        Returns:
            All items with cosine scores, ties kept in input order.
        """
        if not items:
            return []

        query_embedding = np.asarray(
            await self._with_retry(self._embedder.embed_one, query), dtype=float
        )
        texts = [text_fn(item) for item in items]
        vectors = await self.resolve_embeddings(texts, dimensions=len(query_embedding))

        scores = cosine_similarity(query_embedding, np.asarray(vectors, dtype=float))
        order = np.argsort(-scores, kind="stable")
        results = [ScoredResult(item=items[i], score=float(scores[i])) for i in order]

        if logger.isEnabledFor(logging.DEBUG):
            top_scores = ", ".join(f"{r.score:.3f}" for r in results[:3])
            logger.debug(f"Embedding top-3 scores: [{top_scores}]")

        return results

    async def ensure_embeddings(
        self,
        items: Sequence[T],
        text_fn: Callable[[T], str] = lambda item: item.indexable_text,
    ) -> int:
        """Compute and cache embeddings for every item.

        Returns:
            Number of items whose embeddings are now cached.
        """
        vectors = await self.resolve_embeddings([text_fn(item) for item in items])
        return len(vectors)

    async def resolve_embeddings(
        self, texts: list[str], dimensions: Optional[int] = None
    ) -> list[list[float]]:
        """Look up every text in the cache and embed the misses.

        Misses are embedded in sequential batches; a vector is cached only
        once its batch has fully succeeded. Cached vectors whose length does
        not match the model's dimensions are embedded again.

        Args:
            texts: Texts to resolve, duplicates allowed.
            dimensions: Expected vector length; None takes it from the
                first freshly computed vector.

        Returns:
            One vector per input text.
        """
        model = self._embedder.model_id
        unique_texts = list(dict.fromkeys(texts))
        resolved: dict[str, list[float]] = {}
        missing: list[str] = []

        for text in unique_texts:
            cached = await self._cache.get(text, model)
            if cached is None or (dimensions is not None and len(cached) != dimensions):
                missing.append(text)
            else:
                resolved[text] = cached

        if missing:
            logger.info(
                f"Embeddings: {len(unique_texts) - len(missing)} cached, "
                f"{len(missing)} to compute in batches of {self._batch_size}"
            )
            fresh = await self._embed_batches(missing, model)
            resolved.update(fresh)
            if dimensions is None:
                dimensions = len(fresh[missing[0]])

        if dimensions is not None:
            stale = [text for text in unique_texts if len(resolved[text]) != dimensions]
            if stale:
                logger.warning(
                    f"{len(stale)} cached embeddings have the wrong dimensions, recomputing"
                )
                resolved.update(await self._embed_batches(stale, model))
            if any(len(resolved[text]) != dimensions for text in unique_texts):
                raise EmbeddingProviderError(
                    f"Provider returned vectors that are not {dimensions}-dimensional"
                )

        return [resolved[text] for text in texts]

    async def _embed_batches(self, texts: list[str], model: str) -> dict[str, list[float]]:
        embedded: dict[str, list[float]] = {}
        for i in range(0, len(texts), self._batch_size):
            batch = texts[i : i + self._batch_size]
            vectors = await self._with_retry(self._embedder.embed_many, batch)
            if len(vectors) != len(batch):
                raise EmbeddingProviderError(
                    f"Provider returned {len(vectors)} vectors for {len(batch)} texts"
                )
            for text, vector in zip(batch, vectors):
                embedded[text] = list(vector)
                await self._cache.put(text, model, embedded[text])
        return embedded

    async def _with_retry(self, call, payload):
        """Call the provider, retrying transient failures with backoff."""
        attempt = 0
        while True:
            try:
                return await call(payload)
            except TRANSIENT_ERRORS as e:
                attempt += 1
                if attempt > self._max_retries:
                    logger.error(f"Embedding provider failed after {attempt} attempts: {e}")
                    raise EmbeddingProviderError(str(e)) from e
                delay = self._backoff_base**attempt
                logger.warning(
                    f"Embedding call failed ({e}), retry {attempt}/{self._max_retries} "
                    f"in {delay:.1f}s"
                )
                await asyncio.sleep(delay)
            except EmbeddingProviderError as e:
                logger.error(f"Embedding provider rejected the request: {e}")
                raise
            except Exception as e:
                logger.error(f"Embedding call failed, not retrying: {e}")
                raise EmbeddingProviderError(str(e)) from e
