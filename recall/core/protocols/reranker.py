"""Reranker protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.chat import ChatMessage
from ..models.document import Chunk, FusedResult


@runtime_checkable
class RerankerProtocol(Protocol):
    """Protocol for reranking service."""

    async def rerank(
        self,
        candidates: list[FusedResult[Chunk]],
        query: str,
        history: list[ChatMessage],
    ) -> list[FusedResult[Chunk]]:
        """Select the candidates that are relevant to the query.

        Args:
            candidates: Fused candidates.
            query: Search query.
            history: Conversation so far (read-only).

        Returns:
            Relevant subset, in the order chosen by the reranker.
        """
        ...
