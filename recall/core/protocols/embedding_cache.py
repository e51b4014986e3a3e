"""Embedding cache protocol for dependency injection."""
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class EmbeddingCacheProtocol(Protocol):
    """Content-addressed store of previously computed embeddings."""

    async def get(self, text: str, model: str) -> Optional[list[float]]:
        """Return the cached vector for text, or None on miss."""
        ...

    async def put(self, text: str, model: str, vector: list[float]) -> None:
        """Store a fully computed vector for text."""
        ...
