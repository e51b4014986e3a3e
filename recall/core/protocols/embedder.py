"""Embedder protocol for dependency injection."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbedderProtocol(Protocol):
    """Protocol for an embedding provider."""

    @property
    def model_id(self) -> str:
        """Identifier of the embedding model, used to scope cache keys."""
        ...

    async def embed_one(self, text: str) -> list[float]:
        """Embed a single text.

        Args:
            text: Text to embed.

        Returns:
            Embedding vector.
        """
        ...

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of texts.

        Args:
            texts: Texts to embed, at most the provider batch limit.

        Returns:
            Embedding vectors in input order.
        """
        ...
