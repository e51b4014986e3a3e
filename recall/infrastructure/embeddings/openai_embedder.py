import logging
from typing import Optional

from openai import (
    APIConnectionError,
    APIError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)

from ...core.exceptions import EmbeddingProviderError, TransientEmbeddingError

logger = logging.getLogger(__name__)

# APITimeoutError is a subclass of APIConnectionError
TRANSIENT_ERRORS = (APIConnectionError, RateLimitError, InternalServerError)


class OpenAIEmbedder:
    """Embedding provider for any OpenAI-compatible embeddings endpoint."""

    def __init__(
        self,
        model: str = "text-embedding-3-small",
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        """Initialize embedder.

        Args:
            model: Embedding model name.
            base_url: API URL; None uses the OpenAI default.
            api_key: API key; None reads OPENAI_API_KEY.
            client: Preconfigured client (tests).
        """
        self._client = client or AsyncOpenAI(base_url=base_url, api_key=api_key)
        self._model = model

    @property
    def model_id(self) -> str:
        return self._model

    async def embed_one(self, text: str) -> list[float]:
        vectors = await self.embed_many([text])
        return vectors[0]

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        """Embed a batch of texts.

        Raises:
            TransientEmbeddingError: Rate limit, server or connection failure.
            EmbeddingProviderError: Any other API error (bad request, auth).
        """
        try:
            response = await self._client.embeddings.create(model=self._model, input=texts)
        except TRANSIENT_ERRORS as e:
            raise TransientEmbeddingError(f"{type(e).__name__}: {e}") from e
        except APIError as e:
            raise EmbeddingProviderError(f"{type(e).__name__}: {e}") from e

        data = sorted(response.data, key=lambda d: d.index)
        logger.debug(f"Embedded {len(texts)} texts with {self._model}")
        return [list(d.embedding) for d in data]
