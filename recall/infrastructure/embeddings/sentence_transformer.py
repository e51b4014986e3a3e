import asyncio
import logging
from functools import cached_property

from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """Local embedding provider; encoding runs in a worker thread."""

    def __init__(self, model_name: str = "intfloat/multilingual-e5-base"):
        self._model_name = model_name

    @property
    def model_id(self) -> str:
        return self._model_name

    @cached_property
    def model(self) -> SentenceTransformer:
        logger.info(f"Loading embedding model: {self._model_name}")
        return SentenceTransformer(self._model_name)

    async def embed_one(self, text: str) -> list[float]:
        vectors = await self.embed_many([text])
        return vectors[0]

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        embeddings = await asyncio.to_thread(
            self.model.encode, texts, convert_to_numpy=True
        )
        return embeddings.tolist()
