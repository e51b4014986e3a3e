from recall.core.models.chat import ChatMessage
from recall.core.models.document import Chunk, FusedResult


class PassthroughReranker:
    """Keeps the fused order; used when reranking is disabled."""

    async def rerank(
        self,
        candidates: list[FusedResult[Chunk]],
        query: str,
        history: list[ChatMessage],
    ) -> list[FusedResult[Chunk]]:
        return list(candidates)
