"""Message search service - finds earlier conversation turns related to the current one."""

import logging

from ..models.chat import ChatMessage, message_to_text, messages_to_query
from ..models.document import ScoredResult
from .semantic_service import SemanticScorer

logger = logging.getLogger(__name__)


class MessageSearchService:
    """Rank older messages by semantic similarity to the recent ones."""

    def __init__(self, semantic: SemanticScorer):
        self._semantic = semantic

    async def search_messages(
        self,
        recent_messages: list[ChatMessage],
        older_messages: list[ChatMessage],
        limit: int | None = None,
    ) -> list[ScoredResult[ChatMessage]]:
        """Rank older messages against a query built from recent ones.

        Args:
            recent_messages: Latest turns, the last one weighted double.
            older_messages: Candidate turns.
            limit: Maximum number of results.

        Returns:
            Older messages, most similar first.
        """
        if not older_messages or not recent_messages:
            return []

        query = messages_to_query(recent_messages)
        results = await self._semantic.score(query, older_messages, text_fn=message_to_text)

        if limit is not None:
            results = results[:limit]

        logger.info(
            f"Message search: {len(results)} of {len(older_messages)} older messages"
        )
        return results
