"""Tests for searching earlier conversation messages."""

import asyncio

from conftest import FakeEmbedder
from recall.core.models.chat import ChatMessage, messages_to_query
from recall.core.services.message_search_service import MessageSearchService
from recall.core.services.semantic_service import SemanticScorer
from recall.infrastructure.cache.memory_cache import InMemoryEmbeddingCache


class TestMessagesToQuery:
    def test_most_recent_message_twice(self) -> None:
        query = messages_to_query(
            [ChatMessage("user", "hi"), ChatMessage("assistant", "hello")]
        )
        assert query == "user: hi\nassistant: hello\nassistant: hello"

    def test_empty(self) -> None:
        assert messages_to_query([]) == ""


class TestMessageSearchService:
    """Tests for ranking older messages."""

    def test_ranks_related_messages_first(self) -> None:
        service = MessageSearchService(SemanticScorer(FakeEmbedder(), InMemoryEmbeddingCache()))
        older = [
            ChatMessage("user", "book a flight and hotel"),
            ChatMessage("user", "is the invoice payment overdue?"),
        ]
        recent = [ChatMessage("user", "what was the overdue balance?")]
        results = asyncio.run(service.search_messages(recent, older, limit=1))
        assert len(results) == 1
        assert results[0].item is older[1]

    def test_no_older_messages(self) -> None:
        embedder = FakeEmbedder()
        service = MessageSearchService(SemanticScorer(embedder, InMemoryEmbeddingCache()))
        assert asyncio.run(service.search_messages([ChatMessage("user", "hi")], [])) == []
        assert embedder.one_calls == []
