"""Tests for the tool surface exposed to the agent loop."""

import asyncio

import pytest
from pydantic import ValidationError

from conftest import FakeEmbedder, FlakyEmbedder, StaticCorpus
from recall.core.exceptions import CorpusLoadError
from recall.core.models.tools import FilterToolInput, SearchToolInput
from recall.core.services.chunk_service import ChunkService
from recall.core.services.search_service import SearchService
from recall.core.services.semantic_service import SemanticScorer
from recall.core.services.tool_service import RetrievalTools
from recall.core.strategies.bm25 import LexicalScorer
from recall.infrastructure.cache.memory_cache import InMemoryEmbeddingCache
from recall.infrastructure.rerankers.passthrough import PassthroughReranker


class BrokenCorpus:
    def load_documents(self):
        raise CorpusLoadError("Corpus not found: missing.json")


def build_tools(corpus, item_label: str = "emails", embedder=None) -> RetrievalTools:
    service = SearchService(
        corpus=corpus,
        chunker=ChunkService(),
        lexical=LexicalScorer(),
        semantic=SemanticScorer(
            embedder or FakeEmbedder(), InMemoryEmbeddingCache(), backoff_base=0
        ),
        reranker=PassthroughReranker(),
    )
    return RetrievalTools(service, item_label=item_label)


class TestToolInputs:
    """Tests for tool argument validation."""

    def test_search_needs_keywords_or_query(self) -> None:
        with pytest.raises(ValidationError):
            SearchToolInput()
        with pytest.raises(ValidationError):
            SearchToolInput(keywords=[" "], search_query="  ")
        assert SearchToolInput(keywords=["invoice"]).limit == 10
        assert SearchToolInput(search_query="payments").keywords is None

    def test_limit_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            FilterToolInput(limit=0)


class TestRetrievalTools:
    """Tests for dispatch and error reporting."""

    def test_search_result_shape(self, emails) -> None:
        tools = build_tools(StaticCorpus(emails))
        result = asyncio.run(tools.call("search", {"keywords": ["hotel"], "limit": 3}))
        assert result.ok
        item = result.result["emails"][0]
        assert item["id"] == "e3"
        assert {"subject", "snippet", "score"} <= set(item)

    def test_filter_and_get(self, emails) -> None:
        tools = build_tools(StaticCorpus(emails))
        filtered = asyncio.run(tools.call("filter", {"sender": "sarah"}))
        assert [e["id"] for e in filtered.result["emails"]] == ["e3"]

        full = asyncio.run(tools.call("get_by_ids", {"ids": ["e4"], "include_thread": True}))
        assert [e["id"] for e in full.result["emails"]] == ["e1", "e4", "e2"]

    def test_validation_error_becomes_tool_error(self, emails) -> None:
        tools = build_tools(StaticCorpus(emails))
        result = asyncio.run(tools.call("search", {}))
        assert not result.ok
        assert "Invalid arguments" in result.error

    def test_retrieval_error_becomes_tool_error(self) -> None:
        tools = build_tools(BrokenCorpus())
        result = asyncio.run(tools.call("filter", {"contains": "invoice"}))
        assert not result.ok
        assert "missing.json" in result.error

    def test_unknown_tool(self, emails) -> None:
        result = asyncio.run(build_tools(StaticCorpus(emails)).call("delete", {}))
        assert not result.ok

    def test_definitions(self, notes) -> None:
        definitions = build_tools(StaticCorpus(notes), item_label="notes").definitions()
        names = [d["function"]["name"] for d in definitions]
        assert names == ["search", "filter", "get_by_ids"]
        search = definitions[0]["function"]
        assert "keywords" in search["parameters"]["properties"]
        assert search["description"].startswith("Search emails or notes")

    def test_rejected_embedding_request_is_a_tool_error(self, emails) -> None:
        embedder = FlakyEmbedder(failures=10, error=ValueError("input too long"))
        tools = build_tools(StaticCorpus(emails), embedder=embedder)
        result = asyncio.run(tools.call("search", {"search_query": "overdue payment"}))
        assert not result.ok
        assert "input too long" in result.error
        assert embedder.attempts == 1
