"""Tests for dependency wiring."""

from recall.config.settings import Settings
from recall.container import configure_container
from recall.core.protocols.reranker import RerankerProtocol
from recall.core.services.tool_service import RetrievalTools
from recall.infrastructure.rerankers.llm_judge import LLMJudgeReranker
from recall.infrastructure.rerankers.passthrough import PassthroughReranker


def _settings(tmp_path, **overrides) -> Settings:
    return Settings(
        corpus_path=str(tmp_path / "notes.json"),
        corpus_kind="notes",
        embedding_api_key="test-key",
        llm_api_key="test-key",
        embedding_cache_dir=str(tmp_path / "embeddings"),
        **overrides,
    )


class TestContainer:
    def test_resolves_tools(self, tmp_path) -> None:
        container = configure_container(_settings(tmp_path))
        container.reset()
        tools = container.resolve(RetrievalTools)
        assert isinstance(tools, RetrievalTools)
        assert container.resolve(RetrievalTools) is tools
        assert isinstance(container.resolve(RerankerProtocol), LLMJudgeReranker)

    def test_rerank_disabled(self, tmp_path) -> None:
        container = configure_container(_settings(tmp_path, rerank_enabled=False))
        container.reset()
        assert isinstance(container.resolve(RerankerProtocol), PassthroughReranker)
        container.reset()

    def test_cache_selection(self, tmp_path) -> None:
        from recall.core.protocols.embedding_cache import EmbeddingCacheProtocol
        from recall.infrastructure.cache.file_cache import FileEmbeddingCache
        from recall.infrastructure.cache.memory_cache import InMemoryEmbeddingCache

        container = configure_container(_settings(tmp_path))
        container.reset()
        assert isinstance(container.resolve(EmbeddingCacheProtocol), FileEmbeddingCache)

        container = configure_container(_settings(tmp_path, embedding_cache_enabled=False))
        container.reset()
        assert isinstance(container.resolve(EmbeddingCacheProtocol), InMemoryEmbeddingCache)
        container.reset()
