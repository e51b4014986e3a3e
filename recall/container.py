import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        if singleton:
            self._singleton_flags.add(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


container = Container()


def _build_embedder(settings: Settings):
    if settings.embedding_provider == "sentence-transformers":
        # pulls in torch
        from .infrastructure.embeddings.sentence_transformer import (
            SentenceTransformerEmbedder,
        )

        return SentenceTransformerEmbedder(settings.embedding_model)

    from .infrastructure.embeddings.openai_embedder import OpenAIEmbedder

    return OpenAIEmbedder(
        model=settings.embedding_model,
        base_url=settings.embedding_base_url,
        api_key=settings.embedding_api_key,
    )


def _build_cache(settings: Settings):
    from .infrastructure.cache.file_cache import FileEmbeddingCache
    from .infrastructure.cache.memory_cache import InMemoryEmbeddingCache

    if not settings.embedding_cache_enabled:
        return InMemoryEmbeddingCache()
    return FileEmbeddingCache(
        cache_dir=settings.embedding_cache_dir,
        hash_chars=settings.embedding_cache_hash_chars,
    )


def configure_container(settings: Settings) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.

    Returns:
        Configured container.
    """
    from .core.protocols.corpus import CorpusLoaderProtocol
    from .core.protocols.embedder import EmbedderProtocol
    from .core.protocols.embedding_cache import EmbeddingCacheProtocol
    from .core.protocols.judge import JudgeProtocol
    from .core.protocols.reranker import RerankerProtocol
    from .core.services.chunk_service import ChunkService
    from .core.services.message_search_service import MessageSearchService
    from .core.services.search_service import SearchService
    from .core.services.semantic_service import SemanticScorer
    from .core.services.tool_service import RetrievalTools
    from .core.strategies.bm25 import LexicalScorer
    from .infrastructure.document_loaders.json_loader import JsonCorpusLoader
    from .infrastructure.llm.openai_judge import OpenAIJudge
    from .infrastructure.rerankers.llm_judge import LLMJudgeReranker
    from .infrastructure.rerankers.passthrough import PassthroughReranker

    container.register(
        CorpusLoaderProtocol,
        lambda: JsonCorpusLoader(settings.corpus_path, settings.corpus_kind),
        singleton=True,
    )

    container.register(
        EmbedderProtocol,
        lambda: _build_embedder(settings),
        singleton=True,
    )

    container.register(
        EmbeddingCacheProtocol,
        lambda: _build_cache(settings),
        singleton=True,
    )

    container.register(
        JudgeProtocol,
        lambda: OpenAIJudge(
            model=settings.judge_model,
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            temperature=settings.judge_temperature,
        ),
        singleton=True,
    )

    container.register(
        RerankerProtocol,
        lambda: (
            LLMJudgeReranker(container.resolve(JudgeProtocol))
            if settings.rerank_enabled
            else PassthroughReranker()
        ),
        singleton=True,
    )

    container.register(
        ChunkService,
        lambda: ChunkService(
            chunk_size=settings.chunk_size, chunk_overlap=settings.chunk_overlap
        ),
        singleton=True,
    )

    container.register(
        LexicalScorer,
        lambda: LexicalScorer(k1=settings.bm25_k1, b=settings.bm25_b),
        singleton=True,
    )

    container.register(
        SemanticScorer,
        lambda: SemanticScorer(
            embedder=container.resolve(EmbedderProtocol),
            cache=container.resolve(EmbeddingCacheProtocol),
            batch_size=settings.embedding_batch_size,
            max_retries=settings.embedding_max_retries,
            backoff_base=settings.embedding_backoff_base,
        ),
        singleton=True,
    )

    container.register(
        SearchService,
        lambda: SearchService(
            corpus=container.resolve(CorpusLoaderProtocol),
            chunker=container.resolve(ChunkService),
            lexical=container.resolve(LexicalScorer),
            semantic=container.resolve(SemanticScorer),
            reranker=container.resolve(RerankerProtocol),
            rrf_k=settings.rrf_k,
            rerank_top_n=settings.rerank_top_n,
            default_limit=settings.search_limit,
            snippet_length=settings.snippet_length,
        ),
        singleton=True,
    )

    container.register(
        MessageSearchService,
        lambda: MessageSearchService(semantic=container.resolve(SemanticScorer)),
        singleton=True,
    )

    container.register(
        RetrievalTools,
        lambda: RetrievalTools(
            search_service=container.resolve(SearchService),
            item_label=settings.corpus_kind,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return container
