"""Protocol interfaces for dependency injection."""
from .embedder import EmbedderProtocol
from .embedding_cache import EmbeddingCacheProtocol
from .judge import JudgeProtocol
from .reranker import RerankerProtocol
from .corpus import CorpusLoaderProtocol

__all__ = [
    "EmbedderProtocol",
    "EmbeddingCacheProtocol",
    "JudgeProtocol",
    "RerankerProtocol",
    "CorpusLoaderProtocol",
]
