"""Embedding cache implementations."""
from .file_cache import FileEmbeddingCache
from .memory_cache import InMemoryEmbeddingCache

__all__ = ["FileEmbeddingCache", "InMemoryEmbeddingCache"]
