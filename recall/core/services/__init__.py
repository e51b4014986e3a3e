"""Core business services."""
from .chunk_service import ChunkService
from .message_search_service import MessageSearchService
from .search_service import SearchService
from .semantic_service import SemanticScorer
from .tool_service import RetrievalTools

__all__ = [
    "ChunkService",
    "MessageSearchService",
    "SearchService",
    "SemanticScorer",
    "RetrievalTools",
]
