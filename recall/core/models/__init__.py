"""Domain models."""
from .document import (
    Chunk,
    Document,
    Email,
    FusedResult,
    Indexable,
    Note,
    ScoredResult,
    SearchHit,
)
from .chat import ChatMessage, messages_to_query
from .tools import FilterToolInput, GetByIdsToolInput, SearchToolInput, ToolResult

__all__ = [
    "Chunk",
    "Document",
    "Email",
    "FusedResult",
    "Indexable",
    "Note",
    "ScoredResult",
    "SearchHit",
    "ChatMessage",
    "messages_to_query",
    "FilterToolInput",
    "GetByIdsToolInput",
    "SearchToolInput",
    "ToolResult",
]
