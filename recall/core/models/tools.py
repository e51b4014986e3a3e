"""Tool input schemas and results for the agent loop."""
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator


class SearchToolInput(BaseModel):
    """Search emails or notes using both keyword and semantic search.

    Returns metadata with snippets only; use get_by_ids to fetch full content.
    """

    keywords: Optional[list[str]] = Field(
        default=None,
        description="Exact keywords for BM25 search (names, amounts, specific terms)",
    )
    search_query: Optional[str] = Field(
        default=None,
        description="Natural language query for semantic search (broader concepts)",
    )
    limit: int = Field(default=10, ge=1, description="Maximum number of results to return")

    @model_validator(mode="after")
    def _require_keywords_or_query(self) -> "SearchToolInput":
        has_keywords = any(k.strip() for k in self.keywords or [])
        has_query = bool(self.search_query and self.search_query.strip())
        if not has_keywords and not has_query:
            raise ValueError("Provide keywords, search_query, or both")
        return self


class FilterToolInput(BaseModel):
    """Filter by exact criteria like sender, recipient, subject, text or date range.

    Predicates are combined with AND. No ranking is applied.
    """

    sender: Optional[str] = Field(
        default=None, description="Filter by sender (partial match, case-insensitive)"
    )
    recipient: Optional[str] = Field(
        default=None,
        description="Filter by recipient in to or cc (partial match, case-insensitive)",
    )
    subject: Optional[str] = Field(
        default=None, description="Filter by subject (partial match, case-insensitive)"
    )
    contains: Optional[str] = Field(
        default=None,
        description="Filter by text in subject or body (partial match, case-insensitive)",
    )
    before: Optional[str] = Field(
        default=None,
        description="Only items before this ISO 8601 timestamp (e.g. '2024-01-01T00:00:00Z')",
    )
    after: Optional[str] = Field(
        default=None,
        description="Only items after this ISO 8601 timestamp (e.g. '2024-01-01T00:00:00Z')",
    )
    limit: int = Field(default=10, ge=1, description="Maximum number of results to return")


class GetByIdsToolInput(BaseModel):
    """Fetch full content of specific items by their IDs.

    Optionally include entire email conversation threads.
    """

    ids: list[str] = Field(description="IDs to retrieve full content for")
    include_thread: bool = Field(
        default=False,
        description="If true, fetch entire conversation threads for the specified emails",
    )


class ToolResult(BaseModel):
    """Outcome of a tool call; failures are data, not exceptions."""

    ok: bool
    result: Optional[dict[str, Any]] = None
    error: Optional[str] = None
