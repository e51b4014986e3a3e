"""Tool service - the retrieval tools an agent loop calls."""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from ..exceptions import RecallError
from ..models.chat import ChatMessage
from ..models.tools import (
    FilterToolInput,
    GetByIdsToolInput,
    SearchToolInput,
    ToolResult,
)
from .search_service import SearchService

logger = logging.getLogger(__name__)

TOOL_SCHEMAS: dict[str, type[BaseModel]] = {
    "search": SearchToolInput,
    "filter": FilterToolInput,
    "get_by_ids": GetByIdsToolInput,
}


class RetrievalTools:
    """Validates tool arguments and turns failures into tool-error results."""

    def __init__(self, search_service: SearchService, item_label: str = "items"):
        """Initialize tools.

        Args:
            search_service: Search service.
            item_label: Key holding the result list ("emails", "notes").
        """
        self._search = search_service
        self._item_label = item_label

    def definitions(self) -> list[dict]:
        """Function-tool definitions in OpenAI format."""
        return [
            {
                "type": "function",
                "function": {
                    "name": name,
                    "description": (schema.__doc__ or "").strip(),
                    "parameters": schema.model_json_schema(),
                },
            }
            for name, schema in TOOL_SCHEMAS.items()
        ]

    async def search(
        self, args: SearchToolInput, history: Optional[list[ChatMessage]] = None
    ) -> dict:
        hits = await self._search.search(
            keywords=args.keywords,
            search_query=args.search_query,
            limit=args.limit,
            history=history,
        )
        return {self._item_label: [hit.to_dict() for hit in hits]}

    async def filter(self, args: FilterToolInput) -> dict:
        items = self._search.filter(**args.model_dump())
        return {self._item_label: items}

    async def get_by_ids(self, args: GetByIdsToolInput) -> dict:
        items = self._search.get_by_ids(args.ids, include_thread=args.include_thread)
        return {self._item_label: items}

    async def call(
        self,
        name: str,
        arguments: dict[str, Any],
        history: Optional[list[ChatMessage]] = None,
    ) -> ToolResult:
        """Validate arguments and run a tool.

        Args:
            name: Tool name.
            arguments: Raw tool arguments from the model.
            history: Conversation so far.

        Returns:
            Tool result; errors are reported in it so the conversation can go on.
        """
        schema = TOOL_SCHEMAS.get(name)
        if schema is None:
            return ToolResult(ok=False, error=f"Unknown tool: {name}")

        logger.info(f"Tool call {name}: {arguments}")
        try:
            args = schema.model_validate(arguments)
            if name == "search":
                result = await self.search(args, history)
            elif name == "filter":
                result = await self.filter(args)
            else:
                result = await self.get_by_ids(args)
        except ValidationError as e:
            logger.warning(f"Tool {name}: invalid arguments: {e}")
            return ToolResult(ok=False, error=f"Invalid arguments: {e}")
        except RecallError as e:
            logger.error(f"Tool {name} failed: {e}")
            return ToolResult(ok=False, error=str(e))

        return ToolResult(ok=True, result=result)
