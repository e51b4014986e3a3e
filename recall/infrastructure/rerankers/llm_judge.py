import logging

from pydantic import BaseModel, Field

from recall.core.models.chat import ChatMessage, CONVERSATION_ROLES
from recall.core.models.document import Chunk, FusedResult
from recall.core.protocols.judge import JudgeProtocol

logger = logging.getLogger(__name__)

RERANK_SYSTEM_PROMPT = """You are a search result reranker. You receive a list of chunks, each with an ID, a subject and its content, and you return only the IDs of the chunks that help answer the user's question.

1. Judge how relevant each chunk is to the search query and the conversation.
2. Be selective: leave out chunks that are only tangentially related or not relevant.
3. Return the IDs as an array of integers, most relevant first."""


class RerankSelection(BaseModel):
    """Judge output."""

    result_ids: list[int] = Field(
        description="IDs of the most relevant chunks, most relevant first"
    )


class LLMJudgeReranker:
    """Reranker that lets a language model pick the relevant candidates."""

    def __init__(self, judge: JudgeProtocol):
        self._judge = judge

    async def rerank(
        self,
        candidates: list[FusedResult[Chunk]],
        query: str,
        history: list[ChatMessage],
    ) -> list[FusedResult[Chunk]]:
        """Keep only the candidates the judge selects.

        Args:
            candidates: Fused candidates.
            query: Search query.
            history: Conversation so far; tool turns are not shown to the judge.

        Returns:
            Selected candidates in the judge's order.
        """
        if not candidates:
            return []

        by_id = dict(enumerate(candidates))
        messages = [
            {"role": m.role, "content": m.content}
            for m in history
            if m.role in CONVERSATION_ROLES
        ]
        messages.append({"role": "user", "content": self._format_prompt(by_id, query)})

        selection = await self._judge.generate_object(
            system=RERANK_SYSTEM_PROMPT,
            schema=RerankSelection,
            messages=messages,
        )

        selected: list[FusedResult[Chunk]] = []
        seen: set[int] = set()
        for result_id in selection.result_ids:
            if result_id in seen or result_id not in by_id:
                continue
            seen.add(result_id)
            selected.append(by_id[result_id])

        dropped = len(selection.result_ids) - len(selected)
        if dropped:
            logger.warning(f"Reranker: ignored {dropped} unknown or repeated ids")
        logger.info(f"Reranker: kept {len(selected)}/{len(candidates)} candidates")
        return selected

    @staticmethod
    def _format_prompt(by_id: dict[int, FusedResult[Chunk]], query: str) -> str:
        blocks = [
            "\n\n".join(
                [
                    f"## ID: {result_id}",
                    f"Subject: {result.item.subject}",
                    "<content>",
                    result.item.text,
                    "</content>",
                ]
            )
            for result_id, result in by_id.items()
        ]
        chunks = "\n\n".join(blocks)
        return (
            f"Search query:\n{query}\n\n"
            f"Available chunks:\n{chunks}\n\n"
            "Return only the IDs of the most relevant chunks for the search query."
        )
