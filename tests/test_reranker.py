"""Tests for the LLM-judge reranker."""

import asyncio

from conftest import FakeJudge
from recall.core.models.chat import ChatMessage
from recall.core.models.document import FusedResult, Note
from recall.core.services.chunk_service import ChunkService
from recall.infrastructure.rerankers.llm_judge import LLMJudgeReranker, RerankSelection
from recall.infrastructure.rerankers.passthrough import PassthroughReranker


def candidates(n: int = 10) -> list[FusedResult]:
    chunker = ChunkService()
    results = []
    for i in range(n):
        note = Note(id=f"n{i}", subject=f"Note {i}", content=f"content {i}", last_modified="")
        chunk = chunker.chunk(note)[0]
        results.append(FusedResult(item=chunk, key=chunk.identity, score=1 / (60 + i)))
    return results


class TestLLMJudgeReranker:
    """Tests for selection and defensive id filtering."""

    def test_returns_only_selected_candidates(self) -> None:
        fused = candidates(10)
        judge = FakeJudge(result_ids=[7, 2])
        selected = asyncio.run(LLMJudgeReranker(judge).rerank(fused, "query", []))
        assert [r.key for r in selected] == ["n7-0", "n2-0"]
        assert all(r in fused for r in selected)

    def test_unknown_and_repeated_ids_are_dropped(self) -> None:
        judge = FakeJudge(result_ids=[1, 99, -1, 1, 0])
        selected = asyncio.run(LLMJudgeReranker(judge).rerank(candidates(3), "q", []))
        assert [r.key for r in selected] == ["n1-0", "n0-0"]

    def test_prompt_lists_every_candidate(self) -> None:
        judge = FakeJudge(result_ids=[0])
        asyncio.run(LLMJudgeReranker(judge).rerank(candidates(3), "invoice", []))
        call = judge.calls[0]
        prompt = call["messages"][-1]["content"]
        assert call["schema"] is RerankSelection
        assert "Search query:\ninvoice" in prompt
        for i in range(3):
            assert f"## ID: {i}" in prompt
            assert f"Subject: Note {i}" in prompt
            assert f"content {i}" in prompt

    def test_history_excludes_tool_turns(self) -> None:
        judge = FakeJudge(result_ids=[0])
        history = [
            ChatMessage(role="user", content="what did john send?"),
            ChatMessage(role="tool", content='{"emails": []}'),
            ChatMessage(role="assistant", content="Let me look."),
        ]
        asyncio.run(LLMJudgeReranker(judge).rerank(candidates(2), "john", history))
        roles = [m["role"] for m in judge.calls[0]["messages"]]
        assert roles == ["user", "assistant", "user"]

    def test_empty_candidates_skip_judge(self) -> None:
        judge = FakeJudge(result_ids=[0])
        assert asyncio.run(LLMJudgeReranker(judge).rerank([], "q", [])) == []
        assert judge.calls == []


class TestPassthroughReranker:
    def test_keeps_order(self) -> None:
        fused = candidates(4)
        assert asyncio.run(PassthroughReranker().rerank(fused, "q", [])) == fused
