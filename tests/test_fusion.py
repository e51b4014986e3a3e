"""Tests for reciprocal rank fusion."""

import pytest

from recall.core.models.document import ScoredResult
from recall.core.services.chunk_service import ChunkService
from recall.core.strategies.fusion import RRF_K, reciprocal_rank_fusion


def ranking(*names: str) -> list[ScoredResult[str]]:
    return [ScoredResult(item=n, score=float(len(names) - i)) for i, n in enumerate(names)]


def fuse(*rankings, **kwargs):
    return reciprocal_rank_fusion(list(rankings), key=lambda item: item, **kwargs)


class TestReciprocalRankFusion:
    """Tests for rank-position based fusion."""

    def test_rank_zero_contributes_one_over_k(self) -> None:
        fused = fuse(ranking("a", "b"))
        assert fused[0].item == "a"
        assert fused[0].score == pytest.approx(1 / RRF_K)
        assert fused[1].score == pytest.approx(1 / (RRF_K + 1))

    def test_top_in_every_ranking_beats_top_in_one(self) -> None:
        fused = fuse(ranking("a", "b"), ranking("a", "c"), ranking("d", "a"))
        assert fused[0].item == "a"

        fused = fuse(ranking("a", "x"), ranking("a", "y"), ranking("z"))
        scores = {r.item: r.score for r in fused}
        assert scores["a"] == pytest.approx(2 / RRF_K)
        assert scores["a"] > scores["z"]

    def test_raw_scores_are_ignored(self) -> None:
        huge = [ScoredResult(item="a", score=1e9), ScoredResult(item="b", score=1e8)]
        tiny = [ScoredResult(item="b", score=0.02), ScoredResult(item="a", score=0.01)]
        fused = fuse(huge, tiny)
        assert fused[0].score == pytest.approx(fused[1].score)

    def test_items_in_one_ranking_still_appear(self) -> None:
        fused = fuse(ranking("a"), ranking("b"))
        assert {r.item for r in fused} == {"a", "b"}

    def test_ties_keep_first_seen_order(self) -> None:
        fused = fuse(ranking("a"), ranking("b"))
        assert [r.item for r in fused] == ["a", "b"]

    def test_top_n_truncates_inputs(self) -> None:
        fused = fuse(ranking("a", "b", "c"), ranking("d", "e"), top_n=1)
        assert {r.item for r in fused} == {"a", "d"}

    def test_empty_rankings(self) -> None:
        assert fuse([], []) == []

    def test_custom_k(self) -> None:
        fused = fuse(ranking("a"), k=10)
        assert fused[0].score == pytest.approx(0.1)

    def test_chunks_of_same_document_do_not_collide(self, notes) -> None:
        from recall.core.models.document import Note

        long_note = Note(id="n9", subject="s", content="word " * 500, last_modified="")
        chunks = ChunkService(chunk_size=300, chunk_overlap=50).chunk(long_note)
        assert len(chunks) > 1
        scored = [ScoredResult(item=c, score=1.0) for c in chunks]
        fused = reciprocal_rank_fusion([scored])
        assert len(fused) == len(chunks)
        assert fused[0].key == "n9-0"

    def test_lexical_and_semantic_winners_beat_unrelated(self) -> None:
        lexical = [ScoredResult(item="X", score=2.3)]
        semantic = ranking("Y", "X", "Z")
        fused = fuse(lexical, semantic)
        order = [r.item for r in fused]
        assert order.index("X") < order.index("Z")
        assert order.index("Y") < order.index("Z")
