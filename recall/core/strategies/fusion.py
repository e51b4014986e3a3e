"""Rank fusion - reciprocal rank fusion of several rankings."""

import logging
from typing import Callable, Optional, Sequence, TypeVar

from ..models.document import FusedResult, ScoredResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

RRF_K = 60


def reciprocal_rank_fusion(
    rankings: Sequence[Sequence[ScoredResult[T]]],
    key: Callable[[T], str] = lambda item: item.identity,
    k: int = RRF_K,
    top_n: Optional[int] = None,
) -> list[FusedResult[T]]:
    """Merge ranked lists by rank position only.

    An item at zero-based rank r of a ranking gains 1 / (k + r). Raw scores
    are ignored, so BM25 and cosine scales never need normalizing.

    Args:
        rankings: Ranked lists, best first.
        key: Identity of an item across rankings.
        k: Smoothing constant.
        top_n: Truncate every ranking to its first top_n entries first.

    Returns:
        Fused results sorted by accumulated score, ties in first-seen order.
    """
    fused: dict[str, FusedResult[T]] = {}

    for ranking in rankings:
        if top_n is not None:
            ranking = ranking[:top_n]
        for rank, result in enumerate(ranking):
            item_key = key(result.item)
            entry = fused.get(item_key)
            if entry is None:
                entry = fused[item_key] = FusedResult(item=result.item, key=item_key)
            entry.score += 1.0 / (k + rank)

    results = sorted(fused.values(), key=lambda r: r.score, reverse=True)
    logger.debug(
        f"RRF: fused {len(rankings)} rankings into {len(results)} results"
    )
    return results
