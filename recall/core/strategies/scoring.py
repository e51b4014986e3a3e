"""Scoring strategies - filters applied to a ranking before fusion."""

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from ..models.document import ScoredResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScoringStrategy(ABC, Generic[T]):
    """Base class for strategies applied to a single ranking before fusion."""

    @abstractmethod
    def apply(self, results: list[ScoredResult[T]]) -> list[ScoredResult[T]]:
        """Apply strategy to results."""
        ...


class ZeroScoreFilterStrategy(ScoringStrategy[T]):
    """Drop results that did not match at all.

    BM25 gives every non-matching chunk a score of zero; left in, they would
    still earn a reciprocal-rank contribution during fusion.
    """

    def apply(self, results: list[ScoredResult[T]]) -> list[ScoredResult[T]]:
        filtered = [r for r in results if r.score > 0]

        if len(filtered) < len(results):
            logger.info(f"Zero-score filter: {len(results)} → {len(filtered)}")

        return filtered

