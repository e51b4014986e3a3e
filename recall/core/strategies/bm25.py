"""BM25 lexical ranking.

score(Q, D) = sum over q in Q of
    IDF(q) * f(q, D) * (k1 + 1) / (f(q, D) + k1 * (1 - b + b * |D| / avgdl))

IDF(q) = ln((N - n(q) + 0.5) / (n(q) + 0.5) + 1), which never goes negative.
"""

import logging
import math
import re
from collections import Counter
from typing import Callable, Sequence, TypeVar

from ..models.document import ScoredResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens."""
    return _TOKEN_RE.findall(text.lower())


class BM25:
    """BM25 scorer over a fixed corpus of texts."""

    def __init__(self, corpus: Sequence[str], k1: float = 1.2, b: float = 0.75):
        """Build corpus statistics.

        Args:
            corpus: Document texts.
            k1: Term frequency saturation.
            b: Document length normalization.
        """
        self._k1 = k1
        self._b = b
        self._term_freqs = [Counter(tokenize(doc)) for doc in corpus]
        self._doc_lengths = [sum(tf.values()) for tf in self._term_freqs]
        self._avg_doc_length = (
            sum(self._doc_lengths) / len(self._doc_lengths) if self._doc_lengths else 0.0
        )

        doc_freq: Counter = Counter()
        for tf in self._term_freqs:
            doc_freq.update(tf.keys())
        self._doc_freq = doc_freq

    def idf(self, term: str) -> float:
        n_docs = len(self._term_freqs)
        n_term = self._doc_freq.get(term, 0)
        return math.log((n_docs - n_term + 0.5) / (n_term + 0.5) + 1.0)

    def scores(self, query_terms: Sequence[str]) -> list[float]:
        """Score every corpus document, in corpus order."""
        results = [0.0] * len(self._term_freqs)
        if not query_terms or self._avg_doc_length == 0:
            return results

        for term in query_terms:
            idf = self.idf(term)
            for i, tf in enumerate(self._term_freqs):
                freq = tf.get(term, 0)
                if not freq:
                    continue
                norm = 1 - self._b + self._b * self._doc_lengths[i] / self._avg_doc_length
                results[i] += idf * freq * (self._k1 + 1) / (freq + self._k1 * norm)

        return results


class LexicalScorer:
    """Rank items against keywords with BM25."""

    def __init__(self, k1: float = 1.2, b: float = 0.75):
        self._k1 = k1
        self._b = b

    def score(
        self,
        keywords: Sequence[str],
        items: Sequence[T],
        text_fn: Callable[[T], str] = lambda item: item.indexable_text,
    ) -> list[ScoredResult[T]]:
        """Score every item and sort descending.

        Args:
            keywords: Keywords or short phrases; phrases are tokenized.
            items: Items to rank.
            text_fn: Text to score for each item.

        Returns:
            All items with their BM25 scores, ties kept in input order.
        """
        query_terms = [term for keyword in keywords for term in tokenize(keyword)]
        bm25 = BM25([text_fn(item) for item in items], k1=self._k1, b=self._b)
        scores = bm25.scores(query_terms)

        results = [ScoredResult(item=item, score=s) for item, s in zip(items, scores)]
        results.sort(key=lambda r: r.score, reverse=True)

        if logger.isEnabledFor(logging.DEBUG):
            top_scores = ", ".join(f"{r.score:.2f}" for r in results[:3])
            logger.debug(f"BM25 top-3 scores for {query_terms}: [{top_scores}]")

        return results
