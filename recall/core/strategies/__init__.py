"""Ranking, fusion and splitting strategies."""
from .bm25 import BM25, LexicalScorer, tokenize
from .fusion import RRF_K, reciprocal_rank_fusion
from .scoring import ScoringStrategy, ZeroScoreFilterStrategy
from .text_splitter import RecursiveTextSplitter, TextSpan

__all__ = [
    "BM25",
    "LexicalScorer",
    "tokenize",
    "RRF_K",
    "reciprocal_rank_fusion",
    "ScoringStrategy",
    "ZeroScoreFilterStrategy",
    "RecursiveTextSplitter",
    "TextSpan",
]
