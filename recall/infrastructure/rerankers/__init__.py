"""Reranker implementations."""
from .llm_judge import LLMJudgeReranker, RerankSelection
from .passthrough import PassthroughReranker

__all__ = ["LLMJudgeReranker", "PassthroughReranker", "RerankSelection"]
