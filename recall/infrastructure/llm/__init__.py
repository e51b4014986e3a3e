"""LLM client implementations."""
from .openai_judge import OpenAIJudge

__all__ = ["OpenAIJudge"]
