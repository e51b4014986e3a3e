"""Corpus loader implementations."""
from .json_loader import JsonCorpusLoader

__all__ = ["JsonCorpusLoader"]
