"""Corpus loader protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.document import Document


@runtime_checkable
class CorpusLoaderProtocol(Protocol):
    """Protocol for corpus storage."""

    def load_documents(self) -> list[Document]:
        """Read the whole corpus, in storage order."""
        ...
