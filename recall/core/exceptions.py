"""Retrieval error taxonomy."""


class RecallError(Exception):
    """Base exception for retrieval errors."""
    pass


class CorpusLoadError(RecallError):
    """Raised when the corpus file is missing or cannot be parsed."""
    pass


class EmbeddingProviderError(RecallError):
    """Raised when the embedding provider rejects a request or keeps failing."""
    pass


class TransientEmbeddingError(EmbeddingProviderError):
    """Raised by embedders for provider failures worth retrying."""
    pass


class JudgeError(RecallError):
    """Raised when the judge call fails or returns a schema-violating object."""
    pass


class InvalidQueryError(RecallError):
    """Raised when a search names neither keywords nor a semantic query."""
    pass
