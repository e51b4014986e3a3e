"""Chunk service - splits documents into retrieval units."""

import logging
from typing import Iterable

from ..models.document import Chunk, Document
from ..strategies.text_splitter import RecursiveTextSplitter

logger = logging.getLogger(__name__)


class ChunkService:
    """Derive chunks from documents. Nothing is persisted."""

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200):
        """Initialize chunk service.

        Args:
            chunk_size: Target chunk size in characters.
            chunk_overlap: Overlap between adjacent chunks.
        """
        self._splitter = RecursiveTextSplitter(
            chunk_size=chunk_size, chunk_overlap=chunk_overlap
        )

    @property
    def chunk_overlap(self) -> int:
        return self._splitter.chunk_overlap

    def chunk(self, document: Document) -> list[Chunk]:
        """Split one document body into chunks."""
        spans = self._splitter.split_spans(document.body)
        # total is only known once the splitter is done
        total = len(spans)
        return [
            Chunk(
                document=document,
                text=span.text,
                index=i,
                total_chunks=total,
                start=span.start,
            )
            for i, span in enumerate(spans)
        ]

    def chunk_all(self, documents: Iterable[Document]) -> list[Chunk]:
        chunks: list[Chunk] = []
        n_docs = 0
        for document in documents:
            chunks.extend(self.chunk(document))
            n_docs += 1

        logger.info(f"Chunked {n_docs} documents into {len(chunks)} chunks")
        return chunks
