"""Search service - hybrid retrieval, filtering and lookup over the corpus."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from ..exceptions import InvalidQueryError, JudgeError
from ..models.chat import ChatMessage
from ..models.document import Chunk, Document, Email, FusedResult, ScoredResult, SearchHit
from ..protocols.corpus import CorpusLoaderProtocol
from ..protocols.reranker import RerankerProtocol
from ..strategies.bm25 import LexicalScorer
from ..strategies.fusion import RRF_K, reciprocal_rank_fusion
from ..strategies.scoring import ScoringStrategy, ZeroScoreFilterStrategy
from .chunk_service import ChunkService
from .semantic_service import SemanticScorer

logger = logging.getLogger(__name__)


class SearchService:
    """Keyword + semantic search with rank fusion and judge reranking."""

    def __init__(
        self,
        corpus: CorpusLoaderProtocol,
        chunker: ChunkService,
        lexical: LexicalScorer,
        semantic: SemanticScorer,
        reranker: RerankerProtocol,
        rrf_k: int = RRF_K,
        rerank_top_n: int = 30,
        default_limit: int = 10,
        snippet_length: int = 150,
        lexical_strategies: list[ScoringStrategy] | None = None,
    ):
        """Initialize search service.

        Args:
            corpus: Corpus loader, read on every request.
            chunker: Chunk service.
            lexical: BM25 scorer.
            semantic: Embedding scorer.
            reranker: Relevance reranker.
            rrf_k: Reciprocal rank fusion constant.
            rerank_top_n: Candidates kept per ranking and passed to the reranker.
            default_limit: Number of results when the caller gives none.
            snippet_length: Characters of body kept in snippets.
            lexical_strategies: Strategies applied to the BM25 ranking.
        """
        self._corpus = corpus
        self._chunker = chunker
        self._lexical = lexical
        self._semantic = semantic
        self._reranker = reranker
        self._rrf_k = rrf_k
        self._rerank_top_n = rerank_top_n
        self._default_limit = default_limit
        self._snippet_length = snippet_length

        self._lexical_strategies = lexical_strategies or [ZeroScoreFilterStrategy()]

    async def search(
        self,
        keywords: Optional[list[str]] = None,
        search_query: Optional[str] = None,
        limit: Optional[int] = None,
        history: Optional[list[ChatMessage]] = None,
    ) -> list[SearchHit]:
        """Search chunks by keywords and/or a semantic query.

        Args:
            keywords: Exact keywords for BM25.
            search_query: Natural language query for embeddings.
            limit: Maximum number of hits.
            history: Conversation so far, shown to the reranker.

        Returns:
            Reranked hits with snippets.

        Raises:
            InvalidQueryError: If neither keywords nor search_query is given.
        """
        if limit is None:
            limit = self._default_limit
        keywords = [k for k in keywords or [] if k.strip()]
        search_query = (search_query or "").strip()
        if not keywords and not search_query:
            raise InvalidQueryError("search needs keywords, search_query, or both")

        documents = self._corpus.load_documents()
        chunks = self._chunker.chunk_all(documents)

        lexical_results, semantic_results = await asyncio.gather(
            self._lexical_ranking(keywords, chunks),
            self._semantic_ranking(search_query, chunks),
        )

        fused = reciprocal_rank_fusion(
            [lexical_results, semantic_results],
            k=self._rrf_k,
            top_n=self._rerank_top_n,
        )[: self._rerank_top_n]

        rerank_query = " ".join(part for part in (" ".join(keywords), search_query) if part)
        selected = await self._rerank(fused, rerank_query, history or [])

        hits = [self._to_hit(result) for result in selected[:limit]]
        logger.info(
            f"Search: returned {len(hits)}/{limit} hits "
            f"(bm25={len(lexical_results)}, embeddings={len(semantic_results)}, "
            f"fused={len(fused)}, reranked={len(selected)}) for '{rerank_query[:50]}'"
        )
        return hits

    async def _lexical_ranking(
        self, keywords: list[str], chunks: list[Chunk]
    ) -> list[ScoredResult[Chunk]]:
        if not keywords:
            return []
        results = await asyncio.to_thread(self._lexical.score, keywords, chunks)
        for strategy in self._lexical_strategies:
            results = strategy.apply(results)
        return results

    async def _semantic_ranking(
        self, query: str, chunks: list[Chunk]
    ) -> list[ScoredResult[Chunk]]:
        if not query:
            return []
        return await self._semantic.score(query, chunks)

    async def _rerank(
        self,
        fused: list[FusedResult[Chunk]],
        query: str,
        history: list[ChatMessage],
    ) -> list[FusedResult[Chunk]]:
        """Rerank, falling back to fused order when the judge fails."""
        if not fused:
            return fused
        try:
            return await self._reranker.rerank(fused, query, history)
        except JudgeError as e:
            logger.warning(f"Rerank failed, using fused order: {e}")
            return fused

    def _to_hit(self, result: FusedResult[Chunk]) -> SearchHit:
        chunk = result.item
        return SearchHit(
            id=chunk.document_id,
            subject=chunk.subject,
            snippet=self._snippet(chunk.text),
            score=result.score,
            chunk_index=chunk.index,
            total_chunks=chunk.total_chunks,
            metadata=chunk.document.metadata(),
        )

    def _snippet(self, text: str) -> str:
        snippet = text[: self._snippet_length].strip()
        if len(text) > self._snippet_length:
            snippet += "..."
        return snippet

    def filter(
        self,
        sender: Optional[str] = None,
        recipient: Optional[str] = None,
        subject: Optional[str] = None,
        contains: Optional[str] = None,
        before: Optional[str] = None,
        after: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[dict]:
        """Filter documents by exact predicates, combined with AND.

        Args:
            sender: Substring of the sender, case-insensitive.
            recipient: Substring of any to/cc address, case-insensitive.
            subject: Substring of the subject, case-insensitive.
            contains: Substring of subject or body, case-insensitive.
            before: Keep items strictly before this ISO 8601 timestamp.
            after: Keep items strictly after this ISO 8601 timestamp.
            limit: Maximum number of results.

        Returns:
            Matching documents as snippet views, in corpus order.
        """
        if limit is None:
            limit = self._default_limit
        before_dt = _parse_bound(before, "before")
        after_dt = _parse_bound(after, "after")

        filtered = self._corpus.load_documents()

        if sender:
            needle = sender.lower()
            filtered = [
                d for d in filtered if isinstance(d, Email) and needle in d.sender.lower()
            ]

        if recipient:
            needle = recipient.lower()
            filtered = [
                d
                for d in filtered
                if isinstance(d, Email) and any(needle in r.lower() for r in d.recipients)
            ]

        if subject:
            needle = subject.lower()
            filtered = [d for d in filtered if needle in d.subject.lower()]

        if contains:
            needle = contains.lower()
            filtered = [
                d
                for d in filtered
                if needle in d.subject.lower() or needle in d.body.lower()
            ]

        if before_dt is not None:
            filtered = [d for d in filtered if _before(d, before_dt)]

        if after_dt is not None:
            filtered = [d for d in filtered if _after(d, after_dt)]

        results = filtered[:limit]
        logger.info(f"Filtered {len(filtered)} documents, returning {len(results)}")

        return [
            {
                "id": d.id,
                "subject": d.subject,
                "snippet": self._snippet(d.body),
                **d.metadata(),
            }
            for d in results
        ]

    def get_by_ids(self, ids: list[str], include_thread: bool = False) -> list[dict]:
        """Fetch full documents by id.

        Args:
            ids: Document ids.
            include_thread: Expand emails to their whole thread, oldest first.

        Returns:
            Full document records.
        """
        documents = self._corpus.load_documents()
        wanted = set(ids)
        results: list[Document] = [d for d in documents if d.id in wanted]

        if include_thread and results:
            thread_ids = {
                d.thread_id for d in results if isinstance(d, Email) and d.thread_id
            }
            if thread_ids:
                in_thread = [
                    d
                    for d in documents
                    if isinstance(d, Email) and d.thread_id in thread_ids
                ]
                # keep requested documents that have no thread
                loose = [
                    d
                    for d in results
                    if not (isinstance(d, Email) and d.thread_id in thread_ids)
                ]
                results = sorted(in_thread + loose, key=_sort_key)

        logger.info(f"Returning {len(results)} documents for {len(ids)} ids")
        return [d.to_dict() for d in results]


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _parse_bound(value: Optional[str], name: str) -> Optional[datetime]:
    if not value:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise InvalidQueryError(f"'{name}' is not an ISO 8601 timestamp: {value!r}")
    return parsed


def _before(document: Document, bound: datetime) -> bool:
    ts = parse_timestamp(document.timestamp)
    return ts is not None and ts < bound


def _after(document: Document, bound: datetime) -> bool:
    ts = parse_timestamp(document.timestamp)
    return ts is not None and ts > bound


def _sort_key(document: Document) -> datetime:
    return parse_timestamp(document.timestamp) or datetime.min.replace(tzinfo=timezone.utc)
