"""Document domain models."""
from dataclasses import dataclass, field
from typing import Generic, Optional, Protocol, TypeVar, Union, runtime_checkable


@runtime_checkable
class Indexable(Protocol):
    """Anything the scorers and fusion can rank."""

    @property
    def identity(self) -> str:
        """Stable identity used to merge rankings."""
        ...

    @property
    def indexable_text(self) -> str:
        """Text that is scored and embedded."""
        ...


@dataclass(frozen=True)
class Email:
    """Email record from the corpus."""
    id: str
    subject: str
    body: str
    timestamp: str
    sender: str = ""
    to: tuple[str, ...] = ()
    cc: tuple[str, ...] = ()
    thread_id: Optional[str] = None
    in_reply_to: Optional[str] = None
    references: tuple[str, ...] = ()

    @classmethod
    def from_record(cls, record: dict) -> "Email":
        return cls(
            id=str(record["id"]),
            subject=record.get("subject") or "",
            body=record.get("body") or "",
            timestamp=record.get("timestamp") or "",
            sender=record.get("from") or "",
            to=_as_tuple(record.get("to")),
            cc=_as_tuple(record.get("cc")),
            thread_id=record.get("threadId", record.get("thread_id")),
            in_reply_to=record.get("inReplyTo", record.get("in_reply_to")),
            references=_as_tuple(record.get("references")),
        )

    @property
    def content(self) -> str:
        return self.body

    @property
    def identity(self) -> str:
        return self.id

    @property
    def indexable_text(self) -> str:
        return f"{self.subject} {self.body}"

    @property
    def recipients(self) -> tuple[str, ...]:
        return self.to + self.cc

    def to_dict(self) -> dict:
        """Full record for tool output."""
        return {
            "id": self.id,
            "threadId": self.thread_id,
            "subject": self.subject,
            "from": self.sender,
            "to": list(self.to),
            "cc": list(self.cc),
            "timestamp": self.timestamp,
            "body": self.body,
            "inReplyTo": self.in_reply_to,
            "references": list(self.references),
        }

    def metadata(self) -> dict:
        """Display metadata carried by search and filter hits."""
        return {
            "from": self.sender,
            "to": list(self.to),
            "timestamp": self.timestamp,
            "threadId": self.thread_id,
        }


@dataclass(frozen=True)
class Note:
    """Note record from the corpus."""
    id: str
    subject: str
    content: str
    last_modified: str
    preview: Optional[str] = None

    @classmethod
    def from_record(cls, record: dict) -> "Note":
        return cls(
            id=str(record["id"]),
            subject=record.get("subject") or "",
            content=record.get("content") or "",
            last_modified=record.get("lastModified", record.get("last_modified")) or "",
            preview=record.get("preview"),
        )

    @property
    def body(self) -> str:
        return self.content

    @property
    def timestamp(self) -> str:
        return self.last_modified

    @property
    def identity(self) -> str:
        return self.id

    @property
    def indexable_text(self) -> str:
        return f"{self.subject} {self.content}"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subject": self.subject,
            "lastModified": self.last_modified,
            "content": self.content,
        }

    def metadata(self) -> dict:
        return {"lastModified": self.last_modified}


Document = Union[Email, Note]


@dataclass(frozen=True)
class Chunk:
    """Contiguous slice of a document body, the unit of retrieval."""
    document: Document
    text: str
    index: int
    total_chunks: int
    start: int = 0

    @property
    def document_id(self) -> str:
        return self.document.id

    @property
    def subject(self) -> str:
        return self.document.subject

    @property
    def identity(self) -> str:
        # document id alone collides across chunks of one document
        return f"{self.document.id}-{self.index}"

    @property
    def indexable_text(self) -> str:
        return f"{self.document.subject} {self.text}"


T = TypeVar("T")


@dataclass
class ScoredResult(Generic[T]):
    """Item scored by a single retrieval method."""
    item: T
    score: float


@dataclass
class FusedResult(Generic[T]):
    """Item with its accumulated reciprocal-rank score."""
    item: T
    key: str
    score: float = 0.0


@dataclass
class SearchHit:
    """Search response item for the tool surface."""
    id: str
    subject: str
    snippet: str
    score: float
    chunk_index: int
    total_chunks: int
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subject": self.subject,
            "snippet": self.snippet,
            "score": self.score,
            "chunkIndex": self.chunk_index,
            "totalChunks": self.total_chunks,
            **self.metadata,
        }


def _as_tuple(value) -> tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)
