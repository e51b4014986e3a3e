"""Shared fakes for the retrieval tests."""

import pytest

from recall.core.exceptions import JudgeError
from recall.core.models.document import Email, Note
from recall.core.strategies.bm25 import tokenize

TOPICS = {
    "finance": {"payment", "payments", "overdue", "due", "balance", "owe", "invoice"},
    "house": {"house", "mortgage", "address", "grove", "bought", "buy"},
    "travel": {"flight", "hotel", "trip", "holiday", "boarding"},
    "grammar": {"grammar", "verb", "tense", "noun"},
}


class FakeEmbedder:
    """Deterministic topic-count embeddings with call recording."""

    def __init__(self, topics: dict[str, set[str]] | None = None, model_id: str = "fake-model"):
        self._topics = list((topics or TOPICS).values())
        self._model_id = model_id
        self.one_calls: list[str] = []
        self.many_calls: list[list[str]] = []

    @property
    def model_id(self) -> str:
        return self._model_id

    def vector(self, text: str) -> list[float]:
        tokens = tokenize(text)
        return [float(sum(t in words for t in tokens)) for words in self._topics]

    async def embed_one(self, text: str) -> list[float]:
        self.one_calls.append(text)
        return self.vector(text)

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        self.many_calls.append(list(texts))
        return [self.vector(t) for t in texts]


class FlakyEmbedder(FakeEmbedder):
    """Fails the first `failures` batch calls with `error`."""

    def __init__(self, failures: int, error: Exception | None = None):
        super().__init__()
        self._failures = failures
        self._error = error or ConnectionError("provider unavailable")
        self.attempts = 0

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        self.attempts += 1
        if self._failures > 0:
            self._failures -= 1
            raise self._error
        return await super().embed_many(texts)


class FakeJudge:
    """Judge returning fixed ids, or failing."""

    def __init__(self, result_ids: list[int] | None = None, fail: bool = False):
        self._result_ids = result_ids or []
        self._fail = fail
        self.calls: list[dict] = []

    async def generate_object(self, system, schema, messages):
        self.calls.append({"system": system, "schema": schema, "messages": messages})
        if self._fail:
            raise JudgeError("schema violation")
        return schema(result_ids=self._result_ids)


class StaticCorpus:
    def __init__(self, documents):
        self._documents = list(documents)
        self.loads = 0

    def load_documents(self):
        self.loads += 1
        return list(self._documents)


def make_email(id, subject, body, timestamp, sender="john@example.com", to=("me@example.com",), thread_id=None):
    return Email(
        id=id,
        subject=subject,
        body=body,
        timestamp=timestamp,
        sender=sender,
        to=tuple(to),
        thread_id=thread_id,
    )


@pytest.fixture
def emails():
    return [
        make_email(
            "e1",
            "Invoice 1042",
            "Please find attached invoice 1042 for the March consulting work.",
            "2024-03-01T09:00:00Z",
            thread_id="t1",
        ),
        make_email(
            "e2",
            "Re: Invoice 1042",
            "Friendly reminder: your balance is overdue, payment is now due.",
            "2024-03-20T10:00:00Z",
            sender="accounts@example.com",
            thread_id="t1",
        ),
        make_email(
            "e3",
            "Holiday plans",
            "The flight leaves at 7am and the hotel is booked for the whole trip.",
            "2024-02-10T08:00:00Z",
            sender="sarah@example.com",
            to=("me@example.com", "john@example.com"),
            thread_id="t2",
        ),
        make_email(
            "e4",
            "Re: Invoice 1042",
            "Thanks, paid today.",
            "2024-03-05T12:00:00Z",
            sender="me@example.com",
            to=("john@example.com",),
            thread_id="t1",
        ),
    ]


@pytest.fixture
def notes():
    return [
        Note(
            id="n1",
            subject="German grammar",
            content="The perfect tense uses haben or sein with the past participle.",
            last_modified="2024-01-05T10:00:00Z",
        ),
        Note(
            id="n2",
            subject="House purchase",
            content="Bought the house at 42 Victoria Grove, Chorlton.",
            last_modified="2023-11-01T10:00:00Z",
        ),
    ]
