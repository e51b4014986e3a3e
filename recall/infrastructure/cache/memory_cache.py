import hashlib
from typing import Optional


class InMemoryEmbeddingCache:
    """Process-local embedding cache."""

    def __init__(self):
        self._entries: dict[str, list[float]] = {}

    @staticmethod
    def _key(text: str, model: str) -> str:
        return f"{model}-{hashlib.sha256(text.encode('utf-8')).hexdigest()}"

    async def get(self, text: str, model: str) -> Optional[list[float]]:
        vector = self._entries.get(self._key(text, model))
        return list(vector) if vector is not None else None

    async def put(self, text: str, model: str, vector: list[float]) -> None:
        self._entries[self._key(text, model)] = list(vector)

    def __len__(self) -> int:
        return len(self._entries)
