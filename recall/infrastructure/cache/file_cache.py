import asyncio
import contextlib
import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class FileEmbeddingCache:
    """Embedding cache with one JSON file per unique text.

    Files are named ``<model>-<sha256 prefix>.json`` and hold the raw vector.
    Entries are never rewritten with different content, so concurrent writers
    for the same text are harmless.
    """

    def __init__(self, cache_dir: str = "./data/embeddings", hash_chars: int = 10):
        """Initialize cache.

        Args:
            cache_dir: Directory holding the cache files.
            hash_chars: Hex characters of the content digest kept in the key.
        """
        self._cache_dir = Path(cache_dir)
        self._hash_chars = hash_chars
        self._dir_ready = False

    def path_for(self, text: str, model: str) -> Path:
        digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[: self._hash_chars]
        safe_model = model.replace("/", "_")
        return self._cache_dir / f"{safe_model}-{digest}.json"

    async def get(self, text: str, model: str) -> Optional[list[float]]:
        return await asyncio.to_thread(self._read, self.path_for(text, model))

    async def put(self, text: str, model: str, vector: list[float]) -> None:
        await asyncio.to_thread(self._write, self.path_for(text, model), vector)

    def _ensure_dir(self) -> None:
        if not self._dir_ready:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            self._dir_ready = True

    def _read(self, path: Path) -> Optional[list[float]]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                vector = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logger.warning(f"Cache read failed for {path.name}, treating as miss: {e}")
            return None

        if not _is_vector(vector):
            logger.warning(f"Cache entry {path.name} is not a vector, treating as miss")
            return None
        return [float(x) for x in vector]

    def _write(self, path: Path, vector: list[float]) -> None:
        tmp_name = None
        try:
            self._ensure_dir()
            # write-then-rename so readers never see a partial entry
            fd, tmp_name = tempfile.mkstemp(dir=self._cache_dir, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(vector, f)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            logger.warning(f"Cache write failed for {path.name}: {e}")
        finally:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)


def _is_vector(value) -> bool:
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in value)
    )
