import json
import logging
from pathlib import Path
from typing import Literal

from recall.core.exceptions import CorpusLoadError
from recall.core.models.document import Document, Email, Note

logger = logging.getLogger(__name__)

_FACTORIES = {"emails": Email.from_record, "notes": Note.from_record}


class JsonCorpusLoader:
    """Corpus stored as a JSON array of email or note records."""

    def __init__(self, path: str, kind: Literal["emails", "notes"] = "emails"):
        """Initialize loader.

        Args:
            path: Path to the JSON file.
            kind: Record type stored in the file.
        """
        if kind not in _FACTORIES:
            raise ValueError(f"Unknown corpus kind '{kind}'. Choose from {set(_FACTORIES)}")
        self._path = Path(path)
        self._kind = kind
        self._factory = _FACTORIES[kind]

    def load_documents(self) -> list[Document]:
        """Read the whole file; called once per request."""
        try:
            records = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise CorpusLoadError(f"Corpus not found: {self._path}") from e
        except (OSError, ValueError) as e:
            raise CorpusLoadError(f"Cannot read corpus {self._path}: {e}") from e

        if not isinstance(records, list):
            raise CorpusLoadError(f"Corpus {self._path} must hold a JSON array")

        try:
            documents = [self._factory(record) for record in records]
        except (KeyError, TypeError, AttributeError) as e:
            raise CorpusLoadError(f"Malformed {self._kind} record in {self._path}: {e}") from e

        logger.debug(f"Loaded {len(documents)} {self._kind} from {self._path}")
        return documents
