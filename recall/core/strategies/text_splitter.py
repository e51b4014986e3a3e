"""Text splitter - separator-aware windows with exact overlap."""

from dataclasses import dataclass

DEFAULT_SEPARATORS = ("\n\n", "\n", " ")


@dataclass(frozen=True)
class TextSpan:
    """Exact slice of the input text."""
    start: int
    text: str

    @property
    def end(self) -> int:
        return self.start + len(self.text)


class RecursiveTextSplitter:
    """Split text into bounded, overlapping windows that end on natural boundaries.

    Each window after the first starts exactly ``chunk_overlap`` characters
    before the previous one ended. The window end is the last paragraph break
    inside the size limit, else the last line break, else the last space,
    else the hard character limit. Windows are exact substrings, so dropping
    the first ``chunk_overlap`` characters of every window but the first and
    concatenating gives back the input.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separators: tuple[str, ...] = DEFAULT_SEPARATORS,
    ):
        """Initialize splitter.

        Args:
            chunk_size: Maximum window length in characters.
            chunk_overlap: Characters shared by adjacent windows.
            separators: Boundaries to end windows on, in order of preference.
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be in [0, chunk_size={chunk_size})"
            )
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._separators = tuple(s for s in separators if s)

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    def split_spans(self, text: str) -> list[TextSpan]:
        """Split text into spans with their start offsets."""
        if len(text) <= self._chunk_size:
            return [TextSpan(0, text)]

        spans: list[TextSpan] = []
        start = 0
        while True:
            hard_end = start + self._chunk_size
            if hard_end >= len(text):
                spans.append(TextSpan(start, text[start:]))
                break

            # end must pass the overlap region or the next window would not advance
            end = self._find_boundary(text, start + self._chunk_overlap + 1, hard_end)
            spans.append(TextSpan(start, text[start:end]))
            start = end - self._chunk_overlap

        return spans

    def split_text(self, text: str) -> list[str]:
        return [span.text for span in self.split_spans(text)]

    def _find_boundary(self, text: str, lo: int, hi: int) -> int:
        """Return the best window end in [lo, hi]."""
        for sep in self._separators:
            idx = text.rfind(sep, max(lo - len(sep), 0), hi)
            if idx != -1:
                return idx + len(sep)
        return hi

    @staticmethod
    def join(chunks: list[str], chunk_overlap: int) -> str:
        """Inverse of split_text for the same overlap."""
        if not chunks:
            return ""
        return chunks[0] + "".join(c[chunk_overlap:] for c in chunks[1:])
