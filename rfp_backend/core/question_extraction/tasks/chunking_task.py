"""
Overlapping text chunker.

Splits solicitation text into windows small enough for one model call.
Consecutive windows share `overlap` characters so a requirement straddling a
boundary is seen whole by at least one call; cuts prefer paragraph, then
sentence boundaries past the window midpoint.

Dependencies: None
System role: First stage of question extraction
"""

from ..models import TextChunk

PARAGRAPH_BREAK = "\n\n"
SENTENCE_BREAK = ". "


def _find_cut(text: str, start: int, end: int, max_chars: int) -> int:
    midpoint = start + max_chars / 2

    paragraph = text.rfind(PARAGRAPH_BREAK, start, end + len(PARAGRAPH_BREAK))
    if paragraph > midpoint:
        return paragraph

    # Keep the period with the sentence it ends
    sentence = text.rfind(SENTENCE_BREAK, start, end + 1)
    if sentence > midpoint:
        return sentence + 1

    return end


def split_text(text: str, max_chars: int, overlap: int) -> list[str]:
    """
    Split text into ordered, overlapping substrings.

    Args:
        text: Source text
        max_chars: Maximum characters per chunk
        overlap: Characters repeated at the start of each following chunk

    Returns:
        list[str]: Chunks covering the whole text

    Raises:
        ValueError: When max_chars or overlap is out of range
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")
    if overlap < 0 or overlap >= max_chars:
        raise ValueError("overlap must be in [0, max_chars)")

    if len(text) <= max_chars:
        return [text]

    chunks: list[str] = []
    start = 0

    while start < len(text):
        end = start + max_chars
        if end < len(text):
            end = _find_cut(text, start, end, max_chars)
        else:
            end = len(text)

        chunks.append(text[start:end])
        if end >= len(text):
            break

        next_start = max(end - overlap, 0)
        # A cut near the midpoint with a large overlap would not advance
        start = next_start if next_start > start else end

    return chunks


class ChunkingTask:
    """Split raw document text into TextChunks."""

    def __init__(self, max_chars: int = 30000, overlap: int = 500) -> None:
        """
        Initialize chunking task.

        Args:
            max_chars: Maximum chunk size in characters
            overlap: Overlap between consecutive chunks

        Raises:
            ValueError: When the parameters are out of range
        """
        if max_chars <= 0:
            raise ValueError("max_chars must be positive")
        if overlap < 0 or overlap >= max_chars:
            raise ValueError("overlap must be in [0, max_chars)")

        self._max_chars = max_chars
        self._overlap = overlap

    def chunk(self, text: str) -> list[TextChunk]:
        """
        Split text into TextChunks with ordinals.

        Args:
            text: Document text

        Returns:
            list[TextChunk]: At least one chunk
        """
        pieces = split_text(text, self._max_chars, self._overlap)
        return [
            TextChunk(content=piece, ordinal=i, total_chunks=len(pieces))
            for i, piece in enumerate(pieces)
        ]
