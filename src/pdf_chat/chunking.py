from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from .schema import Segment, SourceDocument

logger = logging.getLogger(__name__)


def chunk_text(text: str, chunk_size: int = 1000, overlap: int = 200) -> list[str]:
    """Split text into overlapping character windows.

    Whitespace runs are collapsed first. A window that would end mid-word is
    pulled back to the last space inside it, as long as that still leaves more
    than `overlap` characters of new text.

    Args:
        text: Raw document text.
        chunk_size: Maximum characters per segment.
        overlap: Characters shared by consecutive segments.

    Returns:
        Non-empty segment texts in document order.
    """
    if chunk_size <= 0 or not 0 <= overlap < chunk_size:
        raise ValueError(f"invalid chunk window: size={chunk_size} overlap={overlap}")

    clean = " ".join(text.split())
    pieces: list[str] = []
    start = 0
    while start < len(clean):
        end = min(start + chunk_size, len(clean))
        if end < len(clean):
            cut = clean.rfind(" ", start, end)
            if cut > start + overlap:
                end = cut
        piece = clean[start:end].strip()
        if piece:
            pieces.append(piece)
        if end >= len(clean):
            break
        start = end - overlap
    return pieces


def chunk_documents(
    documents: Sequence[SourceDocument],
    chunker: Callable[[str], Sequence[str]] = chunk_text,
) -> list[Segment]:
    """Chunk every document and concatenate the segments in document order.

    Each segment is tagged with the name of the document it came from.
    """
    segments: list[Segment] = []
    for idx, document in enumerate(documents, start=1):
        pieces = chunker(document.text)
        segments.extend(Segment(text=piece, source=document.name) for piece in pieces)
        logger.info("Created %d chunks from %s (%d of %d)", len(pieces), document.name, idx, len(documents))
    return segments
