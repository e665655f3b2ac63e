from __future__ import annotations

from collections.abc import Sequence

from .schema import ScoredCandidate, Segment
from .scoring import normalize_query, score_segment


def score_segments(query: str, segments: Sequence[Segment]) -> list[ScoredCandidate]:
    """Score every segment of one store generation against a query.

    Args:
        query: User question; normalized here.
        segments: Store snapshot to scan.

    Returns:
        One candidate per segment, in store order.
    """
    normalized = normalize_query(query)
    if not normalized:
        return []
    return [
        ScoredCandidate(position=position, score=score_segment(normalized, segment.text), segment=segment)
        for position, segment in enumerate(segments)
    ]


def select_top_k(candidates: Sequence[ScoredCandidate], top_k: int) -> list[ScoredCandidate]:
    """Return the `top_k` best candidates, highest score first.

    Equal scores keep store order (lower position first).
    """
    if top_k <= 0:
        return []
    ranked = sorted(candidates, key=lambda candidate: (-candidate.score, candidate.position))
    return ranked[:top_k]


def top_segments(query: str, segments: Sequence[Segment], top_k: int = 3) -> list[Segment]:
    return [candidate.segment for candidate in select_top_k(score_segments(query, segments), top_k)]
