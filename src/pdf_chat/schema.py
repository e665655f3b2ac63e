from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class SourceDocument:
    """Plain text extracted from one source file."""

    name: str
    text: str


@dataclass(slots=True, frozen=True)
class Segment:
    """Immutable span of document text used as the unit of retrieval."""

    text: str
    source: str = ""


@dataclass(slots=True, frozen=True)
class ScoredCandidate:
    """Per-query relevance score for the segment at `position` in the store."""

    position: int
    score: float
    segment: Segment


@dataclass(slots=True, frozen=True)
class StoreStatus:
    """Readiness report exposed to the transport layer."""

    chunks_loaded: int
    ready: bool


@dataclass(slots=True, frozen=True)
class ReloadResult:
    """Outcome of a successful reload."""

    documents: int
    chunk_count: int
