"""Question answering over a folder of PDF and text documents."""

from .errors import IngestionError, InvalidQueryError
from .qa import AnswerSynthesizer
from .schema import ReloadResult, ScoredCandidate, Segment, SourceDocument, StoreStatus
from .service import RetrievalService, build_service
from .store import SegmentStore

__all__ = [
    "AnswerSynthesizer",
    "IngestionError",
    "InvalidQueryError",
    "ReloadResult",
    "RetrievalService",
    "ScoredCandidate",
    "Segment",
    "SegmentStore",
    "SourceDocument",
    "StoreStatus",
    "build_service",
]
