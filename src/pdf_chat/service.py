from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from functools import partial

from opentelemetry import trace

from .chunking import chunk_documents, chunk_text
from .errors import IngestionError, InvalidQueryError
from .ingestion import extract_documents
from .qa import AnswerSynthesizer
from .retrieval import score_segments, select_top_k
from .schema import ReloadResult, ScoredCandidate, Segment, SourceDocument, StoreStatus
from .scoring import normalize_query
from .settings import Settings
from .store import SegmentStore
from .tracing import (
    ATTR_INPUT_VALUE,
    ATTR_LLM_MODEL_NAME,
    ATTR_OUTPUT_VALUE,
    ATTR_RETRIEVAL_DOCUMENTS,
    ATTR_STORE_GENERATION,
    ATTR_STORE_SEGMENTS,
    get_tracer,
)

logger = logging.getLogger(__name__)

ANSWER_CONTEXT_SIZE = 3

Extractor = Callable[[], Sequence[SourceDocument]]
Chunker = Callable[[str], Sequence[str]]


class RetrievalService:
    """Answers questions against the currently loaded segments.

    Queries take one store snapshot when they start and use it throughout, so
    a concurrent reload never changes what a running query sees. Reloads are
    serialized: a second caller blocks until the first one finishes.
    """

    def __init__(
        self,
        extractor: Extractor,
        chunker: Chunker,
        synthesizer: AnswerSynthesizer | None = None,
        store: SegmentStore | None = None,
    ) -> None:
        self._extract = extractor
        self._chunk = chunker
        self.synthesizer = synthesizer or AnswerSynthesizer()
        self.store = store or SegmentStore()
        self._reload_lock = threading.Lock()

    @property
    def _tracer(self) -> trace.Tracer:
        return get_tracer("pdf_chat.service")

    def reload(self) -> ReloadResult:
        """Re-extract and re-chunk all documents, then publish them.

        Zero documents empties the store. A read failure leaves the previous
        generation in place.

        Raises:
            IngestionError: If the ingestion collaborator cannot read a source.
        """
        with self._reload_lock, self._tracer.start_as_current_span("reload") as span:
            logger.info("Reloading documents")
            try:
                documents = list(self._extract())
            except IngestionError as exc:
                span.record_exception(exc)
                span.set_status(trace.StatusCode.ERROR, str(exc))
                raise
            except OSError as exc:
                span.record_exception(exc)
                span.set_status(trace.StatusCode.ERROR, str(exc))
                raise IngestionError(str(exc)) from exc

            if documents:
                segments = chunk_documents(documents, self._chunk)
                generation = self.store.replace(segments)
            else:
                logger.warning("No document text extracted; check the documents directory")
                segments = []
                generation = self.store.clear()
            span.set_attribute(ATTR_STORE_SEGMENTS, len(segments))
            span.set_attribute(ATTR_STORE_GENERATION, generation)
            logger.info("Loaded %d text chunks from %d document(s)", len(segments), len(documents))
            return ReloadResult(documents=len(documents), chunk_count=len(segments))

    def _rank(self, query: str, segments: Sequence[Segment], top_k: int) -> list[ScoredCandidate]:
        with self._tracer.start_as_current_span("retrieval") as span:
            span.set_attribute(ATTR_INPUT_VALUE, query)
            ranked = select_top_k(score_segments(query, segments), top_k)
            span.set_attribute(ATTR_RETRIEVAL_DOCUMENTS, len(ranked))
            return ranked

    def search_scored(self, query: str, top_k: int = ANSWER_CONTEXT_SIZE) -> list[ScoredCandidate]:
        normalized = normalize_query(query)
        segments = self.store.snapshot()
        if not normalized or not segments:
            return []
        return self._rank(normalized, segments, top_k)

    def search(self, query: str, top_k: int = ANSWER_CONTEXT_SIZE) -> list[str]:
        """Return the texts of the `top_k` best segments, best first.

        Blank queries and an empty store both give an empty list.
        """
        return [candidate.segment.text for candidate in self.search_scored(query, top_k)]

    def answer(self, question: str) -> str:
        """Answer a question from the current store generation.

        Raises:
            InvalidQueryError: If the question is blank.
        """
        normalized = normalize_query(question)
        if not normalized:
            raise InvalidQueryError()

        with self._tracer.start_as_current_span("answer") as span:
            span.set_attribute(ATTR_INPUT_VALUE, question)
            segments = self.store.snapshot()
            ranked = self._rank(normalized, segments, ANSWER_CONTEXT_SIZE) if segments else []
            context = [candidate.segment for candidate in ranked]

            with self._tracer.start_as_current_span("generation") as generation_span:
                generation_span.set_attribute(ATTR_INPUT_VALUE, question)
                if self.synthesizer.settings.is_active:
                    generation_span.set_attribute(ATTR_LLM_MODEL_NAME, self.synthesizer.settings.model)
                answer = self.synthesizer.synthesize(question, context, corpus_loaded=bool(segments))
                generation_span.set_attribute(ATTR_OUTPUT_VALUE, answer[:500])

            span.set_attribute(ATTR_OUTPUT_VALUE, answer[:500])
            return answer

    def status(self) -> StoreStatus:
        count = len(self.store)
        return StoreStatus(chunks_loaded=count, ready=count > 0)


def build_service(settings: Settings) -> RetrievalService:
    """Wire the filesystem extractor, chunker and synthesizer from settings."""
    return RetrievalService(
        extractor=partial(extract_documents, settings.paths.documents_dir),
        chunker=partial(
            chunk_text,
            chunk_size=settings.chunking.chunk_size,
            overlap=settings.chunking.overlap,
        ),
        synthesizer=AnswerSynthesizer(settings.model),
    )
