from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from openai import OpenAI

from .errors import ModelCallError
from .schema import Segment
from .scoring import normalize_query, query_terms
from .settings import ModelSettings

logger = logging.getLogger(__name__)

NO_DOCUMENTS_MESSAGE = (
    "I couldn't find relevant information in the PDFs to answer your question. "
    "Please make sure you have uploaded PDF files in the pdfs folder and click 'Reload PDFs'."
)
NO_MATCH_MESSAGE = (
    "I couldn't find relevant information in the PDFs to answer your question. "
    "Try rephrasing your question or asking about a different topic."
)
SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on provided context from PDF documents. "
    "Answer only from the supplied context, and say so if it does not contain enough information."
)

MAX_CONTEXT_SEGMENTS = 5
FALLBACK_MAX_CHARS = 500
ELLIPSIS = "..."
MIN_SENTENCE_WORD_LENGTH = 4

_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")


def build_context(segments: Sequence[Segment]) -> str:
    blocks = [
        f"[Document {idx + 1}]\n{segment.text}"
        for idx, segment in enumerate(segments[:MAX_CONTEXT_SEGMENTS])
    ]
    return "\n\n".join(blocks)


def build_messages(question: str, segments: Sequence[Segment]) -> list[dict[str, str]]:
    """Build the chat payload sent to the completion endpoint."""
    prompt = (
        "Context from PDFs:\n\n"
        f"{build_context(segments)}\n\n"
        f"Question: {question}\n\n"
        "Answer the question based solely on the provided context. "
        "If the context doesn't contain enough information to answer the question, say so. "
        "Be concise and accurate in your response."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


def truncate(text: str, limit: int = FALLBACK_MAX_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def split_sentences(text: str) -> list[str]:
    """Split on runs of `.`, `!` and `?`, dropping blank fragments."""
    return [piece.strip() for piece in _SENTENCE_BOUNDARY.split(text) if piece.strip()]


def fallback_answer(question: str, segments: Sequence[Segment]) -> str:
    """Answer locally from the best segment without calling a model.

    Keeps the sentences of the top segment that mention a query word of four
    or more characters. When no sentence qualifies the whole segment is
    returned. The result is capped at `FALLBACK_MAX_CHARS` plus an ellipsis.
    """
    if not segments:
        return NO_MATCH_MESSAGE

    best = segments[0].text
    words = query_terms(normalize_query(question), MIN_SENTENCE_WORD_LENGTH)
    matched = [
        sentence
        for sentence in split_sentences(best)
        if any(word in sentence.lower() for word in words)
    ]
    if matched:
        return truncate(" ".join(matched))
    return truncate(best)


class AnswerSynthesizer:
    """Turns retrieved segments into an answer string.

    The model path is tried only when `settings.is_active`; any failure on that
    path is logged and answered locally instead, so `synthesize` never raises
    because of the completion endpoint.
    """

    def __init__(self, settings: ModelSettings | None = None) -> None:
        self.settings = settings or ModelSettings()
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
            )
        return self._client

    def request_completion(self, question: str, segments: Sequence[Segment]) -> str:
        """Ask the completion endpoint for an answer.

        Raises:
            ModelCallError: If the response has no usable first choice.
        """
        response = self._get_client().chat.completions.create(
            model=self.settings.model,
            messages=build_messages(question, segments),
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
        )
        choices = getattr(response, "choices", None)
        if not choices:
            raise ModelCallError("completion response has no choices")
        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise ModelCallError("completion response has no message content")
        return content.strip()

    def synthesize(self, question: str, segments: Sequence[Segment], *, corpus_loaded: bool = True) -> str:
        """Produce an answer for `question` from ranked `segments`.

        Args:
            question: The user's question.
            segments: Retrieved segments, best first.
            corpus_loaded: Whether the store held any segments; selects the
                message returned when `segments` is empty.

        Returns:
            Always a non-empty string.
        """
        if not segments:
            return NO_MATCH_MESSAGE if corpus_loaded else NO_DOCUMENTS_MESSAGE

        if not self.settings.is_active:
            return fallback_answer(question, segments)

        try:
            return self.request_completion(question, segments)
        except ModelCallError as exc:
            logger.warning("Unusable model response, answering locally: %s", exc)
        except Exception:
            logger.exception("Model call failed, answering locally")
        return fallback_answer(question, segments)
