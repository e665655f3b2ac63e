from __future__ import annotations

EMPTY_QUESTION_MESSAGE = "Please provide a question."


class PdfChatError(Exception):
    """Base class for errors raised by the question answering core."""


class InvalidQueryError(PdfChatError, ValueError):
    """Raised when a question is blank after normalization."""

    def __init__(self, message: str = EMPTY_QUESTION_MESSAGE) -> None:
        super().__init__(message)


class IngestionError(PdfChatError):
    """Raised when source documents cannot be read during a reload."""


class ModelCallError(PdfChatError):
    """The completion endpoint failed or returned an unusable response."""


class SimilarityError(PdfChatError):
    """Character similarity is undefined for the given pair of texts."""
