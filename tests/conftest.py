"""Shared pytest fixtures for pdf_chat unit tests."""
from __future__ import annotations

import pytest

from pdf_chat.chunking import chunk_text
from pdf_chat.schema import Segment, SourceDocument
from pdf_chat.service import RetrievalService

ENV_VARS = (
    "LLM_ENABLED",
    "LLM_API_KEY",
    "OPENAI_API_KEY",
    "LLM_API_URL",
    "LLM_MODEL",
    "LLM_TEMPERATURE",
    "LLM_MAX_TOKENS",
    "LLM_TIMEOUT",
    "CHUNK_SIZE",
    "CHUNK_OVERLAP",
    "DOCUMENTS_DIR",
    "RELOAD_ON_STARTUP",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def cat_segments() -> list[Segment]:
    return [
        Segment(text="The cat sat on the mat.", source="cats.txt"),
        Segment(text="Dogs bark loudly at night.", source="dogs.txt"),
    ]


@pytest.fixture()
def cat_documents() -> list[SourceDocument]:
    return [
        SourceDocument(name="cats.txt", text="The cat sat on the mat."),
        SourceDocument(name="dogs.txt", text="Dogs bark loudly at night."),
    ]


@pytest.fixture()
def make_service():
    """Build a service over in-memory documents, one segment per document."""

    def _make(documents: list[SourceDocument], chunker=None, synthesizer=None) -> RetrievalService:
        return RetrievalService(
            extractor=lambda: documents,
            chunker=chunker or (lambda text: chunk_text(text, 1000, 200)),
            synthesizer=synthesizer,
        )

    return _make


@pytest.fixture()
def loaded_service(make_service, cat_documents) -> RetrievalService:
    service = make_service(cat_documents)
    service.reload()
    return service
