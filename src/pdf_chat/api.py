"""FastAPI layer exposing chat, reload, status and search."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .errors import InvalidQueryError
from .logging_utils import setup_logging
from .service import ANSWER_CONTEXT_SIZE, RetrievalService, build_service
from .settings import load_settings

logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    question: str | None = None


class ChatResponse(BaseModel):
    answer: str


class ReloadResponse(BaseModel):
    status: str
    chunks: int


class StatusResponse(BaseModel):
    chunksLoaded: int
    ready: bool


class SearchHit(BaseModel):
    position: int
    score: float
    source: str
    text: str


class SearchResponse(BaseModel):
    query: str
    results: list[SearchHit]


def create_app(service: RetrievalService | None = None, reload_on_startup: bool = False) -> FastAPI:
    """Build the HTTP app around a retrieval service.

    With no `service`, settings are loaded from the environment and the
    default filesystem-backed service is built.
    """
    if service is None:
        setup_logging()
        settings = load_settings()
        service = build_service(settings)
        reload_on_startup = reload_on_startup or settings.reload_on_startup

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if reload_on_startup:
            try:
                service.reload()
            except Exception:
                logger.exception("Initial reload failed; use /api/reload once documents are readable")
        else:
            logger.info("Service started with an empty store. Use /api/reload to load documents.")
        yield

    app = FastAPI(title="PDF Chat API", lifespan=lifespan)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.state.service = service

    @app.post("/api/chat", response_model=ChatResponse)
    def chat_endpoint(payload: ChatRequest):
        try:
            return ChatResponse(answer=service.answer(payload.question or ""))
        except InvalidQueryError as exc:
            return JSONResponse(status_code=400, content={"answer": str(exc)})
        except Exception as exc:
            logger.exception("Failed to answer question")
            return JSONResponse(status_code=500, content={"answer": f"Error processing question: {exc}"})

    @app.post("/api/reload", response_model=ReloadResponse)
    def reload_endpoint():
        try:
            result = service.reload()
        except Exception as exc:
            logger.exception("Failed to reload documents")
            return JSONResponse(status_code=500, content={"status": f"Error reloading documents: {exc}"})
        return ReloadResponse(status="Documents reloaded successfully", chunks=result.chunk_count)

    @app.get("/api/status", response_model=StatusResponse)
    def status_endpoint() -> StatusResponse:
        status = service.status()
        return StatusResponse(chunksLoaded=status.chunks_loaded, ready=status.ready)

    @app.get("/api/search", response_model=SearchResponse)
    def search_endpoint(
        q: str = Query(..., description="User query"),
        k: int = Query(ANSWER_CONTEXT_SIZE, ge=1, le=50),
    ) -> SearchResponse:
        hits = [
            SearchHit(
                position=candidate.position,
                score=candidate.score,
                source=candidate.segment.source,
                text=candidate.segment.text,
            )
            for candidate in service.search_scored(q, k)
        ]
        return SearchResponse(query=q, results=hits)

    return app
