from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-3.5-turbo"


@dataclass(slots=True, frozen=True)
class ModelSettings:
    """Completion endpoint configuration used by the answer synthesizer."""

    enabled: bool = True
    api_key: str = ""
    base_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    temperature: float = 0.7
    max_tokens: int = 500
    timeout: float = 60.0

    @property
    def is_active(self) -> bool:
        """True when the model path should be attempted at all."""
        return self.enabled and bool(self.api_key.strip())


@dataclass(slots=True, frozen=True)
class ChunkSettings:
    """Character window used to split documents into segments."""

    chunk_size: int = 1000
    overlap: int = 200

    def __post_init__(self) -> None:
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if not 0 <= self.overlap < self.chunk_size:
            raise ValueError(
                f"overlap must be in [0, chunk_size), got {self.overlap} for chunk_size {self.chunk_size}"
            )


@dataclass(slots=True, frozen=True)
class Paths:
    """Filesystem locations read by the ingestion step."""

    documents_dir: str = "pdfs"


@dataclass(slots=True, frozen=True)
class Settings:
    model: ModelSettings
    chunking: ChunkSettings
    paths: Paths
    reload_on_startup: bool = False


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw!r}")


def _env_number(name: str, default: float, cast: type = float):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from exc


def load_settings() -> Settings:
    """Load environment-backed settings and return typed config objects.

    Values from a local `.env` file are applied first; explicit environment
    variables win over it.

    Returns:
        Frozen settings bundle shared by the service and the HTTP layer.

    Raises:
        ValueError: If a numeric or boolean variable cannot be parsed, or the
            chunk window is inconsistent.
    """
    load_dotenv()
    api_key = os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY", "")
    return Settings(
        model=ModelSettings(
            enabled=_env_bool("LLM_ENABLED", True),
            api_key=api_key,
            base_url=os.getenv("LLM_API_URL", DEFAULT_API_URL),
            model=os.getenv("LLM_MODEL", DEFAULT_MODEL),
            temperature=_env_number("LLM_TEMPERATURE", 0.7),
            max_tokens=_env_number("LLM_MAX_TOKENS", 500, int),
            timeout=_env_number("LLM_TIMEOUT", 60.0),
        ),
        chunking=ChunkSettings(
            chunk_size=_env_number("CHUNK_SIZE", 1000, int),
            overlap=_env_number("CHUNK_OVERLAP", 200, int),
        ),
        paths=Paths(documents_dir=os.getenv("DOCUMENTS_DIR", "pdfs")),
        reload_on_startup=_env_bool("RELOAD_ON_STARTUP", False),
    )
