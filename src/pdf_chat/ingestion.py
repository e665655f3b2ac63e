"""Text extraction for the documents directory.

PDFs are read with pypdf; plain text and markdown files are read as UTF-8 with
a latin-1 fallback. Files are visited in sorted name order so that segment
positions are reproducible across reloads of the same directory.
"""
from __future__ import annotations

import logging
from pathlib import Path

import pypdf
from pypdf.errors import PyPdfError

from .errors import IngestionError
from .schema import SourceDocument

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".txt", ".md"}
SUPPORTED_SUFFIXES = {".pdf"} | TEXT_SUFFIXES


def extract_pdf_text(path: Path) -> str:
    reader = pypdf.PdfReader(path)
    pages = []
    for page in reader.pages:
        text = page.extract_text()
        if text:
            pages.append(text)
    return "\n".join(pages)


def extract_plain_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return path.read_text(encoding="latin-1")


def extract_text(path: Path) -> str:
    """Return the text of one supported file.

    Raises:
        IngestionError: If the file cannot be read or parsed.
    """
    try:
        if path.suffix.lower() == ".pdf":
            return extract_pdf_text(path)
        return extract_plain_text(path)
    except (OSError, PyPdfError, ValueError) as exc:
        logger.error("Failed to read %s: %s", path, exc)
        raise IngestionError(f"Failed to read {path.name}: {exc}") from exc


def extract_documents(directory: str | Path) -> list[SourceDocument]:
    """Extract text from every supported file in `directory`.

    A missing directory is treated like an empty one. Files that contain no
    extractable text are skipped.

    Args:
        directory: Folder holding the source documents.

    Returns:
        Extracted documents in sorted filename order.

    Raises:
        IngestionError: If a file exists but cannot be read.
    """
    root = Path(directory)
    if not root.is_dir():
        logger.warning("Documents directory %s does not exist", root)
        return []

    documents: list[SourceDocument] = []
    for path in sorted(root.iterdir()):
        if not path.is_file() or path.suffix.lower() not in SUPPORTED_SUFFIXES:
            continue
        text = extract_text(path)
        if not text.strip():
            logger.warning("No text extracted from %s", path.name)
            continue
        logger.info("Extracted %d chars from %s", len(text), path.name)
        documents.append(SourceDocument(name=path.name, text=text))
    return documents
