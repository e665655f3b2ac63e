import sys

from pdf_chat.logging_utils import setup_logging
from pdf_chat.service import build_service
from pdf_chat.settings import load_settings


def main() -> None:
    """Load the documents directory once and answer a question from argv."""
    if len(sys.argv) < 2:
        raise SystemExit("usage: python scripts/ask.py <question>")
    setup_logging()
    service = build_service(load_settings())
    result = service.reload()
    print(f"Loaded {result.chunk_count} chunks from {result.documents} document(s)")
    print(service.answer(" ".join(sys.argv[1:])))


if __name__ == "__main__":
    main()
