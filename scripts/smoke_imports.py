from pdf_chat.chunking import chunk_text
from pdf_chat.schema import Segment, SourceDocument
from pdf_chat.service import RetrievalService


if __name__ == "__main__":
    docs = [
        SourceDocument(name="cats.txt", text="The cat sat on the mat. " * 40),
        SourceDocument(name="dogs.txt", text="Dogs bark loudly at night. " * 40),
    ]
    service = RetrievalService(extractor=lambda: docs, chunker=lambda text: chunk_text(text, 300, 50))
    result = service.reload()
    print(
        {
            "docs": result.documents,
            "chunks": result.chunk_count,
            "top": service.search("what did the cat do", 1),
            "answer": service.answer("what did the cat do"),
            "segment_type": Segment.__name__,
        }
    )
