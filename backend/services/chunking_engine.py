"""Paragraph-aware chunking with character overlap."""
import logging
import re
from typing import List

from models.document import Document
from models.chunk import Chunk
from config import CHUNK_SIZE, CHUNK_OVERLAP
from services.errors import InvalidInputError

logger = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"
_PARAGRAPH_BOUNDARY = re.compile(r"\n\n+")


def chunk_text(text: str, chunk_size: int = CHUNK_SIZE, overlap: int = CHUNK_OVERLAP) -> List[str]:
    """
    Split text into overlapping chunks along paragraph boundaries.

    Paragraphs are accumulated greedily while the buffer plus the next
    paragraph stays below `chunk_size`. When it would not, the buffer is
    emitted and the next one starts with the last `overlap` characters of
    the emitted buffer. A paragraph is never split, so a single paragraph
    longer than `chunk_size` becomes its own oversized chunk.

    Args:
        text: Raw document text
        chunk_size: Size limit of each chunk in characters
        overlap: Characters carried over from the previous chunk

    Returns:
        List of stripped, non-empty chunk strings in document order

    Raises:
        InvalidInputError: If chunk_size is not positive or overlap is negative
    """
    if chunk_size <= 0:
        raise InvalidInputError("chunk_size must be positive", details={"chunk_size": chunk_size})
    if overlap < 0:
        raise InvalidInputError("overlap cannot be negative", details={"overlap": overlap})

    chunks: List[str] = []
    current_chunk = ""

    for paragraph in _PARAGRAPH_BOUNDARY.split(text):
        if len(current_chunk) + len(paragraph) < chunk_size:
            current_chunk += paragraph + PARAGRAPH_SEPARATOR
            continue

        _flush(chunks, current_chunk)

        # Seed the next chunk with the tail of the one just emitted
        if overlap > 0 and len(current_chunk) > overlap:
            current_chunk = current_chunk[-overlap:] + paragraph + PARAGRAPH_SEPARATOR
        else:
            current_chunk = paragraph + PARAGRAPH_SEPARATOR

    _flush(chunks, current_chunk)
    return chunks


def _flush(chunks: List[str], buffer: str) -> None:
    stripped = buffer.strip()
    if stripped:
        chunks.append(stripped)


class ChunkingEngine:
    """Segments documents into chunks tagged with their source and ordinal."""

    def __init__(self, chunk_size: int = CHUNK_SIZE, chunk_overlap: int = CHUNK_OVERLAP):
        """
        Initialize ChunkingEngine.

        Args:
            chunk_size: Chunk size limit in characters
            chunk_overlap: Overlap between consecutive chunks in characters
        """
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def chunk_document(self, document: Document) -> List[Chunk]:
        """Chunk a single document, numbering chunks from zero."""
        texts = chunk_text(document.content, self.chunk_size, self.chunk_overlap)
        return [
            Chunk(text=text, source_id=document.filename, index_within_source=idx)
            for idx, text in enumerate(texts)
        ]

    def chunk_documents(self, documents: List[Document]) -> List[Chunk]:
        """
        Chunk documents in order.

        Args:
            documents: Loaded markdown documents

        Returns:
            Chunks of every document, grouped by document and in document order
        """
        all_chunks: List[Chunk] = []

        for document in documents:
            chunks = self.chunk_document(document)
            logger.info(f"  {document.filename}: {len(chunks)} chunks")
            all_chunks.extend(chunks)

        logger.info(f"Created {len(all_chunks)} chunks from {len(documents)} documents")
        return all_chunks
