"""Builds a fresh vector store snapshot from the knowledgebase."""
import logging
from typing import List

from models.chunk import Chunk, EmbeddedChunk
from models.snapshot import VectorStoreSnapshot
from services.chunking_engine import ChunkingEngine
from services.document_loader import DocumentLoader
from services.embedding_model import EmbeddingProvider
from services.errors import InvalidInputError

logger = logging.getLogger(__name__)


class IndexBuilder:
    """Load, chunk and embed every document into a new snapshot."""

    def __init__(
        self,
        document_loader: DocumentLoader,
        chunking_engine: ChunkingEngine,
        embedding_model: EmbeddingProvider
    ):
        self.document_loader = document_loader
        self.chunking_engine = chunking_engine
        self.embedding_model = embedding_model

    def build(self) -> VectorStoreSnapshot:
        """
        Re-embed every chunk of every document currently in the knowledgebase.

        Returns:
            A complete snapshot; nothing is reused from an earlier build

        Raises:
            InvalidInputError: If the directory is missing or holds no markdown files
            EmbeddingUnavailableError: If any chunk cannot be embedded
        """
        documents = self.document_loader.load_documents()
        if not documents:
            raise InvalidInputError(
                f"No markdown files found in {self.document_loader.docs_directory}",
                details={"path": str(self.document_loader.docs_directory)}
            )

        logger.info("Chunking documents...")
        chunks = self.chunking_engine.chunk_documents(documents)
        logger.info(f"Total chunks: {len(chunks)}")

        logger.info(f"Generating embeddings with model: {self.embedding_model.model_name}")
        embedded = self.embed_chunks(chunks)

        return VectorStoreSnapshot.build(
            chunks=embedded,
            embedding_model=self.embedding_model.model_name,
            chunk_size=self.chunking_engine.chunk_size,
            chunk_overlap=self.chunking_engine.chunk_overlap,
            source_files=[document.filename for document in documents]
        )

    def embed_chunks(self, chunks: List[Chunk]) -> List[EmbeddedChunk]:
        """Embed chunks one at a time, in order."""
        embedded = []
        total = len(chunks)
        for idx, chunk in enumerate(chunks, start=1):
            logger.info(f"Embedding chunk {idx}/{total}...")
            embedding = self.embedding_model.embed_text(chunk.text)
            embedded.append(EmbeddedChunk.from_chunk(chunk, embedding))
        return embedded
