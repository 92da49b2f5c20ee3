"""Retrieval engine for orchestrating query embedding and chunk retrieval."""
import logging
from typing import List

from models.chunk import ScoredChunk
from services.vector_store import VectorStore
from services.embedding_model import EmbeddingProvider
from config import TOP_K

logger = logging.getLogger(__name__)


class RetrievalEngine:
    """Embed a query and rank the stored chunks against it."""

    def __init__(self, vector_store: VectorStore, embedding_model: EmbeddingProvider):
        """
        Initialize the retrieval engine.

        Args:
            vector_store: VectorStore holding the snapshot to search
            embedding_model: Embedding client used for the query
        """
        self.vector_store = vector_store
        self.embedding_model = embedding_model
        logger.info("Initialized RetrievalEngine")

    def retrieve(self, query: str, top_k: int = TOP_K) -> List[ScoredChunk]:
        """
        Retrieve the top_k chunks most similar to the query.

        The snapshot is loaded before the query is embedded, so a missing
        store fails without calling the embedding model. Errors propagate
        unchanged so callers can tell a model mismatch from an outage.

        Args:
            query: User question (validated by the caller)
            top_k: Maximum number of chunks to retrieve

        Returns:
            Scored chunks, most similar first

        Raises:
            StoreUnavailableError: If the snapshot cannot be loaded
            EmbeddingUnavailableError: If the query cannot be embedded
            DimensionMismatchError: If the query and stored embeddings differ in length
        """
        snapshot = self.vector_store.load()
        logger.info(f"Loaded {len(snapshot.chunks)} chunks")

        logger.debug(f"Embedding query: {query[:100]}...")
        query_embedding = self.embedding_model.embed_text(query)

        if snapshot.chunks and snapshot.metadata.embedding_model != self.embedding_model.model_name:
            logger.warning(
                f"Vector store was built with '{snapshot.metadata.embedding_model}' "
                f"but queries use '{self.embedding_model.model_name}'"
            )

        scored_chunks = snapshot.search(query_embedding, top_k=top_k)

        logger.info(
            f"Found {len(scored_chunks)} relevant chunks. Similarities: "
            + ", ".join(f"{chunk.similarity:.4f}" for chunk in scored_chunks)
        )
        return scored_chunks
