"""Cosine similarity and flat top-K search over embedded chunks."""
import logging
from typing import List, Sequence

import numpy as np

from models.chunk import EmbeddedChunk, ScoredChunk
from services.errors import DimensionMismatchError, InvalidInputError

logger = logging.getLogger(__name__)


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    Cosine of the angle between two vectors, in float64.

    Returns 0.0 when either vector has zero norm. The result is not
    clamped, so floating-point error may leave it marginally outside [-1, 1].

    Raises:
        DimensionMismatchError: If the vectors differ in length
    """
    if len(vec_a) != len(vec_b):
        raise DimensionMismatchError(expected=len(vec_a), actual=len(vec_b))

    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)

    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    return float(np.dot(a, b)) / (norm_a * norm_b)


def search_similar_chunks(
    query_embedding: Sequence[float],
    chunks: Sequence[EmbeddedChunk],
    top_k: int = 5
) -> List[ScoredChunk]:
    """
    Rank chunks by cosine similarity to the query embedding.

    Every chunk is scored (linear scan). Ties keep the order of `chunks`
    because the sort is stable. A chunk whose embedding length differs
    from the query's fails the whole search; such a store was built with
    a different embedding model and must be rebuilt.

    Args:
        query_embedding: Embedding of the user query
        chunks: Stored chunks in store order
        top_k: Maximum number of results

    Returns:
        min(top_k, len(chunks)) scored chunks, most similar first

    Raises:
        InvalidInputError: If top_k is negative
        DimensionMismatchError: If any chunk embedding has a different length
    """
    if top_k < 0:
        raise InvalidInputError("top_k cannot be negative", details={"top_k": top_k})

    if not chunks:
        return []

    scored = []
    for chunk in chunks:
        if len(chunk.embedding) != len(query_embedding):
            raise DimensionMismatchError(
                expected=len(chunk.embedding),
                actual=len(query_embedding),
                message=(
                    f"Query embedding has {len(query_embedding)} dimensions but chunk "
                    f"{chunk.source_id}#{chunk.index_within_source} has {len(chunk.embedding)}. "
                    "The vector store was likely built with a different embedding model."
                )
            )
        scored.append(ScoredChunk(chunk=chunk, similarity=cosine_similarity(query_embedding, chunk.embedding)))

    # sorted() is stable, reverse=True included
    ranked = sorted(scored, key=lambda item: item.similarity, reverse=True)
    results = ranked[:top_k]

    logger.debug(
        f"Scored {len(scored)} chunks, returning top {len(results)}: "
        + ", ".join(f"{item.similarity:.4f}" for item in results)
    )
    return results
