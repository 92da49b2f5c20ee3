"""Chunk data models."""
from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass(frozen=True)
class Chunk:
    """A piece of a source document prepared for independent embedding."""
    text: str
    source_id: str  # Originating markdown filename
    index_within_source: int  # Zero-based, document order


@dataclass(frozen=True)
class EmbeddedChunk:
    """Chunk with the embedding produced for it at build time."""
    text: str
    source_id: str
    index_within_source: int
    embedding: List[float]

    @classmethod
    def from_chunk(cls, chunk: Chunk, embedding: List[float]) -> "EmbeddedChunk":
        return cls(
            text=chunk.text,
            source_id=chunk.source_id,
            index_within_source=chunk.index_within_source,
            embedding=list(embedding)
        )

    def to_record(self) -> Dict[str, Any]:
        """Serialize using the vector store file's key names."""
        return {
            "text": self.text,
            "filename": self.source_id,
            "chunkIndex": self.index_within_source,
            "embedding": self.embedding
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "EmbeddedChunk":
        return cls(
            text=record["text"],
            source_id=record["filename"],
            index_within_source=int(record["chunkIndex"]),
            embedding=[float(value) for value in record["embedding"]]
        )


@dataclass(frozen=True)
class ScoredChunk:
    """Embedded chunk with its similarity to a query."""
    chunk: EmbeddedChunk
    similarity: float  # Cosine similarity, [-1, 1]

    @property
    def text(self) -> str:
        return self.chunk.text

    @property
    def source_id(self) -> str:
        return self.chunk.source_id
