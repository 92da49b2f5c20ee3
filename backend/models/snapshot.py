"""Vector store snapshot models."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from .chunk import EmbeddedChunk, ScoredChunk


@dataclass(frozen=True)
class SnapshotMetadata:
    """Build parameters recorded alongside the embedded chunks."""
    total_chunks: int
    source_files: List[str]
    embedding_model: str
    chunk_size: int
    chunk_overlap: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_chunks": self.total_chunks,
            "files": list(self.source_files),
            "embedding_model": self.embedding_model,
            "chunk_size": self.chunk_size,
            "chunk_overlap": self.chunk_overlap
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SnapshotMetadata":
        return cls(
            total_chunks=int(data["total_chunks"]),
            source_files=list(data["files"]),
            embedding_model=str(data["embedding_model"]),
            chunk_size=int(data["chunk_size"]),
            chunk_overlap=int(data["chunk_overlap"])
        )


@dataclass(frozen=True)
class VectorStoreSnapshot:
    """
    The complete persisted vector store.

    A snapshot is built in one pass and replaced as a whole on rebuild;
    it is never updated in place. `metadata.total_chunks` always equals
    `len(chunks)`.
    """
    chunks: List[EmbeddedChunk]
    metadata: SnapshotMetadata
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if self.metadata.total_chunks != len(self.chunks):
            raise ValueError(
                f"Snapshot metadata reports {self.metadata.total_chunks} chunks "
                f"but contains {len(self.chunks)}"
            )

    @classmethod
    def build(
        cls,
        chunks: List[EmbeddedChunk],
        embedding_model: str,
        chunk_size: int,
        chunk_overlap: int,
        source_files: Optional[List[str]] = None
    ) -> "VectorStoreSnapshot":
        """
        Create a snapshot with metadata derived from the build.

        `source_files` defaults to the distinct sources of `chunks`; pass it
        explicitly to record documents that produced no chunks.
        """
        if source_files is None:
            source_files = []
            for chunk in chunks:
                if chunk.source_id not in source_files:
                    source_files.append(chunk.source_id)

        metadata = SnapshotMetadata(
            total_chunks=len(chunks),
            source_files=source_files,
            embedding_model=embedding_model,
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap
        )
        return cls(chunks=list(chunks), metadata=metadata)

    @property
    def embedding_dimension(self) -> int:
        """Length of the stored embeddings (0 for an empty snapshot)."""
        return len(self.chunks[0].embedding) if self.chunks else 0

    def search(self, query_embedding: Sequence[float], top_k: int = 5) -> List[ScoredChunk]:
        """Rank this snapshot's chunks against a query embedding, most similar first."""
        # Imported here: the services package imports this module
        from services.similarity import search_similar_chunks
        return search_similar_chunks(query_embedding, self.chunks, top_k=top_k)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created_at": self.created_at.isoformat().replace("+00:00", "Z"),
            "chunks": [chunk.to_record() for chunk in self.chunks],
            "metadata": self.metadata.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VectorStoreSnapshot":
        """
        Parse the JSON structure written by `to_dict`.

        Raises:
            KeyError, TypeError, ValueError: If the structure is malformed
        """
        created_at = datetime.fromisoformat(data["created_at"].replace("Z", "+00:00"))
        return cls(
            chunks=[EmbeddedChunk.from_record(record) for record in data["chunks"]],
            metadata=SnapshotMetadata.from_dict(data["metadata"]),
            created_at=created_at
        )
