"""Data models for the Markdown knowledgebase chat."""
from .document import Document
from .chunk import Chunk, EmbeddedChunk, ScoredChunk
from .snapshot import SnapshotMetadata, VectorStoreSnapshot
from .answer import AnswerResult, SourceReference
from .api import ChatRequest, ChatResponse, HealthResponse, RootResponse, Source

__all__ = [
    "Document",
    "Chunk",
    "EmbeddedChunk",
    "ScoredChunk",
    "SnapshotMetadata",
    "VectorStoreSnapshot",
    "AnswerResult",
    "SourceReference",
    "ChatRequest",
    "ChatResponse",
    "HealthResponse",
    "RootResponse",
    "Source",
]
