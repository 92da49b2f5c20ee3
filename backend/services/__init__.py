"""Services for the Markdown knowledgebase chat."""
from .errors import (
    ServiceError,
    RAGServiceError,
    InvalidInputError,
    StoreUnavailableError,
    DimensionMismatchError,
    EmbeddingUnavailableError,
    CompletionUnavailableError,
)
from .document_loader import DocumentLoader
from .chunking_engine import ChunkingEngine, chunk_text
from .similarity import cosine_similarity, search_similar_chunks
from .embedding_model import EmbeddingModel, EmbeddingProvider
from .vector_store import VectorStore
from .llm_client import LLMClient, LLMResponse, CompletionProvider
from .retrieval_engine import RetrievalEngine
from .index_builder import IndexBuilder
from .chat_orchestrator import ChatOrchestrator

__all__ = ['ServiceError', 'RAGServiceError', 'InvalidInputError', 'StoreUnavailableError', 'DimensionMismatchError', 'EmbeddingUnavailableError', 'CompletionUnavailableError', 'DocumentLoader', 'ChunkingEngine', 'chunk_text', 'cosine_similarity', 'search_similar_chunks', 'EmbeddingModel', 'EmbeddingProvider', 'VectorStore', 'LLMClient', 'LLMResponse', 'CompletionProvider', 'RetrievalEngine', 'IndexBuilder', 'ChatOrchestrator']
