"""Chat orchestrator: retrieval, prompt assembly and completion for one query."""
import logging
from typing import List

from models.answer import AnswerResult, SourceReference
from models.chunk import ScoredChunk
from services.errors import InvalidInputError
from services.llm_client import LLMClient, CompletionProvider
from services.retrieval_engine import RetrievalEngine
from config import TOP_K, PREVIEW_CHARS

logger = logging.getLogger(__name__)

SOURCE_DELIMITER = "\n\n---\n\n"


class ChatOrchestrator:
    """Answers a question from the knowledgebase in a single request/response cycle."""

    def __init__(
        self,
        retrieval_engine: RetrievalEngine,
        llm_client: CompletionProvider,
        top_k: int = TOP_K,
        preview_chars: int = PREVIEW_CHARS
    ):
        self.retrieval_engine = retrieval_engine
        self.llm_client = llm_client
        self.top_k = top_k
        self.preview_chars = preview_chars

    def answer(self, query: str) -> AnswerResult:
        """
        Answer a query grounded in the retrieved chunks.

        Either returns a complete answer with its sources or raises exactly
        one error; there is no answer-without-context fallback.

        Args:
            query: User question

        Returns:
            AnswerResult with the completion text and cited sources

        Raises:
            InvalidInputError: If the query is empty (before any external call)
            StoreUnavailableError: If no vector store snapshot can be loaded
            EmbeddingUnavailableError: If the query cannot be embedded
            DimensionMismatchError: If the store was built with another embedding model
            CompletionUnavailableError: If the chat model cannot answer
        """
        if not query or not query.strip():
            raise InvalidInputError("Message is required")

        logger.info(f"Query: {query[:100]}")

        retrieved = self.retrieval_engine.retrieve(query, top_k=self.top_k)

        system_prompt = LLMClient.build_system_prompt(self.build_context(retrieved))

        logger.info(f"Generating response with {self.llm_client.model_name}...")
        completion = self.llm_client.generate(system_prompt, query)

        return AnswerResult(
            answer_text=completion.text,
            sources=[
                SourceReference(
                    source_id=chunk.source_id,
                    similarity=chunk.similarity,
                    preview=chunk.text[:self.preview_chars]
                )
                for chunk in retrieved
            ],
            using_knowledgebase=True,
            model=self.llm_client.model_name
        )

    @staticmethod
    def build_context(chunks: List[ScoredChunk]) -> str:
        """Label each chunk with its rank and source and join them in rank order."""
        return SOURCE_DELIMITER.join(
            f"[Source {idx} - {chunk.source_id}]\n{chunk.text}"
            for idx, chunk in enumerate(chunks, start=1)
        )
