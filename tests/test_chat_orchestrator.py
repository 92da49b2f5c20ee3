"""Unit tests for ChatOrchestrator."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from unittest.mock import Mock
from models.answer import AnswerResult, SourceReference
from models.chunk import EmbeddedChunk, ScoredChunk
from services.chat_orchestrator import ChatOrchestrator, SOURCE_DELIMITER
from services.llm_client import LLMResponse, NO_CONTEXT_ANSWER
from services.errors import (
    CompletionUnavailableError,
    DimensionMismatchError,
    InvalidInputError,
    StoreUnavailableError,
)


def scored(text, source_id, similarity, index=0):
    chunk = EmbeddedChunk(text=text, source_id=source_id, index_within_source=index, embedding=[1.0, 0.0])
    return ScoredChunk(chunk=chunk, similarity=similarity)


@pytest.fixture
def retrieved():
    return [
        scored("Pro plan costs $29/month. " + "x" * 200, "pricing.md", 0.91234),
        scored("Teams of up to 10 users.", "plans.md", 0.75, index=3),
    ]


@pytest.fixture
def mock_retrieval_engine(retrieved):
    engine = Mock()
    engine.retrieve.return_value = retrieved
    return engine


@pytest.fixture
def mock_llm_client():
    client = Mock()
    client.model_name = "llama3"
    client.generate.return_value = LLMResponse(
        text="The Pro plan costs $29/month.",
        tokens_input=120,
        tokens_output=10,
        latency_ms=300,
        model_used="llama3"
    )
    return client


@pytest.fixture
def orchestrator(mock_retrieval_engine, mock_llm_client):
    return ChatOrchestrator(mock_retrieval_engine, mock_llm_client, top_k=5, preview_chars=150)


class TestChatOrchestrator:
    """Test suite for ChatOrchestrator."""

    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    def test_rejects_empty_query_before_external_calls(
        self, orchestrator, mock_retrieval_engine, mock_llm_client, query
    ):
        with pytest.raises(InvalidInputError, match="Message is required"):
            orchestrator.answer(query)

        mock_retrieval_engine.retrieve.assert_not_called()
        mock_llm_client.generate.assert_not_called()

    def test_answer_result(self, orchestrator, retrieved):
        result = orchestrator.answer("How much is Pro?")

        assert isinstance(result, AnswerResult)
        assert result.answer_text == "The Pro plan costs $29/month."
        assert result.using_knowledgebase is True
        assert result.model == "llama3"
        assert result.sources == [
            SourceReference(source_id="pricing.md", similarity=0.91234, preview=retrieved[0].text[:150]),
            SourceReference(source_id="plans.md", similarity=0.75, preview="Teams of up to 10 users."),
        ]
        assert len(result.sources[0].preview) == 150

    def test_retrieves_with_configured_top_k(self, mock_retrieval_engine, mock_llm_client):
        ChatOrchestrator(mock_retrieval_engine, mock_llm_client, top_k=3).answer("question")

        mock_retrieval_engine.retrieve.assert_called_once_with("question", top_k=3)

    def test_prompt_contains_labeled_context_and_raw_query(self, orchestrator, mock_llm_client, retrieved):
        orchestrator.answer("How much is Pro?")

        system_prompt, user_prompt = mock_llm_client.generate.call_args[0]
        assert user_prompt == "How much is Pro?"
        assert f"[Source 1 - pricing.md]\n{retrieved[0].text}" in system_prompt
        assert f"[Source 2 - plans.md]\n{retrieved[1].text}" in system_prompt
        assert system_prompt.index("[Source 1") < system_prompt.index("[Source 2")
        assert NO_CONTEXT_ANSWER in system_prompt

    def test_build_context(self, retrieved):
        context = ChatOrchestrator.build_context(retrieved)

        assert context == (
            f"[Source 1 - pricing.md]\n{retrieved[0].text}"
            + SOURCE_DELIMITER
            + "[Source 2 - plans.md]\nTeams of up to 10 users."
        )

    def test_build_context_empty(self):
        assert ChatOrchestrator.build_context([]) == ""

    def test_store_unavailable_propagates(self, orchestrator, mock_retrieval_engine, mock_llm_client):
        mock_retrieval_engine.retrieve.side_effect = StoreUnavailableError("Vector store not found")

        with pytest.raises(StoreUnavailableError):
            orchestrator.answer("question")

        mock_llm_client.generate.assert_not_called()

    def test_dimension_mismatch_propagates(self, orchestrator, mock_retrieval_engine):
        mock_retrieval_engine.retrieve.side_effect = DimensionMismatchError(expected=768, actual=1024)

        with pytest.raises(DimensionMismatchError):
            orchestrator.answer("question")

    def test_completion_failure_has_no_partial_result(self, orchestrator, mock_llm_client):
        mock_llm_client.generate.side_effect = CompletionUnavailableError("Ollama down")

        with pytest.raises(CompletionUnavailableError, match="Ollama down"):
            orchestrator.answer("question")

    def test_no_chunks_still_uses_knowledgebase(self, orchestrator, mock_retrieval_engine):
        mock_retrieval_engine.retrieve.return_value = []

        result = orchestrator.answer("question")

        assert result.sources == []
        assert result.using_knowledgebase is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
