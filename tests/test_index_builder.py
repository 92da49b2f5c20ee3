"""Unit tests for IndexBuilder."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from unittest.mock import Mock
from services.chunking_engine import ChunkingEngine
from services.document_loader import DocumentLoader
from services.index_builder import IndexBuilder
from services.errors import EmbeddingUnavailableError, InvalidInputError


class FakeEmbeddingModel:
    """Deterministic embedder: length and vowel count of the text."""

    model_name = "fake-embed"

    def __init__(self):
        self.calls = []

    def embed_text(self, text):
        self.calls.append(text)
        return [float(len(text)), float(sum(text.count(v) for v in "aeiou")), 1.0]


@pytest.fixture
def knowledgebase(tmp_path):
    (tmp_path / "pricing.md").write_text(
        "# Pricing\n\nPro plan costs $29/month.\n\nEnterprise is custom.", encoding="utf-8"
    )
    (tmp_path / "faq.md").write_text("# FAQ\n\n" + "\n\n".join(["q" * 30] * 6), encoding="utf-8")
    return tmp_path


def make_builder(directory, embedder, chunk_size=64, chunk_overlap=8):
    return IndexBuilder(
        document_loader=DocumentLoader(docs_directory=str(directory)),
        chunking_engine=ChunkingEngine(chunk_size=chunk_size, chunk_overlap=chunk_overlap),
        embedding_model=embedder
    )


class TestIndexBuilder:
    """Test suite for IndexBuilder."""

    def test_build_snapshot(self, knowledgebase):
        embedder = FakeEmbeddingModel()

        snapshot = make_builder(knowledgebase, embedder).build()

        assert snapshot.metadata.total_chunks == len(snapshot.chunks)
        assert snapshot.metadata.source_files == ["faq.md", "pricing.md"]
        assert snapshot.metadata.embedding_model == "fake-embed"
        assert snapshot.metadata.chunk_size == 64
        assert snapshot.metadata.chunk_overlap == 8
        assert embedder.calls == [chunk.text for chunk in snapshot.chunks]
        assert all(len(chunk.embedding) == 3 for chunk in snapshot.chunks)

    def test_chunks_grouped_and_numbered(self, knowledgebase):
        snapshot = make_builder(knowledgebase, FakeEmbeddingModel()).build()

        sources = [chunk.source_id for chunk in snapshot.chunks]
        assert sources == sorted(sources)
        for source in set(sources):
            indexes = [c.index_within_source for c in snapshot.chunks if c.source_id == source]
            assert indexes == list(range(len(indexes)))

    def test_rebuild_is_identical(self, knowledgebase):
        """Rebuilding unchanged documents yields the same chunks."""
        first = make_builder(knowledgebase, FakeEmbeddingModel()).build()
        second = make_builder(knowledgebase, FakeEmbeddingModel()).build()

        assert first.chunks == second.chunks

    def test_document_without_chunks_is_listed(self, knowledgebase):
        (knowledgebase / "empty.md").write_text("\n\n\n", encoding="utf-8")

        snapshot = make_builder(knowledgebase, FakeEmbeddingModel()).build()

        assert "empty.md" in snapshot.metadata.source_files
        assert all(chunk.source_id != "empty.md" for chunk in snapshot.chunks)

    def test_no_markdown_files(self, tmp_path):
        (tmp_path / "readme.txt").write_text("not markdown", encoding="utf-8")
        embedder = FakeEmbeddingModel()

        with pytest.raises(InvalidInputError, match="No markdown files found"):
            make_builder(tmp_path, embedder).build()

        assert embedder.calls == []

    def test_embedding_failure_aborts_build(self, knowledgebase):
        embedder = Mock()
        embedder.model_name = "fake-embed"
        embedder.embed_text.side_effect = EmbeddingUnavailableError("Cannot connect to Ollama")

        with pytest.raises(EmbeddingUnavailableError):
            make_builder(knowledgebase, embedder).build()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
