"""
Document Ingestion Script for the Markdown knowledgebase chat.

This script:
1. Checks that Ollama is running with the embedding model pulled
2. Loads all markdown files from the knowledgebase directory
3. Chunks documents along paragraph boundaries
4. Generates embeddings with Ollama
5. Replaces the vector store JSON file

Usage:
    python ingest_documents.py [--knowledgebase DIR] [--output PATH]
"""
import argparse
import sys
import logging
from pathlib import Path
from typing import List, Optional

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from logger import setup_logging
from services.chunking_engine import ChunkingEngine
from services.document_loader import DocumentLoader
from services.embedding_model import EmbeddingModel
from services.errors import RAGServiceError
from services.index_builder import IndexBuilder
from services.vector_store import VectorStore
from config import (
    KNOWLEDGEBASE_DIR, VECTOR_STORE_PATH, CHUNK_SIZE, CHUNK_OVERLAP,
    OLLAMA_EMBEDDING_MODEL, LOG_LEVEL, LOG_FORMAT
)

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the knowledgebase vector store")
    parser.add_argument("--knowledgebase", default=KNOWLEDGEBASE_DIR,
                        help="Directory containing markdown files")
    parser.add_argument("--output", default=VECTOR_STORE_PATH,
                        help="Vector store JSON file to write")
    parser.add_argument("--model", default=OLLAMA_EMBEDDING_MODEL,
                        help="Ollama embedding model")
    parser.add_argument("--chunk-size", type=int, default=CHUNK_SIZE)
    parser.add_argument("--chunk-overlap", type=int, default=CHUNK_OVERLAP)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main ingestion process. Returns the process exit code."""
    args = parse_args(argv)
    setup_logging(LOG_LEVEL, json_format=LOG_FORMAT == "json")

    try:
        logger.info("=" * 60)
        logger.info("Starting knowledgebase ingestion")
        logger.info("=" * 60)

        # Step 1: Check Ollama
        embedding_model = EmbeddingModel(model_name=args.model)
        logger.info(f"[1/4] Checking Ollama at {embedding_model.host}...")
        if not embedding_model.is_available():
            logger.error(f"Ollama service is not available or model '{args.model}' not found!")
            logger.error("Please ensure:")
            logger.error("  1. Ollama is installed: ollama --version")
            logger.error("  2. Ollama service is running: ollama serve")
            logger.error(f"  3. The embedding model is pulled: ollama pull {args.model}")
            logger.error(f"  4. Test connection with: curl {embedding_model.host}/api/tags")
            return 1
        logger.info(f"✓ Ollama is running and model '{args.model}' is available")

        # Step 2-3: Load, chunk and embed
        logger.info(f"[2/4] Reading markdown files from {args.knowledgebase}...")
        builder = IndexBuilder(
            document_loader=DocumentLoader(docs_directory=args.knowledgebase),
            chunking_engine=ChunkingEngine(chunk_size=args.chunk_size, chunk_overlap=args.chunk_overlap),
            embedding_model=embedding_model
        )
        logger.info("[3/4] Chunking and embedding documents...")
        snapshot = builder.build()
        logger.info("✓ Embeddings generated")

        # Step 4: Save
        logger.info("[4/4] Saving vector store...")
        VectorStore(path=args.output, cache=False).save(snapshot)

        logger.info("=" * 60)
        logger.info("INGESTION COMPLETE!")
        logger.info(f"Documents processed: {len(snapshot.metadata.source_files)}")
        logger.info(f"Total chunks: {snapshot.metadata.total_chunks}")
        logger.info(f"Embedding dimension: {snapshot.embedding_dimension}")
        logger.info(f"Vector store: {args.output}")
        logger.info("=" * 60)
        return 0

    except KeyboardInterrupt:
        logger.warning("Ingestion interrupted by user")
        return 1
    except RAGServiceError as e:
        logger.error(f"Ingestion failed [{e.error.code}]: {e.error.message}")
        return 1
    except Exception as e:
        logger.error(f"Ingestion failed: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
