"""Configuration management for the Markdown knowledgebase chat."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

BACKEND_DIR = Path(__file__).parent

# Ollama Configuration
OLLAMA_HOST = os.getenv("OLLAMA_HOST", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3")
OLLAMA_EMBEDDING_MODEL = os.getenv("OLLAMA_EMBEDDING_MODEL", "nomic-embed-text")
OLLAMA_TIMEOUT = float(os.getenv("OLLAMA_TIMEOUT", "120"))
OLLAMA_MAX_RETRIES = int(os.getenv("OLLAMA_MAX_RETRIES", "1"))

# Server Configuration
PORT = int(os.getenv("PORT", "3001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:5173"
).split(",")

# Storage Configuration
KNOWLEDGEBASE_DIR = os.getenv("KNOWLEDGEBASE_DIR", str(BACKEND_DIR.parent / "knowledgebase"))
VECTOR_STORE_PATH = os.getenv("VECTOR_STORE_PATH", str(BACKEND_DIR / "vector_store.json"))
VECTOR_STORE_CACHE = os.getenv("VECTOR_STORE_CACHE", "true").lower() in ("1", "true", "yes")

# Chunking Configuration
CHUNK_SIZE = int(os.getenv("CHUNK_SIZE", "2000"))  # characters
CHUNK_OVERLAP = int(os.getenv("CHUNK_OVERLAP", "200"))  # characters

# Retrieval Configuration
TOP_K = int(os.getenv("RAG_TOP_K", "5"))
PREVIEW_CHARS = int(os.getenv("PREVIEW_CHARS", "150"))
