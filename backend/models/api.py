"""Request and response schemas for the HTTP API."""
from typing import Dict, List

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Body of POST /chat."""
    message: str = Field(..., description="User question")


class Source(BaseModel):
    """A cited chunk in a chat response."""
    filename: str
    similarity: str = Field(..., description="Cosine similarity formatted to 4 decimals")
    preview: str


class ChatResponse(BaseModel):
    """Body returned by POST /chat."""
    answer: str
    sources: List[Source]
    using_knowledgebase: bool
    model: str


class HealthResponse(BaseModel):
    """Body returned by GET /health."""
    status: str
    vector_store_exists: bool
    ollama_available: bool
    message: str


class RootResponse(BaseModel):
    """Body returned by GET /."""
    message: str
    endpoints: Dict[str, str]
