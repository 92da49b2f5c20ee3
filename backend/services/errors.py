"""Error taxonomy for retrieval, storage and model-serving failures."""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ServiceError:
    """Structured error information surfaced to callers and logs."""
    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)


class RAGServiceError(Exception):
    """Base exception carrying a structured ServiceError."""

    code = "INTERNAL_ERROR"
    http_status = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.error = ServiceError(code=self.code, message=message, details=details or {})
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.error.code,
            "message": self.error.message,
            "details": self.error.details
        }


class InvalidInputError(RAGServiceError):
    """Empty query, malformed request or unusable build input."""
    code = "INVALID_INPUT"
    http_status = 400


class StoreUnavailableError(RAGServiceError):
    """The vector store snapshot is missing or unreadable."""
    code = "STORE_UNAVAILABLE"
    http_status = 500


class DimensionMismatchError(RAGServiceError):
    """
    Two embeddings being compared have different lengths.

    Signals that the store was built with a different embedding model
    than the one used at query time.
    """
    code = "DIMENSION_MISMATCH"
    http_status = 500

    def __init__(self, expected: int, actual: int, message: Optional[str] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            message or f"Embedding dimension mismatch: {expected} != {actual}",
            details={"expected_dimension": expected, "actual_dimension": actual}
        )


class EmbeddingUnavailableError(RAGServiceError):
    """The embedding model could not be reached or returned no vector."""
    code = "EMBEDDING_UNAVAILABLE"
    http_status = 503


class CompletionUnavailableError(RAGServiceError):
    """The chat model could not be reached or returned no answer."""
    code = "COMPLETION_UNAVAILABLE"
    http_status = 503
