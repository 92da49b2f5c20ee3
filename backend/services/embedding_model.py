"""Embedding model integration with the Ollama embed API."""
import time
import logging
from typing import List, Optional, Protocol

import httpx

from config import OLLAMA_HOST, OLLAMA_EMBEDDING_MODEL, OLLAMA_TIMEOUT, OLLAMA_MAX_RETRIES
from services.errors import EmbeddingUnavailableError, InvalidInputError
from services.ollama import resolve_ollama_host, connection_help, check_ollama_availability

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    """Anything that turns text into a fixed-length vector."""

    model_name: str

    def embed_text(self, text: str) -> List[float]:
        ...


class EmbeddingModel:
    """Client for an embedding model served by Ollama."""

    def __init__(
        self,
        host: Optional[str] = OLLAMA_HOST,
        model_name: str = OLLAMA_EMBEDDING_MODEL,
        max_retries: int = OLLAMA_MAX_RETRIES,
        initial_delay: float = 1.0,
        timeout: float = OLLAMA_TIMEOUT
    ):
        """
        Initialize the embedding model client.

        Args:
            host: Ollama base URL (validated, falls back to localhost)
            model_name: Ollama embedding model (default: nomic-embed-text)
            max_retries: Total attempts for transport errors and 503 responses
            initial_delay: Initial delay in seconds for exponential backoff
            timeout: Request timeout in seconds
        """
        self.host = resolve_ollama_host(host)
        self.model_name = model_name
        self.max_retries = max(1, max_retries)
        self.initial_delay = initial_delay
        self.timeout = timeout
        self.api_url = f"{self.host}/api/embed"

        logger.info(f"Initialized EmbeddingModel with model: {model_name} at {self.host}")

    def embed_text(self, text: str) -> List[float]:
        """
        Generate embedding for a single text string.

        Args:
            text: Text to embed

        Returns:
            Embedding vector as list of floats

        Raises:
            InvalidInputError: If text is empty
            EmbeddingUnavailableError: If Ollama is unreachable or the model is not loaded
        """
        if not text or not text.strip():
            raise InvalidInputError("Text cannot be empty")

        return self._embed_with_retry(text)

    def is_available(self) -> bool:
        """Whether Ollama is running and the embedding model is pulled."""
        return check_ollama_availability(self.host, self.model_name)

    def _embed_with_retry(self, text: str) -> List[float]:
        """
        Call /api/embed, retrying transport errors and 503s with exponential backoff.

        Raises:
            EmbeddingUnavailableError: On any other failure or when attempts run out
        """
        payload = {
            "model": self.model_name,
            "input": text
        }

        delay = self.initial_delay
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                start_time = time.time()

                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.api_url, json=payload)

                elapsed = time.time() - start_time

            except httpx.TimeoutException as e:
                last_error = e
                logger.error(f"Embedding request timed out after {self.timeout}s "
                             f"(attempt {attempt + 1}/{self.max_retries})")
            except httpx.TransportError as e:
                last_error = e
                logger.error(f"Network error calling {self.api_url}: {e} "
                             f"(attempt {attempt + 1}/{self.max_retries})")
            else:
                # Service up but model still loading
                if response.status_code == 503:
                    last_error = httpx.HTTPStatusError(
                        "503 Service Unavailable", request=response.request, response=response
                    )
                    logger.warning(f"Embedding model busy (503) on attempt {attempt + 1}/{self.max_retries}")
                else:
                    return self._parse_response(response, elapsed)

            if attempt < self.max_retries - 1:
                time.sleep(delay)
                delay = min(delay * 2, 60.0)

        if isinstance(last_error, httpx.TransportError):
            message = connection_help(self.host)
        else:
            message = f"Failed to generate embedding after {self.max_retries} attempts: {last_error}"
        logger.error(message)
        raise EmbeddingUnavailableError(
            message,
            details={
                "model": self.model_name,
                "host": self.host,
                "attempts": self.max_retries,
                "original_error": str(last_error)
            }
        ) from last_error

    def _parse_response(self, response: httpx.Response, elapsed: float) -> List[float]:
        if response.status_code != 200:
            error_msg = f"Ollama API error: {response.status_code}"
            if response.text:
                error_msg += f" - {response.text}"
            logger.error(error_msg)
            raise EmbeddingUnavailableError(
                f"Failed to generate embedding: {error_msg}",
                details={"model": self.model_name, "status_code": response.status_code}
            )

        try:
            data = response.json()
        except ValueError as e:
            raise EmbeddingUnavailableError(
                "Ollama embedding API returned a non-JSON body",
                details={"model": self.model_name}
            ) from e

        # /api/embed returns a list of embeddings, one per input
        embeddings = data.get("embeddings") if isinstance(data, dict) else None
        if not isinstance(embeddings, list) or not embeddings or not embeddings[0]:
            keys = sorted(data.keys()) if isinstance(data, dict) else []
            logger.warning(f"Unexpected embedding response format. Keys: {keys}")
            raise EmbeddingUnavailableError(
                "Unexpected response format from Ollama embedding API",
                details={"model": self.model_name, "response_keys": keys}
            )

        try:
            embedding = [float(value) for value in embeddings[0]]
        except (TypeError, ValueError) as e:
            logger.warning(f"Non-numeric embedding in Ollama response: {e}")
            raise EmbeddingUnavailableError(
                "Unexpected response format from Ollama embedding API: embedding is not a list of numbers",
                details={"model": self.model_name, "original_error": str(e)}
            ) from e

        logger.debug(f"Generated embedding ({len(embeddings[0])} dims) in {elapsed:.2f}s")
        return embedding
