"""LLM client for the Ollama chat API."""
import time
from dataclasses import dataclass
from typing import Optional, Protocol
import logging

import httpx

from config import OLLAMA_HOST, OLLAMA_MODEL, OLLAMA_TIMEOUT
from services.errors import CompletionUnavailableError
from services.ollama import resolve_ollama_host, connection_help, check_ollama_availability

logger = logging.getLogger(__name__)


NO_CONTEXT_ANSWER = "I don't have enough information in the knowledgebase to answer that question."

SYSTEM_PROMPT_TEMPLATE = """You are a helpful assistant that answers questions based ONLY on the provided context from the knowledgebase.

Important rules:
- Answer questions using ONLY the information in the context below
- If the context doesn't contain relevant information, say "{no_context_answer}"
- Do not make up information or use external knowledge
- Be concise and accurate
- Cite the source when possible

Context from knowledgebase:
{context}"""


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str


class CompletionProvider(Protocol):
    """Anything that answers a user prompt under a system prompt."""

    model_name: str

    def generate(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        ...


class LLMClient:
    """Client for interfacing with an Ollama chat model."""

    def __init__(
        self,
        host: Optional[str] = OLLAMA_HOST,
        model_name: str = OLLAMA_MODEL,
        timeout: float = OLLAMA_TIMEOUT
    ):
        """
        Initialize LLM client.

        Args:
            host: Ollama base URL (validated, falls back to localhost)
            model_name: Chat model name (default: llama3)
            timeout: Request timeout in seconds
        """
        self.host = resolve_ollama_host(host)
        self.model_name = model_name
        self.timeout = timeout
        self.api_url = f"{self.host}/api/chat"
        logger.info(f"LLMClient initialized with model: {model_name} at {self.host}")

    def generate(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        """
        Generate a non-streamed chat completion.

        Args:
            system_prompt: System instructions including retrieved context
            user_prompt: Raw user message

        Returns:
            LLMResponse with text, token counts, and latency

        Raises:
            CompletionUnavailableError: If Ollama is unreachable, the model is
                not loaded, or the response is malformed
        """
        start_time = time.time()
        payload = {
            "model": self.model_name,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            "stream": False
        }

        try:
            logger.debug(f"Generating response with model: {self.model_name}")
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.api_url, json=payload)
        except httpx.TimeoutException as e:
            raise self._error(
                f"Chat completion timed out after {self.timeout}s", start_time, e
            ) from e
        except httpx.TransportError as e:
            raise self._error(connection_help(self.host), start_time, e) from e

        latency_ms = int((time.time() - start_time) * 1000)

        if response.status_code != 200:
            error_msg = f"Ollama API error: {response.status_code}"
            if response.text:
                error_msg += f" - {response.text}"
            raise self._error(f"Failed to generate chat completion: {error_msg}", start_time)

        try:
            data = response.json()
            text = data["message"]["content"]
        except (ValueError, KeyError, TypeError) as e:
            raise self._error("Unexpected response format from Ollama chat API", start_time, e) from e

        if not isinstance(text, str):
            raise self._error(
                "Unexpected response format from Ollama chat API: message content is not text", start_time
            )

        tokens_input = int(data.get("prompt_eval_count") or 0)
        tokens_output = int(data.get("eval_count") or 0)

        logger.info(
            f"Generated response: model={self.model_name}, "
            f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
            f"latency={latency_ms}ms"
        )

        return LLMResponse(
            text=text,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            latency_ms=latency_ms,
            model_used=self.model_name
        )

    def is_available(self) -> bool:
        """Whether Ollama is running and the chat model is pulled."""
        return check_ollama_availability(self.host, self.model_name)

    def _error(
        self,
        message: str,
        start_time: float,
        cause: Optional[Exception] = None
    ) -> CompletionUnavailableError:
        latency_ms = int((time.time() - start_time) * 1000)
        details = {
            "model": self.model_name,
            "host": self.host,
            "latency_ms": latency_ms
        }
        if cause is not None:
            details["original_error"] = str(cause)
            details["error_type"] = type(cause).__name__

        logger.error(
            f"Completion error: model={self.model_name}, latency={latency_ms}ms, error={message}",
            extra={"error_code": CompletionUnavailableError.code, "error_details": details}
        )
        return CompletionUnavailableError(message, details=details)

    @staticmethod
    def build_system_prompt(context: str) -> str:
        """
        Build the grounding instruction around the retrieved context.

        Args:
            context: Labeled chunk texts joined by the source delimiter

        Returns:
            System prompt string
        """
        return SYSTEM_PROMPT_TEMPLATE.format(no_context_answer=NO_CONTEXT_ANSWER, context=context)
