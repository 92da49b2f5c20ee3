"""Shared helpers for talking to an Ollama model-serving process."""
import logging
import subprocess
from typing import Optional
from urllib.parse import urlparse

import httpx

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_HOST = "http://localhost:11434"


def resolve_ollama_host(value: Optional[str]) -> str:
    """
    Validate a configured Ollama base URL.

    Anything that is not an http(s) URL with a host falls back to
    DEFAULT_OLLAMA_HOST with a warning.
    """
    if not value:
        return DEFAULT_OLLAMA_HOST

    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https"):
        logger.warning(f"Invalid OLLAMA_HOST protocol: {parsed.scheme or '(none)'}. Using default.")
        return DEFAULT_OLLAMA_HOST
    if not parsed.netloc:
        logger.warning(f"Invalid OLLAMA_HOST URL: {value}. Using default.")
        return DEFAULT_OLLAMA_HOST

    return value.rstrip("/")


def connection_help(host: str) -> str:
    """Operator guidance for an unreachable Ollama service."""
    return (
        f"Cannot connect to Ollama service at {host}. Please ensure Ollama is installed "
        f"(ollama --version), the service is running (ollama serve) and reachable "
        f"(curl {host}/api/tags)."
    )


def model_matches(listed_name: str, model: str) -> bool:
    """Exact name match, or a tagged variant such as `llama3:latest`."""
    return listed_name == model or listed_name.startswith(f"{model}:")


def check_ollama_availability(host: str, model: str, timeout: float = 5.0) -> bool:
    """
    Check that Ollama is running and `model` has been pulled.

    Queries /api/tags first; if the HTTP API cannot be reached, falls back
    to the `ollama list` command.

    Args:
        host: Ollama base URL
        model: Model name to look for
        timeout: HTTP timeout in seconds

    Returns:
        True if the model is available
    """
    try:
        with httpx.Client(timeout=timeout) as client:
            response = client.get(f"{host}/api/tags")
    except httpx.HTTPError as e:
        logger.debug(f"Ollama HTTP API unreachable at {host}: {e}")
        return _check_with_cli(model)

    if response.status_code != 200:
        logger.warning(f"Ollama /api/tags returned status {response.status_code}")
        return False

    try:
        data = response.json()
    except ValueError:
        logger.warning("Ollama /api/tags returned a non-JSON body")
        return False

    models = data.get("models") if isinstance(data, dict) else None
    if isinstance(models, list):
        return any(model_matches(entry.get("name") or "", model) for entry in models if isinstance(entry, dict))

    # No model list in the response: the service itself is up
    return True


def _check_with_cli(model: str) -> bool:
    try:
        result = subprocess.run(
            ["ollama", "list"],
            capture_output=True,
            text=True,
            timeout=10,
            check=True
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"`ollama list` failed: {e}")
        return False

    return model in result.stdout
