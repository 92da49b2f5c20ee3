"""Unit tests for the shared Ollama helpers."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import subprocess
import pytest
from unittest.mock import Mock, patch, MagicMock
import httpx
from services.ollama import (
    DEFAULT_OLLAMA_HOST,
    resolve_ollama_host,
    model_matches,
    check_ollama_availability,
)


def mock_get(mock_client_class, result):
    mock_client = MagicMock()
    mock_client.__enter__.return_value.get.side_effect = [result]
    mock_client_class.return_value = mock_client


def tags_response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


class TestResolveOllamaHost:
    """Test suite for host validation."""

    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_uses_default(self, value):
        assert resolve_ollama_host(value) == DEFAULT_OLLAMA_HOST

    @pytest.mark.parametrize("value", ["ftp://host:21", "localhost:11434", "not a url", "http://"])
    def test_invalid_uses_default(self, value):
        assert resolve_ollama_host(value) == DEFAULT_OLLAMA_HOST

    def test_valid_https(self):
        assert resolve_ollama_host("https://ollama.internal:443") == "https://ollama.internal:443"

    def test_trailing_slash_removed(self):
        assert resolve_ollama_host("http://127.0.0.1:11434/") == "http://127.0.0.1:11434"


class TestModelMatches:
    """Test suite for model name matching."""

    def test_exact(self):
        assert model_matches("llama3", "llama3")

    def test_tagged(self):
        assert model_matches("llama3:latest", "llama3")

    def test_prefix_without_tag_separator(self):
        assert not model_matches("llama3.1:8b", "llama3")


class TestCheckOllamaAvailability:
    """Test suite for check_ollama_availability."""

    @patch('httpx.Client')
    def test_model_listed(self, mock_client_class):
        mock_get(mock_client_class, tags_response({"models": [{"name": "nomic-embed-text:latest"}]}))
        assert check_ollama_availability("http://localhost:11434", "nomic-embed-text") is True

    @patch('httpx.Client')
    def test_model_missing(self, mock_client_class):
        mock_get(mock_client_class, tags_response({"models": [{"name": "mistral:7b"}]}))
        assert check_ollama_availability("http://localhost:11434", "llama3") is False

    @patch('httpx.Client')
    def test_no_model_list_means_running(self, mock_client_class):
        mock_get(mock_client_class, tags_response({}))
        assert check_ollama_availability("http://localhost:11434", "llama3") is True

    @patch('httpx.Client')
    def test_model_without_name_is_skipped(self, mock_client_class):
        """A listed model with a null name does not break the check."""
        mock_get(mock_client_class, tags_response({"models": [{"name": None}, {"name": "llama3:latest"}]}))
        assert check_ollama_availability("http://localhost:11434", "llama3") is True

    @patch('httpx.Client')
    def test_only_unnamed_models(self, mock_client_class):
        mock_get(mock_client_class, tags_response({"models": [{"name": None}, {}]}))
        assert check_ollama_availability("http://localhost:11434", "llama3") is False

    @patch('httpx.Client')
    def test_error_status(self, mock_client_class):
        mock_get(mock_client_class, tags_response({}, status_code=500))
        assert check_ollama_availability("http://localhost:11434", "llama3") is False

    @patch('services.ollama.subprocess.run')
    @patch('httpx.Client')
    def test_falls_back_to_cli(self, mock_client_class, mock_run):
        mock_get(mock_client_class, httpx.ConnectError("refused"))
        mock_run.return_value = Mock(stdout="NAME            ID\nllama3:latest   365c0bd3c000\n")

        assert check_ollama_availability("http://localhost:11434", "llama3") is True
        assert mock_run.call_args[0][0] == ["ollama", "list"]

    @patch('services.ollama.subprocess.run')
    @patch('httpx.Client')
    def test_cli_missing(self, mock_client_class, mock_run):
        mock_get(mock_client_class, httpx.ConnectError("refused"))
        mock_run.side_effect = FileNotFoundError("ollama")

        assert check_ollama_availability("http://localhost:11434", "llama3") is False

    @patch('services.ollama.subprocess.run')
    @patch('httpx.Client')
    def test_cli_error(self, mock_client_class, mock_run):
        mock_get(mock_client_class, httpx.ConnectError("refused"))
        mock_run.side_effect = subprocess.CalledProcessError(1, ["ollama", "list"])

        assert check_ollama_availability("http://localhost:11434", "llama3") is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
