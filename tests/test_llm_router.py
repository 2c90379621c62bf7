"""Tests for LLM router."""

import pytest
from unittest.mock import patch, MagicMock


def test_route_to_ollama():
    """Should route to Ollama for local provider."""
    from llm_router import LLMRouter

    router = LLMRouter()
    llm_config = {"provider": "ollama", "model": "llama3.1:8b"}

    with patch("llm_router.ollama") as mock_ollama:
        client = mock_ollama.Client.return_value
        client.chat.return_value = {"message": {"content": "Hello!"}}

        response = router.chat(
            llm_config=llm_config,
            messages=[{"role": "user", "content": "Hi"}],
            system_prompt="You are helpful."
        )

        assert response == "Hello!"
        mock_ollama.Client.assert_called_once_with(host=router.ollama_host)
        client.chat.assert_called_once()
        kwargs = client.chat.call_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": "You are helpful."}
        assert "format" not in kwargs


def test_ollama_json_mode():
    """chat_json should ask Ollama for JSON output."""
    from llm_router import LLMRouter

    router = LLMRouter()

    with patch("llm_router.ollama") as mock_ollama:
        client = mock_ollama.Client.return_value
        client.chat.return_value = {"message": {"content": "{}"}}

        router.chat_json({"provider": "ollama", "model": "m"}, [], "sys")

        assert client.chat.call_args.kwargs["format"] == "json"


def test_route_to_redpill():
    """Should route to RedPill for cloud provider."""
    from llm_router import LLMRouter

    router = LLMRouter()
    llm_config = {"provider": "redpill", "model": "z-ai/glm-4.6"}

    with patch("llm_router.httpx.post") as mock_post:
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = {
            "choices": [{"message": {"content": "Hello from cloud!"}}]
        }
        mock_post.return_value = mock_response

        response = router.chat_json(
            llm_config=llm_config,
            messages=[{"role": "user", "content": "Hi"}],
            system_prompt="You are helpful."
        )

        assert response == "Hello from cloud!"
        body = mock_post.call_args.kwargs["json"]
        assert body["model"] == "z-ai/glm-4.6"
        assert body["response_format"] == {"type": "json_object"}
        assert mock_post.call_args.args[0].endswith("/chat/completions")


def test_redpill_http_error_propagates():
    """HTTP errors should be raised to the caller."""
    import httpx
    from llm_router import LLMRouter

    router = LLMRouter()
    request = httpx.Request("POST", "https://api.redpill.ai/v1/chat/completions")
    response = httpx.Response(500, request=request, text="boom")

    with patch("llm_router.httpx.post", return_value=response):
        with pytest.raises(httpx.HTTPStatusError):
            router.chat({"provider": "redpill", "model": "m"}, [], "sys")


def test_invalid_provider():
    """Should raise error for unknown provider."""
    from llm_router import LLMRouter

    router = LLMRouter()
    llm_config = {"provider": "unknown", "model": "some-model"}

    with pytest.raises(ValueError, match="Unknown LLM provider"):
        router.chat(
            llm_config=llm_config,
            messages=[{"role": "user", "content": "Hi"}],
            system_prompt="Test"
        )
