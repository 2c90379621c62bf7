"""LLM router for directing requests to Ollama or RedPill."""

import sys

import httpx
import ollama

import config


class LLMRouter:
    """Routes LLM requests to appropriate provider."""

    def __init__(self):
        """Initialize router with API configurations."""
        self.redpill_api_key = config.REDPILL_API_KEY
        self.redpill_base_url = config.REDPILL_BASE_URL
        self.ollama_host = config.OLLAMA_HOST
        self.timeout = config.LLM_TIMEOUT_SEC

    def chat(
        self,
        llm_config: dict[str, str],
        messages: list[dict[str, str]],
        system_prompt: str,
        json_mode: bool = False,
    ) -> str:
        """Send chat request to appropriate LLM provider.

        Args:
            llm_config: Dict with 'provider' and 'model' keys.
            messages: List of message dicts with 'role' and 'content'.
            system_prompt: System prompt for the conversation.
            json_mode: Ask the provider to constrain output to a JSON object.

        Returns:
            The assistant's response text.

        Raises:
            ValueError: If provider is unknown.
            httpx.HTTPError: If the RedPill request fails.
        """
        provider = llm_config["provider"]
        model = llm_config["model"]

        if provider == "ollama":
            return self._chat_ollama(model, messages, system_prompt, json_mode)
        elif provider == "redpill":
            return self._chat_redpill(model, messages, system_prompt, json_mode)
        else:
            raise ValueError(f"Unknown LLM provider: {provider}")

    def chat_json(
        self,
        llm_config: dict[str, str],
        messages: list[dict[str, str]],
        system_prompt: str,
    ) -> str:
        """Same as chat(), with JSON output requested."""
        return self.chat(llm_config, messages, system_prompt, json_mode=True)

    def _chat_ollama(
        self,
        model: str,
        messages: list[dict[str, str]],
        system_prompt: str,
        json_mode: bool = False,
    ) -> str:
        """Send request to local Ollama instance."""
        full_messages = [{"role": "system", "content": system_prompt}] + messages

        kwargs = {"format": "json"} if json_mode else {}
        client = ollama.Client(host=self.ollama_host)
        response = client.chat(
            model=model,
            messages=full_messages,
            **kwargs
        )

        return response["message"]["content"]

    def _chat_redpill(
        self,
        model: str,
        messages: list[dict[str, str]],
        system_prompt: str,
        json_mode: bool = False,
    ) -> str:
        """Send request to RedPill API."""
        full_messages = [{"role": "system", "content": system_prompt}] + messages

        body = {
            "model": model,
            "messages": full_messages
        }
        if json_mode:
            body["response_format"] = {"type": "json_object"}

        print(f"LLM call, model={model}...", file=sys.stderr)
        try:
            response = httpx.post(
                f"{self.redpill_base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.redpill_api_key}",
                    "Content-Type": "application/json"
                },
                json=body,
                timeout=self.timeout
            )
            print(f"  HTTP {response.status_code}", file=sys.stderr)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            print(f"  API error: {e.response.status_code} {e.response.text[:500]}", file=sys.stderr)
            raise
        except httpx.RequestError as e:
            print(f"  Request error: {e}", file=sys.stderr)
            raise

        return response.json()["choices"][0]["message"]["content"] or ""
