"""HTTP providers for OpenAI-compatible and Ollama endpoints."""

from __future__ import annotations

import logging

import requests

from patternshift.core.errors import GenerationError

logger = logging.getLogger(__name__)


def _post_json(url: str, payload: dict, headers: dict[str, str], timeout: int) -> dict:
    try:
        response = requests.post(url, json=payload, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise GenerationError(f"Request to {url} failed: {e}") from e

    if response.status_code != 200:
        raise GenerationError(
            f"{url} returned HTTP {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
        )
    try:
        return response.json()
    except ValueError as e:
        raise GenerationError(f"{url} returned invalid JSON") from e


class OpenAIProvider:
    """Chat completions against an OpenAI-compatible API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4-turbo-preview",
        base_url: str = "https://api.openai.com/v1",
        temperature: float = 0.7,
        max_tokens: int = 4000,
        timeout: int = 300,
    ):
        if not api_key:
            raise GenerationError("The openai provider requires an API key")
        self.api_key = api_key
        self.model = model or "gpt-4-turbo-preview"
        self.base_url = (base_url or "https://api.openai.com/v1").rstrip("/")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    def complete(self, prompt: str) -> str:
        data = _post_json(
            f"{self.base_url}/chat/completions",
            {
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "temperature": self.temperature,
                "max_tokens": self.max_tokens,
            },
            {"Authorization": f"Bearer {self.api_key}"},
            self.timeout,
        )
        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError("Unexpected response shape from OpenAI") from e


class OllamaProvider:
    """Local models served by Ollama. No API key needed."""

    def __init__(
        self,
        model: str = "codellama",
        base_url: str = "http://localhost:11434",
        temperature: float = 0.7,
        timeout: int = 300,
        context_length: int = 4096,
    ):
        self.model = model or "codellama"
        base_url = (base_url or "http://localhost:11434").rstrip("/")
        # Ollama's native API lives at the root, not /v1
        if base_url.endswith("/v1"):
            base_url = base_url[:-3]
        self.base_url = base_url
        self.temperature = temperature
        self.timeout = timeout
        self.context_length = context_length

    def complete(self, prompt: str) -> str:
        logger.debug("Ollama %s: %d prompt chars", self.model, len(prompt))
        data = _post_json(
            f"{self.base_url}/api/generate",
            {
                "model": self.model,
                "prompt": prompt,
                "stream": False,
                "options": {"temperature": self.temperature, "num_ctx": self.context_length},
            },
            {},
            self.timeout,
        )
        if "error" in data:
            raise GenerationError(f"Ollama error: {data['error']}")
        return data.get("response", "")
