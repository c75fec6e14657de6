"""Anthropic Messages API provider."""

from __future__ import annotations

import logging

from patternshift.core.errors import GenerationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class AnthropicProvider:
    """Generates completions through the anthropic SDK."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 4000,
        temperature: float = 0.7,
    ):
        self.api_key = api_key
        self.model = model or DEFAULT_MODEL
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._client = None

    def _get_client(self):
        """Lazy-initialize the Anthropic client."""
        if self._client is None:
            try:
                import anthropic
            except ImportError as e:
                raise GenerationError(
                    "The anthropic provider requires the anthropic package. "
                    "Install with: pip install patternshift[anthropic]"
                ) from e
            self._client = anthropic.Anthropic(api_key=self.api_key)
        return self._client

    def complete(self, prompt: str) -> str:
        client = self._get_client()
        try:
            response = client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise GenerationError(f"Anthropic request failed: {e}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )
        if not text:
            raise GenerationError("Anthropic returned an empty completion")
        return text
