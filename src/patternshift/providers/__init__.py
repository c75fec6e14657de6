"""Text-generation providers.

``create_generator`` builds the provider named in ``[provider]`` of
patternshift.toml. Supported names: ``claude-code``, ``anthropic``,
``openai``, ``ollama``.
"""

from __future__ import annotations

import os

from patternshift.core.config import ProviderConfig
from patternshift.core.errors import ConfigError, GenerationError
from patternshift.providers.anthropic_provider import AnthropicProvider
from patternshift.providers.base import TextGenerator
from patternshift.providers.claude_cli import ClaudeCLIProvider
from patternshift.providers.http_providers import OllamaProvider, OpenAIProvider

PROVIDER_NAMES = ("claude-code", "anthropic", "openai", "ollama")


def create_generator(config: ProviderConfig) -> TextGenerator:
    """Instantiate the configured provider."""
    name = config.name
    if name == "claude-code":
        return ClaudeCLIProvider(model=config.model, timeout=config.timeout)
    if name == "anthropic":
        key = config.api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        if not key:
            raise GenerationError("The anthropic provider requires ANTHROPIC_API_KEY")
        return AnthropicProvider(
            api_key=key,
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )
    if name == "openai":
        return OpenAIProvider(
            api_key=config.api_key or os.environ.get("OPENAI_API_KEY", ""),
            model=config.model,
            base_url=config.base_url or os.environ.get("OPENAI_API_BASE", ""),
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
        )
    if name == "ollama":
        return OllamaProvider(
            model=config.model,
            base_url=config.base_url or os.environ.get("OLLAMA_HOST", ""),
            temperature=config.temperature,
            timeout=config.timeout,
            context_length=config.context_length,
        )
    raise ConfigError(f"Unknown provider '{name}'. Choose one of: {', '.join(PROVIDER_NAMES)}")


__all__ = [
    "TextGenerator",
    "create_generator",
    "ClaudeCLIProvider",
    "AnthropicProvider",
    "OpenAIProvider",
    "OllamaProvider",
    "PROVIDER_NAMES",
]
