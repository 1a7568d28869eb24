"""Provider adapters, one per external text-generation API."""
from __future__ import annotations

import httpx

from backend.app.config import LLMConfig, PROVIDER_ORDER
from backend.app.llm.providers.base import HTTPProvider
from backend.app.llm.providers.claude import ClaudeProvider
from backend.app.llm.providers.gemini import GeminiProvider
from backend.app.llm.providers.openai_compat import GrokProvider, GroqProvider, OpenAIProvider

PROVIDER_CLASSES: dict[str, type[HTTPProvider]] = {
    "gemini": GeminiProvider,
    "openai": OpenAIProvider,
    "claude": ClaudeProvider,
    "groq": GroqProvider,
    "grok": GrokProvider,
}


def create_provider(name: str, config: LLMConfig, client: httpx.Client | None = None) -> HTTPProvider:
    """Factory: create a provider adapter by name."""
    settings = config.get(name)
    if settings is None or name not in PROVIDER_CLASSES:
        raise NotImplementedError(
            f"Provider '{name}' not supported. Supported: {', '.join(PROVIDER_ORDER)}."
        )
    return PROVIDER_CLASSES[name](settings, client=client)


__all__ = [
    "PROVIDER_CLASSES",
    "ClaudeProvider",
    "GeminiProvider",
    "GrokProvider",
    "GroqProvider",
    "HTTPProvider",
    "OpenAIProvider",
    "create_provider",
]
