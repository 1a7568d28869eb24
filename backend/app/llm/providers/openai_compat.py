"""Adapters for OpenAI-compatible chat completion APIs (OpenAI, Groq, xAI Grok)."""
from __future__ import annotations

import logging
from typing import Any

import tiktoken

from backend.app.llm.errors import ContentFiltered, EmptyResponse
from backend.app.llm.providers.base import ErrorRule, HTTPProvider, ProviderRequest
from shared.cache import memoized

logger = logging.getLogger(__name__)


class OpenAICompatProvider(HTTPProvider):
    """Chat completions over ``{base_url}/v1/chat/completions`` with a bearer key."""

    completions_path = "/v1/chat/completions"

    def build_request(self, prompt: str, max_tokens: int, temperature: float) -> ProviderRequest:
        return ProviderRequest(
            url=f"{self.base_url}{self.completions_path}",
            payload={
                "model": self.model,
                "messages": [{"role": "user", "content": prompt}],
                "max_tokens": max_tokens,
                "temperature": temperature,
            },
            headers={
                "content-type": "application/json",
                "authorization": f"Bearer {self.settings.api_key}",
            },
        )

    def parse_response(self, body: dict[str, Any]) -> tuple[str, int | None]:
        choices = body.get("choices") or []
        if not choices:
            raise EmptyResponse(self.name)
        choice = choices[0]
        if choice.get("finish_reason") == "content_filter":
            raise ContentFiltered(self.name, f"Content blocked by {self.label} content policy")
        content = (choice.get("message") or {}).get("content")
        if not content:
            raise EmptyResponse(self.name)
        usage = body.get("usage") or {}
        return content, usage.get("total_tokens")


class OpenAIProvider(OpenAICompatProvider):
    name = "openai"
    label = "OpenAI"
    ERROR_RULES = (
        ErrorRule(401, None, "auth"),
        ErrorRule(429, None, "rate_limit"),
        ErrorRule(400, "context_length_exceeded", "context_length"),
        ErrorRule(400, "content_policy_violation", "content_filtered"),
    )

    def estimate_tokens(self, text: str) -> int:
        encoding = _openai_encoding(self.model)
        if encoding is None:
            return super().estimate_tokens(text)
        return len(encoding.encode(text))


class GroqProvider(OpenAICompatProvider):
    name = "groq"
    label = "Groq"
    ERROR_RULES = (
        ErrorRule(401, None, "auth"),
        ErrorRule(429, None, "rate_limit"),
        ErrorRule(400, "context_length", "context_length"),
        ErrorRule(503, None, "unavailable"),
    )


class GrokProvider(OpenAICompatProvider):
    name = "grok"
    label = "Grok"
    ERROR_RULES = (
        ErrorRule(401, None, "auth"),
        ErrorRule(429, None, "rate_limit"),
        ErrorRule(400, "context_length", "context_length"),
        ErrorRule(503, None, "unavailable"),
    )


def _load_encoding(model: str):
    try:
        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            return tiktoken.get_encoding("o200k_base")
    except Exception as exc:
        logger.warning("tiktoken unavailable for %s, using character estimate: %s", model, exc)
        return None


def _openai_encoding(model: str):
    """tiktoken encoding for ``model``, or None when it cannot be loaded (e.g. offline)."""
    return memoized(f"tiktoken_encoding:{model}", lambda: _load_encoding(model))
