"""Adapter for Anthropic's Messages API (Claude models)."""
from __future__ import annotations

from typing import Any

from backend.app.llm.errors import ContentFiltered, EmptyResponse, GenerationError
from backend.app.llm.providers.base import ErrorRule, HTTPProvider, ProviderRequest

ANTHROPIC_VERSION = "2023-06-01"


class ClaudeProvider(HTTPProvider):
    name = "claude"
    label = "Claude"
    ERROR_RULES = (
        ErrorRule(401, None, "auth"),
        ErrorRule(429, None, "rate_limit"),
        ErrorRule(400, "max_tokens", "context_length"),
        ErrorRule(400, "prompt is too long", "context_length"),
        ErrorRule(None, "content_filtered", "content_filtered"),
        # 529: Anthropic "overloaded"
        ErrorRule(529, None, "unavailable"),
    )

    def build_request(self, prompt: str, max_tokens: int, temperature: float) -> ProviderRequest:
        return ProviderRequest(
            url=f"{self.base_url}/v1/messages",
            payload={
                "model": self.model,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "messages": [{"role": "user", "content": prompt}],
            },
            headers={
                "x-api-key": self.settings.api_key,
                "anthropic-version": ANTHROPIC_VERSION,
                "content-type": "application/json",
            },
        )

    def parse_response(self, body: dict[str, Any]) -> tuple[str, int | None]:
        if body.get("stop_reason") == "refusal":
            raise ContentFiltered(self.name)
        blocks = body.get("content") or []
        if not blocks:
            raise EmptyResponse(self.name)
        first = blocks[0]
        if not isinstance(first, dict) or first.get("type") != "text":
            raise GenerationError(
                "Invalid response format from Claude", self.name, code="INVALID_RESPONSE_FORMAT"
            )
        text = first.get("text") or ""
        if not text:
            raise EmptyResponse(self.name)

        usage = body.get("usage") or {}
        input_tokens = usage.get("input_tokens")
        output_tokens = usage.get("output_tokens")
        reported = None
        if input_tokens is not None and output_tokens is not None:
            reported = input_tokens + output_tokens
        return text, reported
