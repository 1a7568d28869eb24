"""Adapter for Google's Gemini ``generateContent`` REST API."""
from __future__ import annotations

from typing import Any

from backend.app.llm.errors import ContentFiltered, EmptyResponse
from backend.app.llm.providers.base import ErrorRule, HTTPProvider, ProviderRequest


class GeminiProvider(HTTPProvider):
    name = "gemini"
    label = "Gemini"
    ERROR_RULES = (
        ErrorRule(None, "API_KEY_INVALID", "auth"),
        ErrorRule(401, None, "auth"),
        ErrorRule(403, None, "auth"),
        ErrorRule(429, None, "rate_limit"),
        ErrorRule(None, "RATE_LIMIT_EXCEEDED", "rate_limit"),
        ErrorRule(None, "RESOURCE_EXHAUSTED", "rate_limit"),
        ErrorRule(400, "exceeds the maximum number of tokens", "context_length"),
        ErrorRule(None, "SAFETY", "content_filtered"),
        ErrorRule(503, None, "unavailable"),
    )

    def build_request(self, prompt: str, max_tokens: int, temperature: float) -> ProviderRequest:
        return ProviderRequest(
            url=f"{self.base_url}/v1beta/models/{self.model}:generateContent",
            payload={
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": temperature,
                    "topK": 1,
                    "topP": 1,
                    "maxOutputTokens": max_tokens,
                },
            },
            headers={
                "x-goog-api-key": self.settings.api_key,
                "content-type": "application/json",
            },
        )

    def parse_response(self, body: dict[str, Any]) -> tuple[str, int | None]:
        feedback = body.get("promptFeedback") or {}
        if feedback.get("blockReason"):
            raise ContentFiltered(self.name, f"Content blocked by safety filters ({feedback['blockReason']})")

        candidates = body.get("candidates") or []
        if not candidates:
            raise EmptyResponse(self.name)
        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        if not text:
            if candidate.get("finishReason") == "SAFETY":
                raise ContentFiltered(self.name)
            raise EmptyResponse(self.name)

        usage = body.get("usageMetadata") or {}
        return text, usage.get("totalTokenCount")
