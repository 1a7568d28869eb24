"""Shared HTTP plumbing for provider adapters.

Each adapter declares how to build a request, how to read a response, and an
explicit ``ERROR_RULES`` table mapping HTTP failures onto the shared taxonomy.
Transport exceptions never escape: they become :class:`GenerationError`.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, NamedTuple

import httpx

from backend.app.config import ProviderSettings
from backend.app.llm.errors import (
    AuthError,
    ContentFiltered,
    ContextLengthExceeded,
    GenerationError,
    LLMError,
    RateLimitError,
)
from backend.app.llm.types import GenerationOptions, LLMResponse, estimate_cost, estimate_tokens

logger = logging.getLogger(__name__)


class ErrorRule(NamedTuple):
    """Match an HTTP failure by status and/or a marker in the body, mapping it to an error kind.

    ``status=None`` matches any status; ``marker=None`` matches any body.
    Kinds: auth, rate_limit, context_length, content_filtered, unavailable.
    """

    status: int | None
    marker: str | None
    kind: str


@dataclass(frozen=True)
class ProviderRequest:
    url: str
    payload: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)


def parse_retry_after(value: str | None) -> float | None:
    """Seconds from a Retry-After header; HTTP-date forms are ignored."""
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


class HTTPProvider:
    """Base adapter: availability, option resolution, timing and error normalization."""

    name = ""
    label = ""
    ERROR_RULES: tuple[ErrorRule, ...] = ()

    def __init__(self, settings: ProviderSettings, client: httpx.Client | None = None):
        self.settings = settings
        self.model = settings.model
        self.base_url = settings.base_url
        self.client = client or httpx.Client(timeout=settings.timeout_ms / 1000)

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ------------------------------------------------------------------
    # Capability set
    # ------------------------------------------------------------------

    def is_available(self) -> bool:
        return bool(self.settings.api_key)

    def estimate_tokens(self, text: str) -> int:
        return estimate_tokens(text)

    def generate(self, prompt: str, options: GenerationOptions | None = None) -> LLMResponse:
        if not self.is_available():
            raise AuthError(self.name)

        options = options or GenerationOptions()
        max_tokens = options.max_tokens or self.settings.max_tokens
        temperature = options.temperature if options.temperature is not None else self.settings.temperature
        timeout_ms = options.timeout_ms or self.settings.timeout_ms

        start = time.monotonic()
        request = self.build_request(prompt, max_tokens, temperature)
        body = self._post(request, timeout_ms)
        try:
            content, reported_tokens = self.parse_response(body)
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise GenerationError(
                f"Invalid response format from {self.label}: {exc}", self.name, code="INVALID_RESPONSE"
            ) from exc
        latency_ms = int((time.monotonic() - start) * 1000)

        # Actual usage when the provider reports it, otherwise an estimate
        tokens_used = reported_tokens if reported_tokens is not None else self.estimate_tokens(prompt + content)
        return LLMResponse(
            content=content,
            provider=self.name,
            model=self.model,
            tokens_used=tokens_used,
            cost_estimate=estimate_cost(tokens_used, self.settings.cost_per_1k_tokens),
            latency_ms=latency_ms,
        )

    # ------------------------------------------------------------------
    # Provider-specific hooks
    # ------------------------------------------------------------------

    def build_request(self, prompt: str, max_tokens: int, temperature: float) -> ProviderRequest:
        raise NotImplementedError

    def parse_response(self, body: dict[str, Any]) -> tuple[str, int | None]:
        """Return (content, provider-reported total tokens or None)."""
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Transport + error normalization
    # ------------------------------------------------------------------

    def _post(self, request: ProviderRequest, timeout_ms: int) -> dict[str, Any]:
        try:
            response = self.client.post(
                request.url,
                json=request.payload,
                headers=request.headers,
                timeout=timeout_ms / 1000,
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("%s request timed out (model=%s): %s", self.label, self.model, exc)
            raise GenerationError(
                f"{self.label} request timed out after {timeout_ms}ms",
                self.name,
                code="TIMEOUT",
                retryable=True,
            ) from exc
        except httpx.ConnectError as exc:
            logger.error("Cannot connect to %s at %s: %s", self.label, self.base_url, exc)
            raise GenerationError(
                f"Cannot connect to {self.label} API at {self.base_url}",
                self.name,
                code="NETWORK_ERROR",
                retryable=True,
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise self.classify_http_error(exc.response) from exc
        except httpx.HTTPError as exc:
            logger.error("%s network error: %s", self.label, exc)
            raise GenerationError(
                f"{self.label} network error: {exc}",
                self.name,
                code="NETWORK_ERROR",
                retryable=True,
            ) from exc

        try:
            body = response.json()
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError (non UTF-8 body) are both ValueError
            logger.error(
                "%s response was not valid JSON (status %d, first 500 chars): %s",
                self.label,
                response.status_code,
                response.text[:500],
            )
            raise GenerationError(
                f"{self.label} returned non-JSON response", self.name, code="INVALID_RESPONSE"
            ) from exc
        if not isinstance(body, dict):
            raise GenerationError(f"{self.label} returned unexpected payload", self.name, code="INVALID_RESPONSE")
        return body

    def classify_http_error(self, response: httpx.Response) -> LLMError:
        status = response.status_code
        text = response.text or ""
        logger.warning("%s returned HTTP %d: %s", self.label, status, text[:500])
        for rule in self.ERROR_RULES:
            if rule.status is not None and rule.status != status:
                continue
            if rule.marker is not None and rule.marker not in text:
                continue
            return self._error_for_kind(rule.kind, response)
        return GenerationError(
            f"{self.label} generation failed: HTTP {status}: {text[:200]}",
            self.name,
            retryable=status >= 500,
        )

    def _error_for_kind(self, kind: str, response: httpx.Response) -> LLMError:
        if kind == "auth":
            return AuthError(self.name)
        if kind == "rate_limit":
            return RateLimitError(self.name, parse_retry_after(response.headers.get("retry-after")))
        if kind == "context_length":
            return ContextLengthExceeded(self.name)
        if kind == "content_filtered":
            return ContentFiltered(self.name)
        if kind == "unavailable":
            return GenerationError(
                f"{self.label} service temporarily unavailable",
                self.name,
                code="SERVICE_UNAVAILABLE",
                retryable=True,
            )
        raise ValueError(f"Unknown error kind in {self.name} error table: {kind}")
