"""Provider-independent LLM error taxonomy.

Adapters translate every transport or API failure into one of these classes;
nothing provider-specific (httpx exceptions, raw status codes) escapes an
adapter. ``code`` is the stable identifier recorded in usage metrics.
"""
from __future__ import annotations


class LLMError(Exception):
    """Base class for LLM failures. Carries the originating provider and retryability."""

    code = "LLM_ERROR"
    retryable = False

    def __init__(
        self,
        message: str,
        provider: str,
        code: str | None = None,
        retryable: bool | None = None,
    ):
        self.provider = provider
        if code is not None:
            self.code = code
        if retryable is not None:
            self.retryable = retryable
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class AuthError(LLMError):
    code = "AUTH_ERROR"

    def __init__(self, provider: str, message: str | None = None):
        super().__init__(message or f"Authentication failed for {provider}", provider)


class RateLimitError(LLMError):
    code = "RATE_LIMIT"
    retryable = True

    def __init__(self, provider: str, retry_after: float | None = None):
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded for {provider}", provider)


class ContextLengthExceeded(LLMError):
    code = "CONTEXT_LENGTH_EXCEEDED"

    def __init__(self, provider: str, message: str | None = None):
        super().__init__(message or f"Prompt too long for {provider} model", provider)


class ContentFiltered(LLMError):
    code = "CONTENT_FILTERED"

    def __init__(self, provider: str, message: str | None = None):
        super().__init__(message or f"Content blocked by {provider} safety filters", provider)


class EmptyResponse(LLMError):
    code = "EMPTY_RESPONSE"

    def __init__(self, provider: str):
        super().__init__(f"Empty response from {provider}", provider)


class NoProvidersAvailable(LLMError):
    code = "NO_PROVIDERS_AVAILABLE"

    def __init__(self) -> None:
        super().__init__(
            "No LLM providers are available. Please check your API keys and configuration.",
            "system",
        )


class GenerationError(LLMError):
    """Catch-all for failures that fit no narrower kind (timeouts, 5xx, bad payloads)."""

    code = "GENERATION_ERROR"
