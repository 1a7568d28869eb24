"""LLM layer: provider adapters, gateway, usage accounting and error taxonomy."""
from backend.app.llm.errors import (
    AuthError,
    ContentFiltered,
    ContextLengthExceeded,
    EmptyResponse,
    GenerationError,
    LLMError,
    NoProvidersAvailable,
    RateLimitError,
)
from backend.app.llm.gateway import LLMGateway
from backend.app.llm.types import GenerationOptions, LLMProvider, LLMResponse, UsageMetric
from backend.app.llm.usage import UsageLog

__all__ = [
    "AuthError",
    "ContentFiltered",
    "ContextLengthExceeded",
    "EmptyResponse",
    "GenerationError",
    "GenerationOptions",
    "LLMError",
    "LLMGateway",
    "LLMProvider",
    "LLMResponse",
    "NoProvidersAvailable",
    "RateLimitError",
    "UsageLog",
    "UsageMetric",
]
