"""Request/response records shared by the gateway and provider adapters."""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from backend.app.constants import TOKEN_ESTIMATE_CHARS_PER_TOKEN


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def estimate_tokens(text: str) -> int:
    """Rough token count: ~4 characters per token for English text."""
    return math.ceil(len(text or "") / TOKEN_ESTIMATE_CHARS_PER_TOKEN)


def estimate_cost(tokens: int, cost_per_1k_tokens: float) -> float:
    return (tokens / 1000) * (cost_per_1k_tokens or 0.0)


@dataclass(frozen=True)
class GenerationOptions:
    """Per-call overrides; None falls back to the provider's configuration."""

    max_tokens: int | None = None
    temperature: float | None = None
    timeout_ms: int | None = None


@dataclass(frozen=True)
class LLMResponse:
    content: str
    provider: str
    model: str
    tokens_used: int
    cost_estimate: float
    latency_ms: int


@dataclass(frozen=True)
class UsageMetric:
    """One generation call's cost/latency/outcome. Immutable once recorded."""

    provider: str
    model: str
    tokens_used: int
    cost_estimate: float
    latency_ms: int
    success: bool
    timestamp: datetime = field(default_factory=utc_now)
    error_type: str | None = None


@runtime_checkable
class LLMProvider(Protocol):
    """Capability set every provider adapter implements."""

    name: str
    model: str

    def generate(self, prompt: str, options: GenerationOptions | None = None) -> LLMResponse:
        ...

    def is_available(self) -> bool:
        ...

    def estimate_tokens(self, text: str) -> int:
        ...


class ProviderStatus(BaseModel):
    name: str
    model: str
    available: bool
    enabled: bool


class ProviderBreakdown(BaseModel):
    requests: int = 0
    tokens: int = 0
    cost: float = 0.0


class UsageStats(BaseModel):
    total_requests: int = Field(0, serialization_alias="totalRequests")
    successful_requests: int = Field(0, serialization_alias="successfulRequests")
    success_rate: float = Field(0.0, serialization_alias="successRate")
    total_tokens: int = Field(0, serialization_alias="totalTokens")
    total_cost: float = Field(0.0, serialization_alias="totalCost")
    average_response_time: float = Field(0.0, serialization_alias="averageResponseTime")
    provider_breakdown: dict[str, ProviderBreakdown] = Field(
        default_factory=dict, serialization_alias="providerBreakdown"
    )


class ProviderTestResult(BaseModel):
    available: bool
    error: str | None = None
