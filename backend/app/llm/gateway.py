"""Multi-provider LLM gateway: selection, timing and usage accounting.

The gateway owns the live adapters and the usage log. It never retries: a
failed call is recorded and the adapter's error is re-raised unchanged.
"""
from __future__ import annotations

import logging
import time
from typing import Iterable

import httpx

from backend.app.config import LLMConfig, PROVIDER_ORDER
from backend.app.constants import PROVIDER_TEST_MAX_TOKENS, PROVIDER_TEST_PROMPT
from backend.app.llm.errors import LLMError, NoProvidersAvailable
from backend.app.llm.providers import create_provider
from backend.app.llm.types import (
    GenerationOptions,
    LLMProvider,
    LLMResponse,
    ProviderStatus,
    ProviderTestResult,
    UsageMetric,
    UsageStats,
)
from backend.app.llm.usage import UsageLog

logger = logging.getLogger(__name__)


class LLMGateway:
    def __init__(
        self,
        config: LLMConfig,
        providers: Iterable[LLMProvider] | None = None,
        usage_log: UsageLog | None = None,
        client: httpx.Client | None = None,
    ):
        self.config = config
        self._usage_log = usage_log or UsageLog()
        if providers is None:
            providers = [create_provider(name, config, client=client) for name in PROVIDER_ORDER]
        self._all: dict[str, LLMProvider] = {p.name: p for p in providers}
        # Only adapters with credentials are live
        self._live: dict[str, LLMProvider] = {
            name: p for name, p in self._all.items() if p.is_available()
        }
        logger.info(
            "LLM gateway ready: live=%s enabled=%s default=%s",
            sorted(self._live),
            config.enabled_providers(),
            config.default_provider,
        )

    @property
    def usage_log(self) -> UsageLog:
        return self._usage_log

    @property
    def live_providers(self) -> list[str]:
        return [name for name in PROVIDER_ORDER if name in self._live] + [
            name for name in self._live if name not in PROVIDER_ORDER
        ]

    def _usable(self, name: str | None) -> bool:
        return bool(name) and name in self._live and self.config.is_enabled(name)

    def select_provider(self, requested: str | None = None) -> LLMProvider:
        """Explicit -> default -> first enabled+live in fixed order -> NoProvidersAvailable."""
        if requested and self._usable(requested):
            return self._live[requested]
        if requested:
            logger.info("Requested provider %s is not live and enabled; falling back", requested)
        if self._usable(self.config.default_provider):
            return self._live[self.config.default_provider]
        for name in PROVIDER_ORDER:
            if self._usable(name):
                return self._live[name]
        raise NoProvidersAvailable()

    def generate(
        self,
        prompt: str,
        provider: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        timeout_ms: int | None = None,
    ) -> LLMResponse:
        adapter = self.select_provider(provider)
        options = GenerationOptions(
            max_tokens=max_tokens, temperature=temperature, timeout_ms=timeout_ms
        )
        start = time.monotonic()
        try:
            response = adapter.generate(prompt, options)
        except Exception as exc:
            self._usage_log.record(
                UsageMetric(
                    provider=adapter.name,
                    model=adapter.model,
                    tokens_used=0,
                    cost_estimate=0.0,
                    latency_ms=int((time.monotonic() - start) * 1000),
                    success=False,
                    error_type=getattr(exc, "code", type(exc).__name__),
                )
            )
            raise

        self._usage_log.record(
            UsageMetric(
                provider=response.provider,
                model=response.model,
                tokens_used=response.tokens_used,
                cost_estimate=response.cost_estimate,
                latency_ms=int((time.monotonic() - start) * 1000),
                success=True,
            )
        )
        return response

    def list_providers(self) -> list[ProviderStatus]:
        statuses = []
        for name in PROVIDER_ORDER:
            settings = self.config.get(name)
            adapter = self._all.get(name)
            if settings is None and adapter is None:
                continue
            statuses.append(
                ProviderStatus(
                    name=name,
                    model=adapter.model if adapter is not None else settings.model,
                    available=name in self._live,
                    enabled=self.config.is_enabled(name),
                )
            )
        return statuses

    def get_usage_stats(self) -> UsageStats:
        return self._usage_log.stats()

    def test_all_providers(self) -> dict[str, ProviderTestResult]:
        """Send a tiny prompt to every live adapter; report per-provider outcome without raising."""
        results: dict[str, ProviderTestResult] = {}
        options = GenerationOptions(max_tokens=PROVIDER_TEST_MAX_TOKENS)
        for name in self.live_providers:
            try:
                self._live[name].generate(PROVIDER_TEST_PROMPT, options)
                results[name] = ProviderTestResult(available=True)
            except LLMError as exc:
                logger.warning("Provider test failed for %s: %s", name, exc)
                results[name] = ProviderTestResult(available=False, error=exc.message)
            except Exception as exc:
                logger.warning("Provider test failed for %s: %s", name, exc, exc_info=True)
                results[name] = ProviderTestResult(available=False, error=str(exc) or type(exc).__name__)
        return results

    def close(self) -> None:
        for adapter in self._all.values():
            close = getattr(adapter, "close", None)
            if callable(close):
                close()
