"""Bounded in-process usage log with on-demand aggregate stats."""
from __future__ import annotations

import logging
import threading
from collections import deque

from backend.app.constants import USAGE_LOG_CAPACITY
from backend.app.llm.types import ProviderBreakdown, UsageMetric, UsageStats

logger = logging.getLogger(__name__)


class UsageLog:
    """Append-only log of the most recent ``capacity`` metrics (oldest evicted first).

    Process-lifetime only; safe for concurrent appenders.
    """

    def __init__(self, capacity: int = USAGE_LOG_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._lock = threading.Lock()
        self._metrics: deque[UsageMetric] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._metrics.maxlen or 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)

    def record(self, metric: UsageMetric) -> None:
        with self._lock:
            self._metrics.append(metric)
        logger.info(
            "LLM usage: %s (%s) - %d tokens - $%.4f - %dms - %s%s",
            metric.provider,
            metric.model,
            metric.tokens_used,
            metric.cost_estimate,
            metric.latency_ms,
            "SUCCESS" if metric.success else "FAILED",
            f" [{metric.error_type}]" if metric.error_type else "",
        )

    def snapshot(self) -> list[UsageMetric]:
        """Copy of retained metrics, oldest first."""
        with self._lock:
            return list(self._metrics)

    def clear(self) -> None:
        with self._lock:
            self._metrics.clear()

    def stats(self) -> UsageStats:
        metrics = self.snapshot()
        if not metrics:
            return UsageStats()

        breakdown: dict[str, ProviderBreakdown] = {}
        for m in metrics:
            entry = breakdown.setdefault(m.provider, ProviderBreakdown())
            entry.requests += 1
            entry.tokens += m.tokens_used
            entry.cost += m.cost_estimate

        total = len(metrics)
        successful = sum(1 for m in metrics if m.success)
        return UsageStats(
            total_requests=total,
            successful_requests=successful,
            success_rate=successful / total,
            total_tokens=sum(m.tokens_used for m in metrics),
            total_cost=sum(m.cost_estimate for m in metrics),
            average_response_time=sum(m.latency_ms for m in metrics) / total,
            provider_breakdown=breakdown,
        )
