"""Per-query latency and cache-hit tracking."""

from __future__ import annotations

import logging
import time
from collections import deque

from pydantic import BaseModel, ConfigDict

from pystorefront._constants import METRICS_HISTORY_SIZE, SLOW_QUERY_THRESHOLD_MS

_logger = logging.getLogger(__name__)


def now_ms() -> float:
    """Monotonic clock in milliseconds; the reference for ``start_time``."""
    return time.monotonic() * 1000.0


class QueryMetrics(BaseModel):
    """Measurements for a single API call."""

    model_config = ConfigDict(frozen=True)

    name: str
    query_time_ms: float
    cache_hit: bool
    query_size: int = 0


class MetricsSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    cache_hits: int
    hit_ratio: float
    mean_query_time_ms: float
    slow_queries: int


class PerformanceTracker:
    """Record query latency, warn on slow calls when diagnostics are verbose."""

    def __init__(
        self,
        *,
        slow_threshold_ms: float = SLOW_QUERY_THRESHOLD_MS,
        verbose: bool = False,
        history_size: int = METRICS_HISTORY_SIZE,
    ) -> None:
        self._slow_threshold_ms = slow_threshold_ms
        self._verbose = verbose
        self._history: deque[QueryMetrics] = deque(maxlen=history_size)

    def record(
        self,
        name: str,
        start_time: float,
        cache_hit: bool,
        payload_size: int | None = None,
    ) -> QueryMetrics:
        """Compute metrics for a call that started at *start_time* (see :func:`now_ms`)."""
        elapsed = max(0.0, now_ms() - start_time)
        metrics = QueryMetrics(
            name=name,
            query_time_ms=elapsed,
            cache_hit=cache_hit,
            query_size=payload_size or 0,
        )
        self._history.append(metrics)

        if self._verbose and elapsed > self._slow_threshold_ms:
            _logger.warning("Slow query detected: %s took %.0fms", name, elapsed)

        return metrics

    def recent(self) -> list[QueryMetrics]:
        return list(self._history)

    def summary(self) -> MetricsSummary:
        history = list(self._history)
        count = len(history)
        hits = sum(1 for m in history if m.cache_hit)
        total_ms = sum(m.query_time_ms for m in history)
        return MetricsSummary(
            count=count,
            cache_hits=hits,
            hit_ratio=(hits / count) if count else 0.0,
            mean_query_time_ms=(total_ms / count) if count else 0.0,
            slow_queries=sum(1 for m in history if m.query_time_ms > self._slow_threshold_ms),
        )
