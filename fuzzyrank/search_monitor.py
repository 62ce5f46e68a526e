"""
Search performance monitoring.

Keeps a bounded log of per-search metrics for reports (latency, cache hit
rate, failing queries, selection rate) and, when enabled, mirrors them into a
Prometheus registry owned by the monitor.
"""

import threading
from collections import Counter, deque
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence

from loguru import logger
from prometheus_client import CollectorRegistry, Counter as PromCounter, Histogram, generate_latest

from config.settings import config

from .models import IndexedDocument, SearchResult
from .search_analytics import QueryCount

DEFAULT_SLOW_THRESHOLD_MS = 100.0


@dataclass
class SearchMetric:
    """One recorded search."""
    timestamp: datetime
    query: str
    query_length: int
    result_count: int
    search_time_ms: float
    selected_result: Optional[str] = None
    user_action: str = "search"
    search_kind: Optional[str] = None
    cache_hit: bool = False


@dataclass(frozen=True)
class SlowQuery:
    query: str
    time_ms: float


@dataclass(frozen=True)
class PerformanceReport:
    avg_search_time: float
    median_search_time: float
    slow_queries: List[SlowQuery] = field(default_factory=list)
    cache_hit_rate: float = 0.0
    popular_queries: List[QueryCount] = field(default_factory=list)
    failed_queries: List[QueryCount] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SuccessMetrics:
    total_searches: int
    successful_searches: int
    success_rate: float
    avg_results_per_search: float
    selection_rate: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SearchMonitor:
    """Records search metrics and summarizes search performance."""

    def __init__(self,
                 max_metrics: Optional[int] = None,
                 enable_prometheus: Optional[bool] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.max_metrics = max_metrics or config.MONITOR_MAX_METRICS
        self._clock = clock
        self._metrics: deque = deque(maxlen=self.max_metrics)
        self._lock = threading.RLock()

        if enable_prometheus is None:
            enable_prometheus = config.ENABLE_PROMETHEUS_METRICS

        # Performance metrics with Prometheus (if enabled)
        if enable_prometheus:
            self.registry = CollectorRegistry()
            self.query_counter = PromCounter(
                'fuzzyrank_queries_total',
                'Total number of search queries',
                ['cache'],
                registry=self.registry
            )
            self.zero_result_counter = PromCounter(
                'fuzzyrank_zero_result_queries_total',
                'Number of queries that returned no results',
                registry=self.registry
            )
            self.selection_counter = PromCounter(
                'fuzzyrank_selections_total',
                'Number of recorded result selections',
                registry=self.registry
            )
            self.query_duration = Histogram(
                'fuzzyrank_query_duration_seconds',
                'Duration of search queries',
                registry=self.registry
            )
        else:
            self.registry = None

    def record_search(self,
                      query: str,
                      results: Sequence[SearchResult],
                      search_time_ms: float,
                      cache_hit: bool = False) -> None:
        """Record one search and its outcome."""
        metric = SearchMetric(
            timestamp=self._clock(),
            query=query.strip().lower(),
            query_length=len(query),
            result_count=len(results),
            search_time_ms=search_time_ms,
            search_kind=results[0].kind.value if results else None,
            cache_hit=cache_hit,
        )
        with self._lock:
            self._metrics.append(metric)

        if self.registry is not None:
            self.query_counter.labels(cache="hit" if cache_hit else "miss").inc()
            if not results:
                self.zero_result_counter.inc()
            self.query_duration.observe(search_time_ms / 1000.0)

    def record_selection(self, query: str, document: IndexedDocument) -> None:
        """Mark the latest search for ``query`` as ending in a selection."""
        normalized = query.strip().lower()
        with self._lock:
            for metric in reversed(self._metrics):
                if metric.query == normalized and metric.user_action == "search":
                    metric.user_action = "select"
                    metric.selected_result = document.id
                    break
            else:
                logger.debug(f"No recorded search for selection on '{normalized}'")

        if self.registry is not None:
            self.selection_counter.inc()

    def _recent(self, hours_back: float) -> List[SearchMetric]:
        cutoff = self._clock() - timedelta(hours=hours_back)
        with self._lock:
            return [m for m in self._metrics if m.timestamp > cutoff]

    def performance_report(self, hours_back: float = 24) -> PerformanceReport:
        """Latency, cache and query statistics for the last ``hours_back`` hours."""
        recent = self._recent(hours_back)
        times = sorted(m.search_time_ms for m in recent)

        avg_time = sum(times) / len(times) if times else 0.0
        median_time = times[len(times) // 2] if times else 0.0

        p95_index = int(len(times) * 0.95)
        slow_threshold = times[p95_index] if p95_index < len(times) else DEFAULT_SLOW_THRESHOLD_MS
        slow_queries = sorted(
            (SlowQuery(m.query, m.search_time_ms) for m in recent if m.search_time_ms > slow_threshold),
            key=lambda s: -s.time_ms
        )[:10]

        cache_hits = sum(1 for m in recent if m.cache_hit)
        cache_hit_rate = cache_hits / len(recent) * 100 if recent else 0.0

        popular = Counter(m.query for m in recent).most_common(10)
        failed = Counter(m.query for m in recent if m.result_count == 0).most_common(10)

        return PerformanceReport(
            avg_search_time=round(avg_time, 2),
            median_search_time=round(median_time, 2),
            slow_queries=slow_queries,
            cache_hit_rate=round(cache_hit_rate, 2),
            popular_queries=[QueryCount(q, c) for q, c in popular],
            failed_queries=[QueryCount(q, c) for q, c in failed],
        )

    def success_metrics(self) -> SuccessMetrics:
        with self._lock:
            metrics = list(self._metrics)

        total = len(metrics)
        successful = sum(1 for m in metrics if m.result_count > 0)
        selections = sum(1 for m in metrics if m.user_action == "select")

        return SuccessMetrics(
            total_searches=total,
            successful_searches=successful,
            success_rate=round(successful / total * 100, 2) if total else 0.0,
            avg_results_per_search=round(sum(m.result_count for m in metrics) / total, 2) if total else 0.0,
            selection_rate=round(selections / total * 100, 2) if total else 0.0,
        )

    def smart_suggestions(self, current_query: str = "") -> List[str]:
        """Popular and previously successful queries extending the current input."""
        current = current_query.strip().lower()
        suggestions: List[str] = []

        for item in self.performance_report(72).popular_queries:
            if current in item.query and item.query != current and item.query not in suggestions:
                suggestions.append(item.query)

        with self._lock:
            similar = [
                m.query for m in self._metrics
                if current in m.query and m.result_count > 0 and m.query != current
            ][:3]
        for query in similar:
            if query not in suggestions:
                suggestions.append(query)

        return suggestions[:6]

    def export_metrics(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [asdict(m) for m in self._metrics]

    def clear(self) -> None:
        with self._lock:
            self._metrics.clear()

    def metrics_text(self) -> str:
        """Prometheus exposition text, or an empty string when disabled."""
        if self.registry is None:
            return ""
        return generate_latest(self.registry).decode('utf-8')

    def __len__(self) -> int:
        with self._lock:
            return len(self._metrics)
