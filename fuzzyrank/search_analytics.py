"""
Query analytics: frequency, failures, trending queries and session traces.

State lives for the lifetime of the owning engine and is never persisted.
"""

import threading
import uuid
from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from config.settings import config

from .models import IndexedDocument

MIN_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 8


@dataclass(frozen=True)
class QueryCount:
    query: str
    count: int


@dataclass(frozen=True)
class SessionTrace:
    """Queries and selected document ids of one session."""
    session_id: str
    queries: Tuple[str, ...] = ()
    selections: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AnalyticsInsights:
    """Aggregate view of the recorded queries."""
    total_queries: int
    total_failed: int
    success_rate: float
    unique_queries: int
    most_popular: List[QueryCount] = field(default_factory=list)
    most_failed: List[QueryCount] = field(default_factory=list)
    trending: List[QueryCount] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        def counts(items: Iterable[QueryCount]) -> List[Dict[str, Any]]:
            return [{"query": item.query, "count": item.count} for item in items]

        return {
            "total_queries": self.total_queries,
            "total_failed": self.total_failed,
            "success_rate": self.success_rate,
            "unique_queries": self.unique_queries,
            "most_popular": counts(self.most_popular),
            "most_failed": counts(self.most_failed),
            "trending": counts(self.trending),
        }


@dataclass
class _QueryLogEntry:
    query: str
    timestamp: datetime
    result_count: int


class SearchAnalytics:
    """Tracks query frequency, failed queries and per-session traces."""

    def __init__(self,
                 log_size: Optional[int] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.log_size = log_size or config.ANALYTICS_LOG_SIZE
        self._clock = clock
        self._query_counts: Counter = Counter()
        self._failed_counts: Counter = Counter()
        self._query_log: deque = deque(maxlen=self.log_size)
        self._sessions: Dict[str, Dict[str, List[str]]] = {}
        self._lock = threading.RLock()
        self.current_session_id = self._new_session_id()

    @staticmethod
    def _new_session_id() -> str:
        return uuid.uuid4().hex

    def _session(self) -> Dict[str, List[str]]:
        return self._sessions.setdefault(self.current_session_id, {"queries": [], "selections": []})

    def record_query(self, query: str, result_count: int) -> None:
        """Count a query; queries shorter than two characters are ignored."""
        normalized = query.strip().lower()
        if len(normalized) < MIN_QUERY_LENGTH:
            return

        with self._lock:
            self._query_counts[normalized] += 1
            if result_count == 0:
                self._failed_counts[normalized] += 1
            self._query_log.append(_QueryLogEntry(normalized, self._clock(), result_count))
            self._session()["queries"].append(normalized)

    def record_selection(self, query: str, document: IndexedDocument) -> None:
        with self._lock:
            self._session()["selections"].append(document.id)

    def popular_queries(self, limit: int = 10) -> List[QueryCount]:
        with self._lock:
            return [QueryCount(q, c) for q, c in self._query_counts.most_common(limit)]

    def failed_queries(self, limit: int = 10) -> List[QueryCount]:
        with self._lock:
            return [QueryCount(q, c) for q, c in self._failed_counts.most_common(limit)]

    def trending_queries(self, hours_back: float = 24, limit: int = 10) -> List[QueryCount]:
        """Most frequent queries within the last ``hours_back`` hours of the log."""
        cutoff = self._clock() - timedelta(hours=hours_back)
        with self._lock:
            recent = Counter(entry.query for entry in self._query_log if entry.timestamp > cutoff)
        return [QueryCount(q, c) for q, c in recent.most_common(limit)]

    def insights(self) -> AnalyticsInsights:
        with self._lock:
            total_queries = sum(self._query_counts.values())
            total_failed = sum(self._failed_counts.values())
            unique_queries = len(self._query_counts)

        if total_queries > 0:
            success_rate = (total_queries - total_failed) / total_queries * 100
        else:
            success_rate = 100.0

        return AnalyticsInsights(
            total_queries=total_queries,
            total_failed=total_failed,
            success_rate=round(success_rate, 2),
            unique_queries=unique_queries,
            most_popular=self.popular_queries(5),
            most_failed=self.failed_queries(5),
            trending=self.trending_queries(24),
        )

    def suggestions(self, partial: str = "", seeds: Iterable[str] = ()) -> List[str]:
        """Popular, trending and seed queries containing ``partial`` (max 8)."""
        needle = partial.strip().lower()
        candidates = [item.query for item in self.popular_queries(20)]
        candidates += [item.query for item in self.trending_queries(48)]
        candidates += list(seeds)

        suggestions: List[str] = []
        for candidate in candidates:
            if needle and needle not in candidate.lower():
                continue
            if candidate not in suggestions:
                suggestions.append(candidate)
            if len(suggestions) >= MAX_SUGGESTIONS:
                break
        return suggestions

    def new_session(self) -> str:
        """Start a new session and return its id."""
        with self._lock:
            self.current_session_id = self._new_session_id()
        logger.debug(f"Started analytics session {self.current_session_id}")
        return self.current_session_id

    def session(self, session_id: Optional[str] = None) -> SessionTrace:
        with self._lock:
            session_id = session_id or self.current_session_id
            data = self._sessions.get(session_id, {"queries": [], "selections": []})
            return SessionTrace(session_id, tuple(data["queries"]), tuple(data["selections"]))
